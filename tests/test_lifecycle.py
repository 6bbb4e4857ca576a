import uuid

import pytest

from api.garage.models import Car, CarStatus
from api.rental.exceptions import InvalidStateError, NotFoundError
from api.rental.models import LOCKSTEP_CAR_STATUS, Rental, RentalStatus
from api.rental.services import calculate_total_price, cancel_rental, confirm_payment, create_rental

pytestmark = pytest.mark.django_db


def assert_lockstep():
    for rental in Rental.objects.open().select_related('car'):
        assert rental.car.status == LOCKSTEP_CAR_STATUS[rental.status]


def car_status(car):
    return Car.objects.get(pk=car.pk).status


def test_total_price_counts_whole_days(car, make_booking):
    booking = make_booking(car, days=3)
    assert calculate_total_price(100000, booking.start_date, booking.end_date) == 300000
    assert booking.total_price == 300000


def test_create_reserves_car(car, customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)

    rental.refresh_from_db()
    assert rental.status == RentalStatus.PENDING_PAYMENT
    assert rental.client == customer
    assert rental.total_price == 300000
    assert car_status(car) == CarStatus.RESERVED
    assert_lockstep()


def test_second_create_on_same_car_fails(car, customer, other_customer, make_booking):
    create_rental(make_booking(car), customer.email)

    with pytest.raises(InvalidStateError):
        create_rental(make_booking(car), other_customer.email)

    assert Rental.objects.count() == 1
    assert car_status(car) == CarStatus.RESERVED
    assert_lockstep()


def test_create_rejects_car_in_maintenance(car, customer, make_booking):
    Car.objects.filter(pk=car.pk).update(status=CarStatus.MAINTENANCE)

    with pytest.raises(InvalidStateError):
        create_rental(make_booking(car), customer.email)

    assert not Rental.objects.exists()
    assert car_status(car) == CarStatus.MAINTENANCE


def test_create_for_unknown_user(car, make_booking):
    with pytest.raises(NotFoundError):
        create_rental(make_booking(car), 'nobody@example.com')

    assert car_status(car) == CarStatus.AVAILABLE


def test_create_for_unknown_car(car, customer, make_booking):
    booking = make_booking(car)
    Car.objects.filter(pk=car.pk).delete()

    with pytest.raises(NotFoundError):
        create_rental(booking, customer.email)

    assert not Rental.objects.exists()


def test_confirm_payment_rents_car(car, customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)

    confirm_payment(rental.id)

    rental.refresh_from_db()
    assert rental.status == RentalStatus.PAID
    assert car_status(car) == CarStatus.RENTED
    assert_lockstep()


def test_confirm_payment_twice_is_rejected(car, customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    confirm_payment(rental.id)

    with pytest.raises(InvalidStateError):
        confirm_payment(rental.id)

    assert car_status(car) == CarStatus.RENTED


def test_confirm_unknown_rental():
    with pytest.raises(NotFoundError):
        confirm_payment(uuid.uuid4())


def test_cancel_pending_deletes_rental(car, customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    rental_id = rental.id

    cancelled = cancel_rental(rental_id)

    assert cancelled.pk is None
    assert not Rental.objects.filter(pk=rental_id).exists()
    assert car_status(car) == CarStatus.AVAILABLE


def test_cancel_paid_keeps_cancelled_row(car, customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    confirm_payment(rental.id)

    cancel_rental(rental.id)

    rental.refresh_from_db()
    assert rental.status == RentalStatus.CANCELLED
    assert rental.total_price == 300000
    assert car_status(car) == CarStatus.AVAILABLE
    assert_lockstep()


def test_cancel_cancelled_rental_leaves_car_alone(car, customer, other_customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    confirm_payment(rental.id)
    cancel_rental(rental.id)
    create_rental(make_booking(car), other_customer.email)

    with pytest.raises(InvalidStateError):
        cancel_rental(rental.id)

    assert car_status(car) == CarStatus.RESERVED
    assert_lockstep()


@pytest.mark.parametrize('rental_id', [uuid.uuid4(), 'not-a-uuid'])
def test_cancel_unknown_rental(rental_id):
    with pytest.raises(NotFoundError):
        cancel_rental(rental_id)


def test_released_car_can_be_booked_again(car, customer, other_customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    cancel_rental(rental.id)

    again = create_rental(make_booking(car), other_customer.email)

    assert again.client == other_customer
    assert car_status(car) == CarStatus.RESERVED

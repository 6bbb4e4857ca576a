from datetime import date, timedelta

import pytest
from rest_framework.test import APIClient

from api.garage.models import Car, CarStatus
from api.rental.models import Rental, RentalStatus
from api.rental.serializers import BookingRequestSerializer
from api.rental.services import confirm_payment, create_rental
from api.rental.validators import booking_start_date

pytestmark = pytest.mark.django_db

TODAY = date(2030, 5, 31)


def booking_data(car, start, days=3):
    return {
        'car_id': str(car.id),
        'start_date': start.isoformat(),
        'end_date': (start + timedelta(days=days)).isoformat(),
    }


def test_booking_computes_total_price(car):
    serializer = BookingRequestSerializer(
        data=booking_data(car, date(2030, 6, 1)), context={'today': TODAY}
    )

    assert serializer.is_valid(), serializer.errors
    booking = serializer.to_booking()
    assert booking.car_id == car.id
    assert booking.total_price == 300000


@pytest.mark.parametrize('start', [TODAY, date(2030, 6, 2)])
def test_booking_must_start_tomorrow(car, start):
    serializer = BookingRequestSerializer(
        data=booking_data(car, start), context={'today': TODAY}
    )

    assert not serializer.is_valid()
    assert 'start_date' in serializer.errors


def test_booking_end_must_follow_start(car):
    serializer = BookingRequestSerializer(
        data=booking_data(car, date(2030, 6, 1), days=0), context={'today': TODAY}
    )

    assert not serializer.is_valid()
    assert 'end_date' in serializer.errors


def test_booking_rejects_unavailable_car(car):
    Car.objects.filter(pk=car.pk).update(status=CarStatus.MAINTENANCE)
    serializer = BookingRequestSerializer(
        data=booking_data(car, date(2030, 6, 1)), context={'today': TODAY}
    )

    assert not serializer.is_valid()
    assert 'car_id' in serializer.errors


def test_start_date_defaults_to_server_tomorrow():
    assert booking_start_date(TODAY) == date(2030, 6, 1)


def test_book_car_returns_payment_url(customer_api, car):
    response = customer_api.post(
        '/api/rentals/', booking_data(car, booking_start_date()), format='json'
    )

    assert response.status_code == 201, response.data
    assert response.data['status'] == RentalStatus.PENDING_PAYMENT
    assert response.data['total_price'] == 300000
    assert response.data['payment_url'] == f"/api/payments/process/?rentalId={response.data['id']}"
    assert Car.objects.get(pk=car.pk).status == CarStatus.RESERVED


def test_book_reserved_car_fails(customer_api, car):
    customer_api.post('/api/rentals/', booking_data(car, booking_start_date()), format='json')

    response = customer_api.post(
        '/api/rentals/', booking_data(car, booking_start_date()), format='json'
    )

    assert response.status_code == 400
    assert Rental.objects.count() == 1


def test_admin_cannot_book(admin_api, car):
    response = admin_api.post(
        '/api/rentals/', booking_data(car, booking_start_date()), format='json'
    )

    assert response.status_code == 403


def test_my_rentals_lists_own_only(customer_api, customer, other_customer, car, brand, car_model, make_booking):
    other_car = Car.objects.create(license_plate='Е777КХ18', price_per_day=90000, brand=brand, model=car_model)
    mine = create_rental(make_booking(car), customer.email)
    create_rental(make_booking(other_car), other_customer.email)

    response = customer_api.get('/api/rentals/my/')

    assert response.status_code == 200
    assert [r['id'] for r in response.data] == [str(mine.id)]


def test_owner_can_pay_and_cancel(customer_api, customer, car, make_booking):
    rental = create_rental(make_booking(car), customer.email)

    paid = customer_api.post(f'/api/rentals/{rental.id}/pay/')
    assert paid.status_code == 200
    assert paid.data['status'] == RentalStatus.PAID

    cancelled = customer_api.post(f'/api/rentals/{rental.id}/cancel/')
    assert cancelled.status_code == 200
    assert cancelled.data['status'] == RentalStatus.CANCELLED
    assert Car.objects.get(pk=car.pk).status == CarStatus.AVAILABLE


def test_cancel_pending_reports_deletion(customer_api, customer, car, make_booking):
    rental = create_rental(make_booking(car), customer.email)

    response = customer_api.post(f'/api/rentals/{rental.id}/cancel/')

    assert response.status_code == 200
    assert response.data == {'id': str(rental.id), 'deleted': True}


def test_cancel_twice_conflicts(customer_api, customer, car, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    confirm_payment(rental.id)
    customer_api.post(f'/api/rentals/{rental.id}/cancel/')

    response = customer_api.post(f'/api/rentals/{rental.id}/cancel/')

    assert response.status_code == 409


def test_stranger_cannot_touch_rental(other_customer, customer, car, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    client = APIClient()
    client.force_authenticate(other_customer)

    response = client.post(f'/api/rentals/{rental.id}/cancel/')

    assert response.status_code == 403
    assert Rental.objects.filter(pk=rental.pk).exists()


def test_anonymous_cannot_book(client, car):
    response = client.post('/api/rentals/', booking_data(car, booking_start_date()))
    assert response.status_code in (401, 403)

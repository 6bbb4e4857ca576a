"""End-to-end runs through the HTTP API and the sweeper."""
from datetime import timedelta

import pytest
from django.utils import timezone

from api.garage.models import Car, CarStatus
from api.rental.models import Rental, RentalStatus
from api.rental.sweeper import expire_pending_rentals
from api.rental.validators import booking_start_date

pytestmark = pytest.mark.django_db


def book(api, car, days=3):
    start = booking_start_date()
    response = api.post('/api/rentals/', {
        'car_id': str(car.id),
        'start_date': start.isoformat(),
        'end_date': (start + timedelta(days=days)).isoformat(),
    }, format='json')
    assert response.status_code == 201, response.data
    return response.data


def pay(api, rental_id):
    return api.post('/api/payments/process/', {
        'rentalId': rental_id,
        'cardNumber': '5555555555554444',
        'cardHolder': 'IVAN IVANOV',
        'expiryDate': '01/32',
        'cvv': '321',
    }, format='json')


def car_status(car):
    return Car.objects.get(pk=car.pk).status


def test_booking_reserves_car_for_three_days(customer_api, car):
    rental = book(customer_api, car)

    assert rental['total_price'] == 300000
    assert rental['status'] == RentalStatus.PENDING_PAYMENT
    assert car_status(car) == CarStatus.RESERVED


def test_unpaid_booking_expires_after_payment_window(customer_api, car):
    rental = book(customer_api, car)
    created_at = Rental.objects.get(pk=rental['id']).created_at

    expire_pending_rentals(now=created_at + timedelta(minutes=4))
    assert Rental.objects.get(pk=rental['id']).status == RentalStatus.PENDING_PAYMENT
    assert car_status(car) == CarStatus.RESERVED

    expire_pending_rentals(now=created_at + timedelta(minutes=6))
    assert not Rental.objects.filter(pk=rental['id']).exists()
    assert car_status(car) == CarStatus.AVAILABLE


def test_paid_booking_survives_sweeps(customer_api, car):
    rental = book(customer_api, car)
    created_at = Rental.objects.get(pk=rental['id']).created_at

    response = pay(customer_api, rental['id'])
    assert response.status_code == 200

    for minutes in (6, 60, 24 * 60):
        result = expire_pending_rentals(now=created_at + timedelta(minutes=minutes))
        assert not result.changed

    assert Rental.objects.get(pk=rental['id']).status == RentalStatus.PAID
    assert car_status(car) == CarStatus.RENTED


def test_cancelled_paid_booking_is_kept(customer_api, car):
    rental = book(customer_api, car)
    pay(customer_api, rental['id'])

    response = customer_api.post(f"/api/rentals/{rental['id']}/cancel/")

    assert response.status_code == 200
    kept = Rental.objects.get(pk=rental['id'])
    assert kept.status == RentalStatus.CANCELLED
    assert kept.total_price == 300000
    assert car_status(car) == CarStatus.AVAILABLE


def test_expired_booking_cannot_be_paid(customer_api, car):
    rental = book(customer_api, car)
    expire_pending_rentals(now=timezone.now() + timedelta(minutes=10))

    assert pay(customer_api, rental['id']).status_code == 404

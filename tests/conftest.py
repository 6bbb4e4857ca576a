from datetime import date, timedelta

import pytest
from rest_framework.test import APIClient

from api.client.models import Role, User
from api.garage.models import Brand, Car, CarModel
from api.rental.services import BookingRequest, calculate_total_price

PASSWORD = 'Secret#123'


def make_user(email, role=Role.USER, **extra):
    return User.objects.create_user(email=email, password=PASSWORD, role=role, **extra)


def booking_for(car, start=date(2030, 6, 1), days=3):
    end = start + timedelta(days=days)
    return BookingRequest(
        car_id=car.id,
        start_date=start,
        end_date=end,
        total_price=calculate_total_price(car.price_per_day, start, end),
    )


@pytest.fixture
def customer(db):
    return make_user('ivan@example.com', last_name='Иванов', first_name='Иван')


@pytest.fixture
def other_customer(db):
    return make_user('petr@example.com', last_name='Петров', first_name='Пётр')


@pytest.fixture
def admin_account(db):
    return make_user('boss@example.com', role=Role.ADMIN)


@pytest.fixture
def brand(db):
    return Brand.objects.create(name='Lada')


@pytest.fixture
def car_model(brand):
    return CarModel.objects.create(name='Vesta', brand=brand)


@pytest.fixture
def car(brand, car_model):
    return Car.objects.create(
        license_plate='А123ВС18',
        year=2022,
        color='White',
        price_per_day=100000,
        city='Izhevsk',
        brand=brand,
        model=car_model,
    )


@pytest.fixture
def customer_api(customer):
    client = APIClient()
    client.force_authenticate(customer)
    return client


@pytest.fixture
def admin_api(admin_account):
    client = APIClient()
    client.force_authenticate(admin_account)
    return client


@pytest.fixture
def make_booking():
    return booking_for

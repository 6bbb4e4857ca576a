import signal
import threading
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from api.garage.models import Car, CarStatus
from api.management.commands import run_rental_sweeper
from api.rental.models import Rental
from api.rental.services import create_rental
from api.rental.sweeper import RentalSweeper

pytestmark = pytest.mark.django_db


def test_expire_pending_rentals_command(car, customer, make_booking):
    rental = create_rental(make_booking(car), customer.email)
    Rental.objects.filter(pk=rental.pk).update(created_at=timezone.now() - timedelta(minutes=30))
    out = StringIO()

    call_command('expire_pending_rentals', stdout=out)

    assert "Expired 1 rentals unpaid for more than 5 minutes" in out.getvalue()
    assert not Rental.objects.exists()
    assert Car.objects.get(pk=car.pk).status == CarStatus.AVAILABLE


def test_expire_pending_rentals_command_with_nothing_to_do(car, customer, make_booking):
    create_rental(make_booking(car), customer.email)
    out = StringIO()

    call_command('expire_pending_rentals', stdout=out)

    assert "No rentals needed expiring" in out.getvalue()
    assert Rental.objects.count() == 1


def test_run_rental_sweeper_ticks_until_terminated(monkeypatch):
    handlers = {}
    ticked = threading.Event()
    monkeypatch.setattr(signal, 'signal', lambda signum, handler: handlers.__setitem__(signum, handler))
    monkeypatch.setattr(
        run_rental_sweeper, 'RentalSweeper',
        lambda interval: RentalSweeper(interval=interval, sweep=ticked.set),
    )

    def terminate_after_first_tick():
        ticked.wait(5)
        handlers[signal.SIGTERM](signal.SIGTERM, None)

    terminator = threading.Thread(target=terminate_after_first_tick)
    terminator.start()
    out = StringIO()

    call_command('run_rental_sweeper', '--interval', '1', stdout=out)
    terminator.join(5)

    assert ticked.is_set()
    assert "Rental sweeper running every 1s" in out.getvalue()
    assert "Rental sweeper stopped" in out.getvalue()


def test_run_rental_sweeper_rejects_non_positive_interval():
    with pytest.raises(CommandError):
        call_command('run_rental_sweeper', '--interval', '0')

"""
Rental lifecycle: the only code that writes ``Rental.status`` or moves a
car between AVAILABLE, RESERVED and RENTED.

Every operation is one unit of work (``transaction.atomic``) so the rental
row and its car row are committed together or not at all:

    (no rental, car AVAILABLE)
        -- create_rental -->    PENDING_PAYMENT / RESERVED
        -- confirm_payment -->  PAID / RENTED
        -- cancel_rental -->    row deleted / AVAILABLE   (from PENDING_PAYMENT)
                                CANCELLED / AVAILABLE     (from PAID)
"""
import logging
from dataclasses import dataclass
from datetime import date

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone

from api.garage.models import Car, CarStatus
from api.rental.exceptions import InvalidStateError, NotFoundError
from api.rental.models import Rental, RentalStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingRequest:
    """A validated booking; dates and price are checked by the caller."""

    car_id: object
    start_date: date
    end_date: date
    total_price: int


def calculate_total_price(price_per_day, start_date, end_date):
    """Price for the whole days between ``start_date`` and ``end_date``."""
    days = (end_date - start_date).days
    return price_per_day * days


class RentalLifecycle:
    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    def _rentals(self):
        return Rental.objects.using(self.using)

    def _cars(self):
        return Car.objects.using(self.using)

    def _set_car_status(self, car_id, status):
        self._cars().filter(pk=car_id).update(status=status)

    def _lock_rental(self, rental_id):
        try:
            return (
                self._rentals()
                .select_for_update()
                .select_related('car')
                .get(pk=rental_id)
            )
        except (Rental.DoesNotExist, ValueError, ValidationError):
            raise NotFoundError(f"Rental not found: {rental_id}")

    def create_rental(self, booking, requester_email):
        User = get_user_model()
        try:
            client = User.objects.db_manager(self.using).get(email=requester_email)
        except User.DoesNotExist:
            raise NotFoundError(f"User not found: {requester_email}")

        with transaction.atomic(using=self.using):
            try:
                car_exists = self._cars().filter(pk=booking.car_id).exists()
            except (ValueError, ValidationError):
                car_exists = False
            if not car_exists:
                raise NotFoundError(f"Car not found: {booking.car_id}")

            # Compare-and-set: of two concurrent requests only one matches.
            reserved = (
                self._cars()
                .filter(pk=booking.car_id, status=CarStatus.AVAILABLE)
                .update(status=CarStatus.RESERVED)
            )
            if not reserved:
                raise InvalidStateError(f"Car {booking.car_id} is not available")

            rental = Rental(
                client=client,
                car_id=booking.car_id,
                start_date=booking.start_date,
                end_date=booking.end_date,
                total_price=booking.total_price,
                status=RentalStatus.PENDING_PAYMENT,
                created_at=timezone.now(),
            )
            rental.save(using=self.using, force_insert=True)

        logger.info("rental %s created for %s, car %s reserved",
                    rental.pk, client.email, booking.car_id)
        return rental

    def confirm_payment(self, rental_id):
        with transaction.atomic(using=self.using):
            rental = self._lock_rental(rental_id)
            if rental.status != RentalStatus.PENDING_PAYMENT:
                raise InvalidStateError(
                    f"Rental {rental_id} cannot be paid in status {rental.status}"
                )
            rental.status = RentalStatus.PAID
            rental.save(using=self.using, update_fields=['status'])
            self._set_car_status(rental.car_id, CarStatus.RENTED)

        logger.info("rental %s paid, car %s rented", rental.pk, rental.car_id)
        return rental

    def cancel_rental(self, rental_id):
        """
        Cancel a rental and release its car.

        Unpaid rentals are deleted; paid ones are kept as CANCELLED. Returns
        the rental instance (unsaved when it was deleted).
        """
        with transaction.atomic(using=self.using):
            rental = self._lock_rental(rental_id)
            if rental.status == RentalStatus.CANCELLED:
                raise InvalidStateError(f"Rental {rental_id} is already cancelled")

            self._set_car_status(rental.car_id, CarStatus.AVAILABLE)
            if rental.status == RentalStatus.PENDING_PAYMENT:
                rental.delete(using=self.using)
                logger.info("rental %s deleted, car %s released", rental_id, rental.car_id)
            else:
                rental.status = RentalStatus.CANCELLED
                rental.save(using=self.using, update_fields=['status'])
                logger.info("rental %s cancelled, car %s released", rental.pk, rental.car_id)
        return rental


default_lifecycle = RentalLifecycle()


def create_rental(booking, requester_email):
    return default_lifecycle.create_rental(booking, requester_email)


def confirm_payment(rental_id):
    return default_lifecycle.confirm_payment(rental_id)


def cancel_rental(rental_id):
    return default_lifecycle.cancel_rental(rental_id)

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from api.garage.models import Car, CarStatus


class RentalStatus(models.TextChoices):
    PENDING_PAYMENT = 'PENDING_PAYMENT', 'Pending payment'
    PAID = 'PAID', 'Paid'
    CANCELLED = 'CANCELLED', 'Cancelled'


# Car status each open rental status must be paired with.
LOCKSTEP_CAR_STATUS = {
    RentalStatus.PENDING_PAYMENT: CarStatus.RESERVED,
    RentalStatus.PAID: CarStatus.RENTED,
}

OPEN_RENTAL_STATUSES = tuple(LOCKSTEP_CAR_STATUS)


class RentalQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=RentalStatus.PENDING_PAYMENT)

    def open(self):
        return self.filter(status__in=OPEN_RENTAL_STATUSES)

    def created_before(self, deadline):
        return self.filter(created_at__lt=deadline)

    def for_client_email(self, email):
        return self.filter(client__email=email).order_by('-created_at')


class Rental(models.Model):
    """
    A booking of a car by a client.

    Status changes go through ``api.rental.services.RentalLifecycle`` only;
    the paired car status is updated in the same transaction.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='rentals'
    )
    car = models.ForeignKey(Car, on_delete=models.PROTECT, related_name='rentals')

    start_date = models.DateField()
    end_date = models.DateField()
    total_price = models.PositiveIntegerField(
        help_text="Total price in minor currency units."
    )
    status = models.CharField(
        max_length=20,
        choices=RentalStatus.choices,
        default=RentalStatus.PENDING_PAYMENT
    )
    created_at = models.DateTimeField(default=timezone.now)

    objects = RentalQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='rental_status_created_idx'),
        ]

    @property
    def days(self):
        return (self.end_date - self.start_date).days

    def __str__(self):
        return (
            f"Rental of {self.car.license_plate} by {self.client.email} "
            f"from {self.start_date:%Y-%m-%d} to {self.end_date:%Y-%m-%d} ({self.status})"
        )

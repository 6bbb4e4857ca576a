import uuid

from django.core.exceptions import ValidationError
from django.db import models


class Brand(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class CarModel(models.Model):
    """A model line of a brand ("Vesta", "Granta", ...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    brand = models.ForeignKey(
        Brand,
        on_delete=models.PROTECT,
        related_name='models'
    )

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.brand.name} {self.name}"


class CarStatus(models.TextChoices):
    AVAILABLE = 'AVAILABLE', 'Available'
    RESERVED = 'RESERVED', 'Reserved'
    RENTED = 'RENTED', 'Rented'
    MAINTENANCE = 'MAINTENANCE', 'Maintenance'


# Statuses owned by the rental lifecycle; never written by catalog edits.
LIFECYCLE_CAR_STATUSES = (CarStatus.RESERVED, CarStatus.RENTED)


def is_lifecycle_status_change(current, new):
    """True when moving a car from ``current`` to ``new`` is the lifecycle's job."""
    return new != current and (new in LIFECYCLE_CAR_STATUSES or current in LIFECYCLE_CAR_STATUSES)


class Car(models.Model):
    """
    A rental car. Prices are stored in minor currency units (kopecks).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    license_plate = models.CharField(max_length=255, unique=True)
    year = models.PositiveIntegerField(blank=True, null=True)
    color = models.CharField(max_length=255, blank=True, default='')
    price_per_day = models.PositiveIntegerField(
        default=0,
        help_text="Price per day in minor currency units."
    )
    status = models.CharField(
        max_length=20,
        choices=CarStatus.choices,
        default=CarStatus.AVAILABLE
    )
    city = models.CharField(max_length=255, blank=True, default='')

    brand = models.ForeignKey(
        Brand,
        on_delete=models.PROTECT,
        related_name='cars',
        blank=True,
        null=True
    )
    model = models.ForeignKey(
        CarModel,
        on_delete=models.PROTECT,
        related_name='cars',
        blank=True,
        null=True
    )

    def clean(self):
        if not self.license_plate or not self.license_plate.strip():
            raise ValidationError("License plate cannot be empty.")
        if self.model_id and self.brand_id and self.model.brand_id != self.brand_id:
            raise ValidationError("Model does not belong to the selected brand.")

    @property
    def is_available(self):
        return self.status == CarStatus.AVAILABLE

    def __str__(self):
        return f"{self.model or 'Car'} ({self.license_plate})"

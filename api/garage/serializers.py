from django.conf import settings
from django.db import transaction
from rest_framework import serializers

from api.garage.models import Brand, Car, CarModel, CarStatus, is_lifecycle_status_change


class BrandSerializer(serializers.ModelSerializer):
    class Meta:
        model = Brand
        fields = ['id', 'name']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Brand name cannot be empty.")
        return value.strip()


class CarModelSerializer(serializers.ModelSerializer):
    brand_id = serializers.PrimaryKeyRelatedField(
        source='brand', queryset=Brand.objects.all()
    )
    brand_name = serializers.CharField(source='brand.name', read_only=True)

    class Meta:
        model = CarModel
        fields = ['id', 'name', 'brand_id', 'brand_name']

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Model name cannot be empty.")
        return value.strip()


LIFECYCLE_STATUS_MESSAGE = "Reserved and rented statuses are managed by rentals."


class CarSerializer(serializers.ModelSerializer):
    brand_id = serializers.PrimaryKeyRelatedField(
        source='brand', queryset=Brand.objects.all(), allow_null=True, required=False
    )
    model_id = serializers.PrimaryKeyRelatedField(
        source='model', queryset=CarModel.objects.all(), allow_null=True, required=False
    )
    brand_name = serializers.CharField(source='brand.name', read_only=True, default=None)
    model_name = serializers.CharField(source='model.name', read_only=True, default=None)

    class Meta:
        model = Car
        fields = [
            'id',
            'license_plate',
            'year',
            'color',
            'price_per_day',
            'status',
            'city',
            'brand_id',
            'brand_name',
            'model_id',
            'model_name',
        ]

    def validate_license_plate(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("License plate cannot be empty.")
        return value.strip()

    def validate_city(self, value):
        if value and value not in settings.FLEET_CITIES:
            raise serializers.ValidationError(
                f"City must be one of: {', '.join(settings.FLEET_CITIES)}."
            )
        return value

    def validate_status(self, value):
        # RESERVED and RENTED are set by the rental lifecycle only.
        current = self.instance.status if self.instance else CarStatus.AVAILABLE
        if is_lifecycle_status_change(current, value):
            raise serializers.ValidationError(LIFECYCLE_STATUS_MESSAGE)
        return value

    def validate(self, data):
        brand = data.get('brand', getattr(self.instance, 'brand', None))
        model = data.get('model', getattr(self.instance, 'model', None))
        if brand and model and model.brand_id != brand.id:
            raise serializers.ValidationError({"model_id": "Model does not belong to the selected brand."})
        return data

    def update(self, instance, validated_data):
        """
        Write only the submitted fields, against a locked copy of the car, so
        a booking made since ``instance`` was read keeps its status.
        """
        with transaction.atomic():
            car = Car.objects.select_for_update().get(pk=instance.pk)
            status = validated_data.get('status', car.status)
            if status == car.status:
                validated_data.pop('status', None)
            elif is_lifecycle_status_change(car.status, status):
                raise serializers.ValidationError({'status': LIFECYCLE_STATUS_MESSAGE})

            for attr, value in validated_data.items():
                setattr(car, attr, value)
            car.save(update_fields=list(validated_data))
        return car

from rest_framework import serializers

from api.garage.models import Car
from api.rental.models import Rental
from api.rental.services import BookingRequest, calculate_total_price
from api.rental.validators import booking_start_date


class RentalSerializer(serializers.ModelSerializer):
    car_id = serializers.UUIDField(source='car.id', read_only=True)
    license_plate = serializers.CharField(source='car.license_plate', read_only=True)
    brand = serializers.CharField(source='car.brand.name', read_only=True, default=None)
    model = serializers.CharField(source='car.model.name', read_only=True, default=None)
    client_email = serializers.EmailField(source='client.email', read_only=True)

    class Meta:
        model = Rental
        fields = [
            'id',
            'car_id',
            'license_plate',
            'brand',
            'model',
            'client_email',
            'start_date',
            'end_date',
            'total_price',
            'status',
            'created_at',
        ]
        read_only_fields = fields


class BookingRequestSerializer(serializers.Serializer):
    """
    Checks a booking before it reaches the lifecycle: the rental starts
    tomorrow, ends after it starts, and the car is available. Computes the
    total price in minor units.
    """

    car_id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate_start_date(self, value):
        tomorrow = booking_start_date(self.context.get('today'))
        if value != tomorrow:
            raise serializers.ValidationError("Rental must start tomorrow.")
        return value

    def validate(self, data):
        try:
            car = Car.objects.get(id=data['car_id'])
        except Car.DoesNotExist:
            raise serializers.ValidationError({"car_id": "Car not found."})

        if not car.is_available:
            raise serializers.ValidationError({"car_id": "Car is not available for rent."})

        if data['end_date'] <= data['start_date']:
            raise serializers.ValidationError(
                {"end_date": "End date must be after start date."}
            )

        data['car'] = car
        data['total_price'] = calculate_total_price(
            car.price_per_day, data['start_date'], data['end_date']
        )
        return data

    def to_booking(self):
        data = self.validated_data
        return BookingRequest(
            car_id=data['car'].id,
            start_date=data['start_date'],
            end_date=data['end_date'],
            total_price=data['total_price'],
        )

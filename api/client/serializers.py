from rest_framework import serializers

from api.client.models import Role, User
from api.client.validators import (
    is_cyrillic,
    is_document_number_valid,
    is_document_series_valid,
    is_phone_valid,
)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'last_name',
            'first_name',
            'middle_name',
            'phone',
            'birth_date',
            'driver_license_series',
            'driver_license_number',
            'passport_series',
            'passport_number',
            'role',
        ]
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """Fields a customer may change on their own profile."""

    class Meta:
        model = User
        fields = [
            'email',
            'last_name',
            'first_name',
            'middle_name',
            'phone',
            'driver_license_series',
            'driver_license_number',
            'passport_series',
            'passport_number',
        ]
        read_only_fields = ['email']
        # Uniqueness is enforced by the database and reported by the view.
        validators = []
        extra_kwargs = {
            'phone': {'validators': []},
        }

    def validate_phone(self, value):
        if not is_phone_valid(value):
            raise serializers.ValidationError("Phone must start with +7 and contain 11 digits.")
        return value

    def validate_driver_license_series(self, value):
        if not is_document_series_valid(value):
            raise serializers.ValidationError("Driver license series must be 4 digits.")
        return value

    def validate_driver_license_number(self, value):
        if not is_document_number_valid(value):
            raise serializers.ValidationError("Driver license number must be 6 digits.")
        return value

    def validate_passport_series(self, value):
        if not is_document_series_valid(value):
            raise serializers.ValidationError("Passport series must be 4 digits.")
        return value

    def validate_passport_number(self, value):
        if not is_document_number_valid(value):
            raise serializers.ValidationError("Passport number must be 6 digits.")
        return value

    def validate_last_name(self, value):
        if not is_cyrillic(value):
            raise serializers.ValidationError("Last name must contain Cyrillic letters only.")
        return value

    def validate_first_name(self, value):
        if not is_cyrillic(value):
            raise serializers.ValidationError("First name must contain Cyrillic letters only.")
        return value

    def validate_middle_name(self, value):
        if value and not is_cyrillic(value):
            raise serializers.ValidationError("Middle name must contain Cyrillic letters only.")
        return value


class RoleSerializer(serializers.ModelSerializer):
    role = serializers.ChoiceField(choices=Role.choices)

    class Meta:
        model = User
        fields = ['role']

# auth/serializers.py
from django.contrib.auth import authenticate
from rest_framework import serializers

from api.client.models import Role, User
from api.client.serializers import ProfileSerializer
from api.client.validators import MINIMUM_AGE, age_on, is_password_strong


class RegistrationSerializer(ProfileSerializer):
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['password', 'birth_date']
        read_only_fields = []
        extra_kwargs = {
            'email': {'validators': [], 'required': True},
            'phone': {'validators': [], 'required': True},
            'birth_date': {'required': True},
            'last_name': {'required': True},
            'first_name': {'required': True},
            'driver_license_series': {'required': True},
            'driver_license_number': {'required': True},
            'passport_series': {'required': True},
            'passport_number': {'required': True},
        }

    def validate_email(self, value):
        if not value.strip():
            raise serializers.ValidationError("Email is required.")
        return User.objects.normalize_email(value.strip())

    def validate_birth_date(self, value):
        today = self.context.get('today')
        if age_on(value, today) < MINIMUM_AGE:
            raise serializers.ValidationError(f"You must be at least {MINIMUM_AGE} years old to register.")
        return value

    def validate_password(self, value):
        if not is_password_strong(value):
            raise serializers.ValidationError(
                "Password must be at least 8 characters long, contain digits, uppercase "
                "letters and special characters, and have no more than 3 identical "
                "characters in a row."
            )
        return value

    def validate(self, data):
        # Report every clash at once.
        errors = []
        if User.objects.filter(email__iexact=data['email']).exists():
            errors.append("Email is already in use.")
        if User.objects.filter(phone=data['phone']).exists():
            errors.append("Phone is already in use.")
        if User.objects.filter(
            driver_license_series=data['driver_license_series'],
            driver_license_number=data['driver_license_number'],
        ).exists():
            errors.append("Driver license is already in use.")
        if User.objects.filter(
            passport_series=data['passport_series'],
            passport_number=data['passport_number'],
        ).exists():
            errors.append("Passport is already in use.")
        if errors:
            raise serializers.ValidationError(" ".join(errors))
        return data

    def create(self, validated_data):
        password = validated_data.pop('password')
        validated_data['role'] = Role.USER
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate(self, data):
        user = authenticate(
            request=self.context.get('request'),
            email=data['email'],
            password=data['password'],
        )
        if user is None:
            raise serializers.ValidationError("Invalid email or password.")
        data['user'] = user
        return data

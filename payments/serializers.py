# payments/serializers.py
import re

from rest_framework import serializers

MIN_CARD_NUMBER_LENGTH = 16


class CardPaymentSerializer(serializers.Serializer):
    """
    Card details for a rental payment. Only the shape of the data is
    checked; nothing is charged.
    """

    rentalId = serializers.UUIDField()
    cardNumber = serializers.CharField()
    cardHolder = serializers.CharField()
    expiryDate = serializers.CharField()
    cvv = serializers.CharField()

    def validate_cardNumber(self, value):
        digits = re.sub(r"[\s-]", "", value)
        if len(digits) < MIN_CARD_NUMBER_LENGTH or not digits.isdigit():
            raise serializers.ValidationError("Invalid card number.")
        return digits

    def validate_expiryDate(self, value):
        if not re.fullmatch(r"(0[1-9]|1[0-2])/\d{2}", value.strip()):
            raise serializers.ValidationError("Expiry date must be MM/YY.")
        return value.strip()

    def validate_cvv(self, value):
        if not re.fullmatch(r"\d{3,4}", value.strip()):
            raise serializers.ValidationError("Invalid CVV.")
        return value.strip()

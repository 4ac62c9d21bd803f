from decimal import Decimal

from rest_framework import serializers

from booking.models import Booking
from booking.serializers import BookingSerializer, StayRequestSerializer


class PaymentIntentCreateSerializer(StayRequestSerializer):
    total_amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    currency = serializers.CharField(max_length=3, required=False)
    payment_method = serializers.ChoiceField(choices=Booking.PAYMENT_METHOD_CHOICES)


class PaymentIntentSerializer(serializers.Serializer):
    id = serializers.CharField()
    client_secret = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.CharField()
    status = serializers.CharField()
    created = serializers.DateTimeField()
    metadata = serializers.DictField()


class PaymentConfirmSerializer(serializers.Serializer):
    payment_intent_id = serializers.CharField(max_length=100)
    payment_method_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    payment_provider = serializers.ChoiceField(choices=Booking.PAYMENT_PROVIDER_CHOICES)


class PaymentReceiptSerializer(serializers.Serializer):
    transaction_id = serializers.CharField()
    payment_intent_id = serializers.CharField()
    booking_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.CharField()
    payment_method = serializers.CharField()
    payment_provider = serializers.CharField()
    status = serializers.CharField()
    completed_at = serializers.DateTimeField()


class PaymentConfirmResponseSerializer(serializers.Serializer):
    booking = BookingSerializer()
    payment = PaymentReceiptSerializer()


class PaymentHistorySerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(source='total_price', max_digits=10, decimal_places=2, read_only=True)
    currency = serializers.CharField(source='property.currency', read_only=True)
    property_title = serializers.CharField(source='property.title', read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'booking_reference', 'property_title', 'amount', 'currency', 'status',
            'payment_method', 'payment_provider', 'payment_completed_at', 'created_at',
        ]
        read_only_fields = fields

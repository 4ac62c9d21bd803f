from rest_framework import serializers

from properties.serializers import PropertySummarySerializer
from users.serializers import UserSummarySerializer

from .models import Booking


class HostContactSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    first_name = serializers.CharField(read_only=True)
    last_name = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    phone = serializers.CharField(read_only=True)


class BookingSerializer(serializers.ModelSerializer):
    property = PropertySummarySerializer(read_only=True)
    nights = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            'id', 'booking_reference', 'property', 'check_in', 'check_out', 'nights',
            'guests', 'total_price', 'notes', 'status',
            'payment_intent_id', 'payment_method', 'payment_provider', 'payment_completed_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_nights(self, obj):
        return (obj.check_out - obj.check_in).days


class BookingListSerializer(BookingSerializer):
    """Guest booking list rows carry the host's display name."""
    host_first_name = serializers.CharField(source='property.host.first_name', read_only=True)
    host_last_name = serializers.CharField(source='property.host.last_name', read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ['host_first_name', 'host_last_name']
        read_only_fields = fields


class BookingDetailSerializer(BookingSerializer):
    host = HostContactSerializer(source='property.host', read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ['host']
        read_only_fields = fields


class HostedBookingSerializer(BookingSerializer):
    guest = UserSummarySerializer(source='user', read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ['guest']
        read_only_fields = fields


class StayRequestSerializer(serializers.Serializer):
    """Dates and party size shared by direct bookings and payment intents."""
    property_id = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500, default='')

    def validate(self, data):
        if data['check_out'] <= data['check_in']:
            raise serializers.ValidationError({
                'check_out': 'Check-out date must be after check-in date.'
            })
        return data


class BookingCreateSerializer(StayRequestSerializer):
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        Booking.STATUS_CONFIRMED,
        Booking.STATUS_COMPLETED,
        Booking.STATUS_CANCELLED,
    ])


class BookingListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES, required=False)

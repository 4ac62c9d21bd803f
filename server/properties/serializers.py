from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from reviews.services import round_rating

from .models import Property


def normalize_labels(values, field_name):
    """Strip labels, drop case-insensitive duplicates and reject blanks."""
    cleaned = []
    seen = set()
    for value in values:
        label = value.strip()
        if not label:
            raise serializers.ValidationError(f"{field_name} entries cannot be blank.")
        if label.lower() in seen:
            continue
        seen.add(label.lower())
        cleaned.append(label)
    return cleaned


class PropertySerializer(serializers.ModelSerializer):
    amenities = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True),
        source='amenity_labels',
        required=False,
    )
    images = serializers.ListField(
        child=serializers.URLField(max_length=500),
        source='image_urls',
        required=False,
    )
    host = serializers.SerializerMethodField()
    avg_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id', 'host', 'title', 'description', 'type',
            'address', 'city', 'state', 'country', 'zip_code', 'latitude', 'longitude',
            'price', 'currency', 'bedrooms', 'bathrooms', 'max_guests',
            'amenities', 'images', 'availability', 'is_active',
            'avg_rating', 'review_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'is_active', 'created_at', 'updated_at']
        extra_kwargs = {
            'title': {'min_length': 5},
            'description': {'min_length': 20, 'max_length': 1000},
            'price': {'min_value': Decimal('0.01')},
            'max_guests': {'min_value': 1},
        }

    def get_host(self, obj):
        host = obj.host
        return {
            'id': host.id,
            'first_name': host.first_name,
            'last_name': host.last_name,
            'avatar': host.avatar,
        }

    def get_avg_rating(self, obj):
        return round_rating(getattr(obj, 'avg_rating_value', None))

    def get_review_count(self, obj):
        return getattr(obj, 'review_count_value', 0) or 0

    def validate_amenities(self, value):
        return normalize_labels(value, 'amenities')

    def validate_currency(self, value):
        return value.upper()

    def create(self, validated_data):
        amenities_data = validated_data.pop('amenity_labels', [])
        images_data = validated_data.pop('image_urls', [])
        validated_data.setdefault('currency', settings.DEFAULT_CURRENCY)

        property_instance = Property.objects.create(**validated_data)
        property_instance.replace_amenities(amenities_data)
        property_instance.replace_images(images_data)
        return property_instance

    def update(self, instance, validated_data):
        amenities_data = validated_data.pop('amenity_labels', None)
        images_data = validated_data.pop('image_urls', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if amenities_data is not None:
            instance.replace_amenities(amenities_data)
        if images_data is not None:
            instance.replace_images(images_data)
        return instance


class PropertyDetailSerializer(PropertySerializer):
    """Detail view adds the host's contact details."""

    def get_host(self, obj):
        data = super().get_host(obj)
        data['email'] = obj.host.email
        data['phone'] = obj.host.phone
        return data


class PropertySummarySerializer(serializers.ModelSerializer):
    """Compact listing card embedded in bookings and reviews."""
    images = serializers.ListField(child=serializers.URLField(), source='image_urls', read_only=True)

    class Meta:
        model = Property
        fields = ['id', 'title', 'type', 'city', 'country', 'price', 'currency', 'images', 'is_active']
        read_only_fields = fields


class AvailabilityQuerySerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()

    def validate(self, attrs):
        if attrs['check_out'] <= attrs['check_in']:
            raise serializers.ValidationError({'check_out': 'Check-out date must be after check-in date.'})
        return attrs

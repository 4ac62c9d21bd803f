from rest_framework import serializers

from properties.serializers import PropertySummarySerializer

from .models import Review


class ReviewAuthorSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    first_name = serializers.CharField(read_only=True)
    last_name = serializers.CharField(read_only=True)
    avatar = serializers.URLField(read_only=True)


class ReviewSerializer(serializers.ModelSerializer):
    user = ReviewAuthorSerializer(read_only=True)
    property_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'user', 'property_id', 'rating', 'comment', 'created_at', 'updated_at']
        read_only_fields = fields


class MyReviewSerializer(serializers.ModelSerializer):
    property = PropertySummarySerializer(read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'property', 'rating', 'comment', 'created_at', 'updated_at']
        read_only_fields = fields


class ReviewWriteSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(min_length=10, max_length=1000, trim_whitespace=True)


class ReviewCreateSerializer(ReviewWriteSerializer):
    property_id = serializers.IntegerField(min_value=1)

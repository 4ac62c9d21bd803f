import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction
from django.db.models import Avg, Count

from booking.models import Booking
from core.exceptions import AuthorizationError, DuplicateError, NotEligibleError, NotFoundError
from properties.models import Property

from .models import Review

logger = logging.getLogger(__name__)

RATING_VALUES = range(1, 6)


def round_rating(value):
    """Mean rating rounded half-up to one decimal, or None when unrated."""
    if value is None:
        return None
    return float(Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def rating_summary(queryset):
    """Histogram of star values plus the rounded mean for a review queryset."""
    histogram = {star: 0 for star in RATING_VALUES}
    for row in queryset.order_by().values('rating').annotate(total=Count('id')):
        histogram[row['rating']] = row['total']

    average = queryset.aggregate(average=Avg('rating'))['average']
    return {
        'rating_summary': histogram,
        'avg_rating': round_rating(average),
        'total_reviews': sum(histogram.values()),
    }


def property_reviews(property_id):
    if not Property.objects.filter(pk=property_id).exists():
        raise NotFoundError('Property not found.')
    return Review.objects.filter(property_id=property_id).select_related('user').order_by('-created_at', '-id')


def create_review(user, property_id, rating, comment):
    """Store a review for a property the user has completed a stay at."""
    property_instance = Property.objects.filter(pk=property_id).first()
    if property_instance is None:
        raise NotFoundError('Property not found.')

    stayed = Booking.objects.filter(
        user=user,
        property=property_instance,
        status=Booking.STATUS_COMPLETED,
    ).exists()
    if not stayed:
        raise NotEligibleError('You can only review properties you have stayed at.')

    if Review.objects.filter(user=user, property=property_instance).exists():
        raise DuplicateError('You have already reviewed this property.')

    try:
        with transaction.atomic():
            review = Review.objects.create(
                user=user,
                property=property_instance,
                rating=rating,
                comment=comment,
            )
    except IntegrityError:
        raise DuplicateError('You have already reviewed this property.')

    logger.info(f"Review {review.pk} ({rating} stars) created for property {property_instance.pk} by user {user.pk}")
    return review


def get_authored_review(user, pk):
    review = Review.objects.select_related('property', 'user').filter(pk=pk).first()
    if review is None:
        raise NotFoundError('Review not found.')
    if review.user_id != user.id:
        raise AuthorizationError('You can only modify your own reviews.')
    return review


def delete_review(user, pk):
    review = get_authored_review(user, pk)
    review.delete()
    logger.info(f"Review {pk} deleted by user {user.pk}")

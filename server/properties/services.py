"""
Catalog queries and the listing rules shared by the property views.
"""
import logging

from django.db.models import Avg, Count, FloatField, IntegerField, OuterRef, Subquery, Value
from django.db.models.functions import Coalesce
from django_filters.utils import translate_validation

from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from reviews.models import Review

from .filters import PropertyFilter
from .models import Property

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ('created_at', 'price', 'title', 'bedrooms', 'max_guests')
SORT_ORDERS = ('asc', 'desc')


def with_ratings(queryset):
    """Annotate ``avg_rating_value`` and ``review_count_value`` per property.

    Subqueries keep the aggregate independent of any other joins on the
    queryset (amenity filters, host joins).
    """
    reviews = Review.objects.filter(property=OuterRef('pk')).order_by().values('property')
    return queryset.annotate(
        avg_rating_value=Subquery(
            reviews.annotate(average=Avg('rating')).values('average')[:1],
            output_field=FloatField(),
        ),
        review_count_value=Coalesce(
            Subquery(reviews.annotate(total=Count('id')).values('total')[:1], output_field=IntegerField()),
            Value(0),
        ),
    )


def resolve_ordering(sort_by='created_at', sort_order='desc'):
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError({'sort_by': [f"Must be one of: {', '.join(SORTABLE_FIELDS)}."]})
    if sort_order not in SORT_ORDERS:
        raise ValidationError({'sort_order': ["Must be 'asc' or 'desc'."]})
    prefix = '-' if sort_order == 'desc' else ''
    return [f'{prefix}{sort_by}', f'{prefix}id']


def search_properties(params):
    """Active, bookable listings matching the query parameters."""
    filterset = PropertyFilter(params, queryset=Property.objects.bookable())
    if not filterset.is_valid():
        raise translate_validation(filterset.errors)

    ordering = resolve_ordering(
        params.get('sort_by') or 'created_at',
        params.get('sort_order') or 'desc',
    )
    queryset = filterset.qs.select_related('host').prefetch_related('amenities', 'images')
    return with_ratings(queryset).order_by(*ordering)


def get_property(pk):
    queryset = with_ratings(
        Property.objects.active().select_related('host').prefetch_related('amenities', 'images')
    )
    try:
        return queryset.get(pk=pk)
    except Property.DoesNotExist:
        raise NotFoundError('Property not found.')


def get_property_reviews(property_instance):
    return property_instance.reviews.select_related('user').order_by('-created_at')


def get_managed_property(user, pk):
    """Fetch an active listing the user may edit: its host or an admin."""
    property_instance = Property.objects.active().filter(pk=pk).select_related('host').first()
    if property_instance is None:
        raise NotFoundError('Property not found.')
    if property_instance.host_id != user.id and not user.is_admin:
        raise AuthorizationError('You can only manage your own properties.')
    return property_instance


def list_host_properties(user):
    """Every listing the user hosts, soft-deleted ones included."""
    queryset = Property.objects.filter(host=user).select_related('host').prefetch_related('amenities', 'images')
    return with_ratings(queryset).order_by('-created_at', '-id')


def deactivate_property(user, pk):
    property_instance = get_managed_property(user, pk)
    property_instance.is_active = False
    property_instance.save(update_fields=['is_active', 'updated_at'])
    logger.info(f"Property {property_instance.pk} soft-deleted by user {user.pk}")
    return property_instance

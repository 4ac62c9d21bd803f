"""
Reservation rules: the confirmed-overlap check, booking creation and the
status state machine.

Every check-then-write path locks the property row first, so two requests
for the same listing are serialized and cannot both pass the overlap check.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.exceptions import (
    AuthorizationError,
    CapacityError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from properties.models import Property

from .models import Booking

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    Booking.STATUS_PENDING: {Booking.STATUS_CONFIRMED, Booking.STATUS_CANCELLED},
    Booking.STATUS_CONFIRMED: {Booking.STATUS_CANCELLED, Booking.STATUS_COMPLETED},
    Booking.STATUS_CANCELLED: set(),
    Booking.STATUS_COMPLETED: set(),
}


def confirmed_overlaps(property_id, check_in, check_out, *, exclude_booking_id=None):
    """Confirmed bookings whose half-open stay intersects [check_in, check_out)."""
    queryset = Booking.objects.filter(
        property_id=property_id,
        status=Booking.STATUS_CONFIRMED,
        check_in__lt=check_out,
        check_out__gt=check_in,
    )
    if exclude_booking_id is not None:
        queryset = queryset.exclude(pk=exclude_booking_id)
    return queryset


def has_conflict(property_id, check_in, check_out, *, exclude_booking_id=None):
    return confirmed_overlaps(
        property_id, check_in, check_out, exclude_booking_id=exclude_booking_id
    ).exists()


def check_availability(property_id, check_in, check_out):
    if not Property.objects.active().filter(pk=property_id).exists():
        raise NotFoundError('Property not found.')
    conflicts = confirmed_overlaps(property_id, check_in, check_out).order_by('check_in')
    return {
        'available': not conflicts.exists(),
        'conflicting_ranges': [
            {'check_in': booking.check_in, 'check_out': booking.check_out}
            for booking in conflicts
        ],
    }


def calculate_total(property_instance, check_in, check_out):
    nights = (check_out - check_in).days
    return (property_instance.price * Decimal(nights)).quantize(Decimal('0.01'))


def lock_bookable_property(property_id):
    """Row-lock an active, available property; call inside ``transaction.atomic``."""
    property_instance = (
        Property.objects.select_for_update()
        .filter(pk=property_id, is_active=True, availability=True)
        .first()
    )
    if property_instance is None:
        raise NotFoundError('Property not found or not available.')
    return property_instance


def validate_reservation(property_instance, check_in, check_out, guests, *, exclude_booking_id=None):
    """Capacity first, then the confirmed-overlap rule."""
    if guests > property_instance.max_guests:
        raise CapacityError(
            f'This property can accommodate a maximum of {property_instance.max_guests} guests.'
        )
    if has_conflict(property_instance.pk, check_in, check_out, exclude_booking_id=exclude_booking_id):
        raise ConflictError('Property is not available for the selected dates.')


def create_booking(user, property_id, check_in, check_out, guests, total_price=None, notes=''):
    """Create a pending booking after the availability checks pass."""
    with transaction.atomic():
        property_instance = lock_bookable_property(property_id)
        validate_reservation(property_instance, check_in, check_out, guests)

        expected_total = calculate_total(property_instance, check_in, check_out)
        if total_price is not None and Decimal(total_price) != expected_total:
            raise ValidationError({
                'total_price': [f'Total price must be {expected_total} for the selected dates.']
            })

        booking = Booking.objects.create(
            user=user,
            property=property_instance,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            total_price=expected_total,
            notes=notes or '',
            status=Booking.STATUS_PENDING,
        )

    logger.info(
        f"Booking {booking.booking_reference} created for property {property_id} "
        f"({check_in} to {check_out}) by user {user.pk}"
    )
    return booking


def list_bookings(user, status=None):
    queryset = Booking.objects.filter(user=user).select_related('property', 'property__host')
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at', '-id')


def list_hosted_bookings(user, status=None):
    queryset = Booking.objects.select_related('property', 'user')
    if not user.is_admin:
        queryset = queryset.filter(property__host=user)
    if status:
        queryset = queryset.filter(status=status)
    return queryset.order_by('-created_at', '-id')


def get_booking(user, pk):
    """A booking owned by ``user``; soft-deleted properties remain readable."""
    booking = (
        Booking.objects.select_related('property', 'property__host')
        .filter(pk=pk, user=user)
        .first()
    )
    if booking is None:
        raise NotFoundError('Booking not found.')
    return booking


def cancel_booking(user, pk):
    with transaction.atomic():
        booking = Booking.objects.select_for_update().filter(pk=pk, user=user).first()
        if booking is None:
            raise NotFoundError('Booking not found.')

        if booking.status == Booking.STATUS_CANCELLED:
            raise InvalidStateError('Booking is already cancelled.')
        if booking.status == Booking.STATUS_COMPLETED:
            raise InvalidStateError('Cannot cancel a completed booking.')
        if booking.status == Booking.STATUS_CONFIRMED and booking.check_in <= timezone.localdate():
            raise InvalidStateError('Confirmed bookings can only be cancelled before check-in.')

        booking.status = Booking.STATUS_CANCELLED
        booking.save(update_fields=['status', 'updated_at'])

    logger.info(f"Booking {booking.booking_reference} cancelled by user {user.pk}")
    return booking


def transition_booking(user, pk, new_status):
    """Host or admin moves a booking along ``ALLOWED_TRANSITIONS``."""
    with transaction.atomic():
        booking = Booking.objects.select_related('property').filter(pk=pk).first()
        if booking is None:
            raise NotFoundError('Booking not found.')
        if booking.property.host_id != user.id and not user.is_admin:
            raise AuthorizationError('You can only manage bookings on your own properties.')

        # Lock the listing before the booking so confirmations stay serialized
        Property.objects.select_for_update().filter(pk=booking.property_id).first()
        booking = Booking.objects.select_for_update().get(pk=pk)

        if new_status not in ALLOWED_TRANSITIONS[booking.status]:
            raise InvalidStateError(f'Cannot change a {booking.status} booking to {new_status}.')
        if new_status == Booking.STATUS_COMPLETED and booking.check_out > timezone.localdate():
            raise InvalidStateError('A booking can only be completed once its check-out date is reached.')

        if new_status == Booking.STATUS_CONFIRMED and has_conflict(
            booking.property_id, booking.check_in, booking.check_out, exclude_booking_id=booking.pk
        ):
            raise ConflictError('Property is not available for the selected dates.')

        previous = booking.status
        booking.status = new_status
        booking.save(update_fields=['status', 'updated_at'])

    logger.info(f"Booking {booking.booking_reference} moved from {previous} to {new_status} by user {user.pk}")
    return booking

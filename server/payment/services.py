"""
Two-step payment flow: an intent captures the prospective stay, and a
confirmed payment turns it into a ``confirmed`` booking.

Intents live in the Django cache for ``PAYMENT_INTENT_TTL_SECONDS`` and are
never written to the database. The unique ``Booking.payment_intent_id``
makes confirmation idempotent.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.utils import timezone

from booking.models import Booking
from booking.services import calculate_total, lock_bookable_property, validate_reservation
from core.exceptions import AuthorizationError, NotFoundError, PaymentFailedError, ValidationError
from properties.models import Property

from . import gateway

logger = logging.getLogger(__name__)


def intent_cache_key(intent_id):
    return f'payment-intent:{intent_id}'


def create_intent(user, property_id, check_in, check_out, guests, total_amount,
                  payment_method, currency=None, notes=''):
    property_instance = Property.objects.bookable().filter(pk=property_id).first()
    if property_instance is None:
        raise NotFoundError('Property not found or unavailable.')

    validate_reservation(property_instance, check_in, check_out, guests)

    # The client quotes the amount; a mismatch with nights x price is only logged
    expected_total = calculate_total(property_instance, check_in, check_out)
    if total_amount != expected_total:
        logger.warning(
            f"Intent amount {total_amount} differs from {expected_total} for property {property_instance.pk} "
            f"({check_in} to {check_out})"
        )

    currency = (currency or property_instance.currency).upper()
    if currency != property_instance.currency.upper():
        raise ValidationError({
            'currency': [f'This property is priced in {property_instance.currency}.']
        })

    metadata = {
        'property_id': property_instance.pk,
        'check_in': check_in,
        'check_out': check_out,
        'guests': guests,
        'user_id': user.pk,
        'notes': notes or '',
        'payment_method': payment_method,
    }
    result = gateway.initialize_payment(total_amount, currency, metadata)
    if not result['status']:
        raise PaymentFailedError(result['message'])

    intent = result['data']
    cache.set(intent_cache_key(intent['id']), intent, timeout=settings.PAYMENT_INTENT_TTL_SECONDS)
    logger.info(f"Payment intent {intent['id']} created for property {property_id} by user {user.pk}")
    return intent


def build_receipt(booking):
    return {
        'transaction_id': gateway.transaction_reference(booking.payment_intent_id),
        'payment_intent_id': booking.payment_intent_id,
        'booking_id': booking.pk,
        'amount': booking.total_price,
        'currency': booking.property.currency,
        'payment_method': booking.payment_method,
        'payment_provider': booking.payment_provider,
        'status': 'completed',
        'completed_at': booking.payment_completed_at,
    }


def _existing_booking(user, intent_id):
    booking = Booking.objects.select_related('property').filter(payment_intent_id=intent_id).first()
    if booking is not None and booking.user_id != user.pk:
        raise AuthorizationError('This payment belongs to another user.')
    return booking


def confirm_payment(user, payment_intent_id, payment_provider, payment_method_id=None):
    """Verify the payment and create the confirmed booking.

    Returns ``(booking, receipt, created)``; confirming an intent that
    already produced a booking returns that booking with ``created=False``.
    """
    booking = _existing_booking(user, payment_intent_id)
    if booking is not None:
        logger.info(f"Payment intent {payment_intent_id} already confirmed as {booking.booking_reference}")
        return booking, build_receipt(booking), False

    intent = cache.get(intent_cache_key(payment_intent_id))
    if intent is None:
        raise NotFoundError('Payment intent not found or expired.')

    metadata = intent['metadata']
    if metadata['user_id'] != user.pk:
        raise AuthorizationError('This payment intent belongs to another user.')

    verification = gateway.verify_payment(
        payment_intent_id, intent['amount'], intent['currency'], payment_provider, payment_method_id
    )
    if not verification['status']:
        raise PaymentFailedError(verification['message'])

    try:
        with transaction.atomic():
            property_instance = lock_bookable_property(metadata['property_id'])
            validate_reservation(
                property_instance, metadata['check_in'], metadata['check_out'], metadata['guests']
            )
            booking = Booking.objects.create(
                user=user,
                property=property_instance,
                check_in=metadata['check_in'],
                check_out=metadata['check_out'],
                guests=metadata['guests'],
                total_price=intent['amount'],
                notes=metadata['notes'],
                status=Booking.STATUS_CONFIRMED,
                payment_intent_id=payment_intent_id,
                payment_method=metadata['payment_method'],
                payment_provider=payment_provider,
                payment_completed_at=verification['data']['paid_at'] or timezone.now(),
            )
    except IntegrityError:
        # A concurrent confirmation of the same intent won the insert
        booking = _existing_booking(user, payment_intent_id)
        if booking is None:
            raise
        return booking, build_receipt(booking), False

    cache.delete(intent_cache_key(payment_intent_id))
    logger.info(
        f"Payment {payment_intent_id} confirmed via {payment_provider}; "
        f"booking {booking.booking_reference} created for user {user.pk}"
    )
    return booking, build_receipt(booking), True


def payment_history(user):
    """Bookings the user paid for through the payment flow, newest first."""
    return (
        Booking.objects.filter(user=user, payment_intent_id__isnull=False)
        .select_related('property')
        .order_by('-created_at', '-id')
    )

"""
Simulated payment gateway for the StayHub booking platform.

Follows the request/verify shape of a hosted card processor without talking
to one. The verification outcome comes from ``PAYMENT_SIMULATED_STATUS`` so
declined payments can be exercised locally and in tests.
"""
import logging
import secrets
import uuid

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

INTENT_STATUS_REQUIRES_PAYMENT_METHOD = 'requires_payment_method'
VERIFICATION_SUCCEEDED = 'succeeded'


def transaction_reference(intent_id):
    """Stable receipt reference derived from a payment intent id."""
    return f"TXN-{intent_id.removeprefix('pi_').upper()}"


def initialize_payment(amount, currency, metadata=None):
    """
    Open a payment intent with the (simulated) processor

    Args:
        amount (Decimal): Amount to charge in the major currency unit
        currency (str): ISO currency code
        metadata (dict, optional): Prospective booking details

    Returns:
        dict: {
            'status': bool,
            'data': {
                'id': str,
                'client_secret': str,
                'amount': Decimal,
                'currency': str,
                'status': 'requires_payment_method',
                'created': datetime,
                'metadata': dict
            },
            'message': str
        }
    """
    intent_id = f"pi_{uuid.uuid4().hex[:24]}"
    data = {
        'id': intent_id,
        'client_secret': f"{intent_id}_secret_{secrets.token_urlsafe(16)}",
        'amount': amount,
        'currency': currency,
        'status': INTENT_STATUS_REQUIRES_PAYMENT_METHOD,
        'created': timezone.now(),
        'metadata': metadata or {},
    }
    logger.info(f"Payment intent initialized: {intent_id} ({amount} {currency})")
    return {
        'status': True,
        'data': data,
        'message': 'Payment initialized successfully'
    }


def verify_payment(intent_id, amount, currency, provider, payment_method_id=None):
    """
    Verify that the processor captured the payment for an intent

    Returns:
        dict: {
            'status': bool,
            'data': {
                'status': str,  # 'succeeded' or the simulated failure status
                'amount_received': Decimal,
                'currency': str,
                'provider': str,
                'transaction_id': str,
                'paid_at': datetime or None
            },
            'message': str
        }
    """
    outcome = settings.PAYMENT_SIMULATED_STATUS
    succeeded = outcome == VERIFICATION_SUCCEEDED
    data = {
        'status': outcome,
        'amount_received': amount if succeeded else 0,
        'currency': currency,
        'provider': provider,
        'payment_method_id': payment_method_id,
        'transaction_id': transaction_reference(intent_id),
        'paid_at': timezone.now() if succeeded else None,
    }

    if succeeded:
        logger.info(f"Payment verified successfully: {intent_id} via {provider}")
        return {
            'status': True,
            'data': data,
            'message': 'Payment verified successfully'
        }

    logger.warning(f"Payment verification failed: {intent_id} via {provider} ({outcome})")
    return {
        'status': False,
        'data': data,
        'message': 'Payment failed or was not completed'
    }

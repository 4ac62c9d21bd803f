"""
Domain error taxonomy and the API-wide exception handler.

Every error leaves the API as ``{"success": false, "message": "..."}`` with
an HTTP status reflecting the error kind. Serializer failures additionally
carry the per-field ``errors`` mapping.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class ValidationError(exceptions.ValidationError):
    default_detail = 'Invalid input.'
    default_code = 'validation_error'


class AuthenticationError(exceptions.APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication credentials were not provided or are invalid.'
    default_code = 'authentication_error'


class AuthorizationError(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'authorization_error'


ForbiddenError = AuthorizationError


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Property is not available for the selected dates.'
    default_code = 'date_conflict'


class CapacityError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Guest count exceeds the property capacity.'
    default_code = 'capacity_exceeded'


class DuplicateError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This record already exists.'
    default_code = 'duplicate'


class NotEligibleError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'You are not eligible to perform this action.'
    default_code = 'not_eligible'


class InvalidStateError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This action is not allowed in the current state.'
    default_code = 'invalid_state'


class PaymentFailedError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment failed or was not completed.'
    default_code = 'payment_failed'


class UnexpectedError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Something went wrong on our side. Please try again later.'
    default_code = 'unexpected_error'


def _first_message(detail):
    """Pull a single human readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ('non_field_errors', 'detail'):
                return message
            return f"{field}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render all errors in the ``{success, message}`` envelope.

    DRF handles its own exceptions, ``Http404`` and Django's
    ``PermissionDenied``. Anything it leaves unhandled is logged and turned
    into a generic 500.
    """
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        # Always answer 401, even when no authenticator advertises a header
        exc.status_code = status.HTTP_401_UNAUTHORIZED

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: "
            f"{type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        set_rollback()
        unexpected = UnexpectedError()
        return Response(
            {'success': False, 'message': str(unexpected.detail)},
            status=unexpected.status_code,
        )

    if isinstance(exc, Http404):
        message = 'Resource not found.'
    elif isinstance(exc, DjangoPermissionDenied):
        message = AuthorizationError.default_detail
    else:
        message = _first_message(response.data)

    payload = {'success': False, 'message': message}
    if isinstance(exc, exceptions.ValidationError) and isinstance(response.data, dict):
        payload['errors'] = response.data
    response.data = payload
    return response

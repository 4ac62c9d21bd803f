from django.http import Http404
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.test import APITestCase

from core.exceptions import (
    CapacityError,
    ConflictError,
    ForbiddenError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
    api_exception_handler,
)


class ExceptionHandlerTests(TestCase):
    def test_domain_error_is_wrapped(self):
        response = api_exception_handler(ConflictError(), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'success': False,
            'message': 'Property is not available for the selected dates.',
        })

    def test_custom_message_and_status(self):
        response = api_exception_handler(CapacityError('Too many guests.'), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Too many guests.')

        response = api_exception_handler(NotFoundError('Booking not found.'), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Booking not found.')

    def test_forbidden_alias(self):
        self.assertIs(ForbiddenError, AuthorizationError)
        response = api_exception_handler(ForbiddenError(), {})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_validation_errors_carry_field_details(self):
        exc = DRFValidationError({'check_out': ['Check-out date must be after check-in date.']})
        response = api_exception_handler(exc, {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'check_out: Check-out date must be after check-in date.')
        self.assertIn('check_out', response.data['errors'])

    def test_plain_validation_error_message(self):
        response = api_exception_handler(ValidationError('Dates are required.'), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Dates are required.')
        self.assertNotIn('errors', response.data)

    def test_http404(self):
        response = api_exception_handler(Http404(), {})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'message': 'Resource not found.'})

    def test_unexpected_error_is_logged_and_hidden(self):
        with self.assertLogs('core.exceptions', level='ERROR') as logs:
            response = api_exception_handler(RuntimeError('database password is hunter2'), {'view': None})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(response.data['success'])
        self.assertNotIn('hunter2', response.data['message'])
        self.assertIn('RuntimeError', logs.output[0])


class ErrorEnvelopeAPITests(APITestCase):
    def test_unauthenticated_request_gets_401_envelope(self):
        response = self.client.get(reverse('booking-list-create'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertTrue(response.data['message'])

    def test_invalid_token_gets_401(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
        response = self.client.get(reverse('user-profile'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])


class HealthCheckTests(APITestCase):
    def test_health(self):
        response = self.client.get(reverse('health'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'OK')

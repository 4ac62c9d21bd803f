"""Confirmed-overlap rule used by bookings and payment intents."""
from datetime import date

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from booking.models import Booking
from booking.services import has_conflict
from core.tests.helpers import create_booking, create_property, create_user
from users.models import User


class HasConflictTests(TestCase):
    def setUp(self):
        self.host = create_user('host@example.com', role=User.ROLE_HOST)
        self.guest = create_user('guest@example.com')
        self.property = create_property(self.host)
        # Confirmed stay: nights of July 10, 11 and 12
        self.booking = create_booking(self.guest, self.property, date(2024, 7, 10), date(2024, 7, 13))

    def test_no_bookings_means_no_conflict(self):
        other = create_property(self.host, title='Empty listing')
        self.assertFalse(has_conflict(other.pk, date(2024, 7, 10), date(2024, 7, 13)))

    def test_overlapping_ranges_conflict(self):
        ranges = [
            (date(2024, 7, 9), date(2024, 7, 11)),
            (date(2024, 7, 12), date(2024, 7, 15)),
            (date(2024, 7, 11), date(2024, 7, 12)),
            (date(2024, 7, 1), date(2024, 7, 31)),
            (date(2024, 7, 10), date(2024, 7, 13)),
        ]
        for check_in, check_out in ranges:
            with self.subTest(check_in=check_in, check_out=check_out):
                self.assertTrue(has_conflict(self.property.pk, check_in, check_out))

    def test_touching_ranges_do_not_conflict(self):
        self.assertFalse(has_conflict(self.property.pk, date(2024, 7, 13), date(2024, 7, 15)))
        self.assertFalse(has_conflict(self.property.pk, date(2024, 7, 8), date(2024, 7, 10)))

    def test_only_confirmed_bookings_block(self):
        for status_value in (Booking.STATUS_PENDING, Booking.STATUS_CANCELLED, Booking.STATUS_COMPLETED):
            with self.subTest(status=status_value):
                self.booking.status = status_value
                self.booking.save()
                self.assertFalse(has_conflict(self.property.pk, date(2024, 7, 10), date(2024, 7, 13)))

    def test_excluded_booking_is_ignored(self):
        self.assertFalse(has_conflict(
            self.property.pk, date(2024, 7, 10), date(2024, 7, 13), exclude_booking_id=self.booking.pk
        ))

    def test_other_properties_do_not_interfere(self):
        other = create_property(self.host, title='Neighbouring listing')
        self.assertFalse(has_conflict(other.pk, date(2024, 7, 10), date(2024, 7, 13)))


class PropertyAvailabilityAPITests(APITestCase):
    def setUp(self):
        self.host = create_user('host@example.com', role=User.ROLE_HOST)
        self.guest = create_user('guest@example.com')
        self.property = create_property(self.host)
        create_booking(self.guest, self.property, date(2024, 7, 10), date(2024, 7, 13))
        create_booking(self.guest, self.property, date(2024, 7, 20), date(2024, 7, 22), status=Booking.STATUS_PENDING)
        self.url = reverse('property-availability', args=[self.property.pk])

    def test_reports_conflicting_ranges(self):
        response = self.client.get(self.url, {'check_in': '2024-07-12', 'check_out': '2024-07-21'})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data['data']['available'])
        self.assertEqual(response.data['data']['conflicting_ranges'], [
            {'check_in': date(2024, 7, 10), 'check_out': date(2024, 7, 13)},
        ])

    def test_free_dates(self):
        response = self.client.get(self.url, {'check_in': '2024-07-13', 'check_out': '2024-07-15'})
        self.assertTrue(response.data['data']['available'])
        self.assertEqual(response.data['data']['conflicting_ranges'], [])

    def test_requires_ordered_dates(self):
        response = self.client.get(self.url, {'check_in': '2024-07-15', 'check_out': '2024-07-15'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('check_out', response.data['errors'])

    def test_unknown_property(self):
        response = self.client.get(
            reverse('property-availability', args=[999]), {'check_in': '2024-07-13', 'check_out': '2024-07-15'}
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

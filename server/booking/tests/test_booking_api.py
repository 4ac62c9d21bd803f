"""API tests for booking creation, listing, cancellation and host transitions."""
from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from booking.models import Booking
from core.tests.helpers import create_booking, create_property, create_user
from users.models import User


class BookingCreateAPITests(APITestCase):
    def setUp(self):
        self.host = create_user('host@example.com', role=User.ROLE_HOST)
        self.guest = create_user('guest@example.com')
        self.other_guest = create_user('other@example.com')
        self.property = create_property(self.host, price=Decimal('3500.00'), max_guests=4)
        self.url = reverse('booking-list-create')
        self.client.force_authenticate(self.guest)

    def payload(self, **overrides):
        data = {
            'property_id': self.property.pk,
            'check_in': '2024-07-01',
            'check_out': '2024-07-03',
            'guests': 2,
        }
        data.update(overrides)
        return data

    def test_create_booking_is_pending_with_computed_total(self):
        response = self.client.post(self.url, self.payload(notes='Arriving late'))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        booking = response.data['data']['booking']
        self.assertEqual(booking['status'], Booking.STATUS_PENDING)
        self.assertEqual(booking['total_price'], '7000.00')
        self.assertEqual(booking['nights'], 2)
        self.assertTrue(booking['booking_reference'].startswith('BK-'))

        stored = Booking.objects.get(pk=booking['id'])
        self.assertEqual(stored.user, self.guest)
        self.assertEqual(stored.total_price, Decimal('7000.00'))
        self.assertEqual(stored.notes, 'Arriving late')

    def test_matching_client_total_is_accepted(self):
        response = self.client.post(self.url, self.payload(total_price='7000.00'))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_mismatched_client_total_is_rejected(self):
        response = self.client.post(self.url, self.payload(total_price='100.00'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('total_price', response.data['errors'])
        self.assertFalse(Booking.objects.exists())

    def test_confirmed_overlap_is_rejected(self):
        create_booking(self.other_guest, self.property, date(2024, 7, 1), date(2024, 7, 3))
        response = self.client.post(self.url, self.payload(check_in='2024-07-02', check_out='2024-07-04'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Property is not available for the selected dates.')
        self.assertEqual(Booking.objects.count(), 1)

    def test_back_to_back_stays_are_allowed(self):
        create_booking(self.other_guest, self.property, date(2024, 7, 1), date(2024, 7, 3))
        response = self.client.post(self.url, self.payload(check_in='2024-07-03', check_out='2024-07-05'))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_pending_booking_does_not_block(self):
        create_booking(self.other_guest, self.property, date(2024, 7, 1), date(2024, 7, 3), status=Booking.STATUS_PENDING)
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Booking.objects.filter(status=Booking.STATUS_PENDING).count(), 2)

    def test_capacity_is_enforced(self):
        for guests in (5, 6, 40):
            with self.subTest(guests=guests):
                response = self.client.post(self.url, self.payload(guests=guests))
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn('maximum of 4 guests', response.data['message'])
        self.assertFalse(Booking.objects.exists())

    def test_capacity_is_checked_before_conflict(self):
        create_booking(self.other_guest, self.property, date(2024, 7, 1), date(2024, 7, 3))
        response = self.client.post(self.url, self.payload(guests=9))
        self.assertIn('maximum of 4 guests', response.data['message'])

    def test_unknown_or_inactive_property_is_404(self):
        response = self.client.post(self.url, self.payload(property_id=999))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.property.is_active = False
        self.property.save()
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unavailable_property_is_404(self):
        self.property.availability = False
        self.property.save()
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_check_out_must_follow_check_in(self):
        response = self.client.post(self.url, self.payload(check_in='2024-07-03', check_out='2024-07-03'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('check_out', response.data['errors'])

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.post(self.url, self.payload())
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class BookingQueryAPITests(APITestCase):
    def setUp(self):
        self.host = create_user('host@example.com', role=User.ROLE_HOST, phone='+9779800000001')
        self.guest = create_user('guest@example.com')
        self.other_guest = create_user('other@example.com')
        self.property = create_property(self.host)
        self.first = create_booking(self.guest, self.property, date(2024, 7, 1), date(2024, 7, 3))
        self.second = create_booking(
            self.guest, self.property, date(2024, 8, 1), date(2024, 8, 3), status=Booking.STATUS_PENDING
        )
        self.foreign = create_booking(self.other_guest, self.property, date(2024, 9, 1), date(2024, 9, 3))
        self.client.force_authenticate(self.guest)

    def test_list_only_own_bookings_newest_first(self):
        response = self.client.get(reverse('booking-list-create'))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        ids = [item['id'] for item in response.data['data']['items']]
        self.assertEqual(ids, [self.second.pk, self.first.pk])
        self.assertEqual(response.data['data']['pagination']['totalItems'], 2)
        self.assertEqual(response.data['data']['items'][0]['host_first_name'], self.host.first_name)

    def test_status_filter(self):
        response = self.client.get(reverse('booking-list-create'), {'status': 'pending'})
        ids = [item['id'] for item in response.data['data']['items']]
        self.assertEqual(ids, [self.second.pk])

        response = self.client.get(reverse('booking-list-create'), {'status': 'archived'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_detail_includes_host_contact(self):
        response = self.client.get(reverse('booking-detail', args=[self.first.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking = response.data['data']['booking']
        self.assertEqual(booking['host']['email'], 'host@example.com')
        self.assertEqual(booking['host']['phone'], '+9779800000001')
        self.assertEqual(booking['property']['title'], self.property.title)

    def test_detail_of_foreign_booking_is_404(self):
        response = self.client.get(reverse('booking-detail', args=[self.foreign.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_booking_stays_readable_after_property_soft_delete(self):
        self.property.is_active = False
        self.property.save()
        response = self.client.get(reverse('booking-detail', args=[self.first.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['data']['booking']['property']['is_active'])

    def test_host_sees_bookings_on_own_properties(self):
        create_property(create_user('elsewhere@example.com', role=User.ROLE_HOST), title='Unrelated listing')
        self.client.force_authenticate(self.host)
        response = self.client.get(reverse('booking-hosting'))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['data']['pagination']['totalItems'], 3)
        self.assertIn('guest', response.data['data']['items'][0])

    def test_guest_cannot_list_hosting(self):
        response = self.client.get(reverse('booking-hosting'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class BookingCancelAPITests(APITestCase):
    def setUp(self):
        self.host = create_user('host@example.com', role=User.ROLE_HOST)
        self.guest = create_user('guest@example.com')
        self.property = create_property(self.host)
        today = timezone.localdate()
        self.future_in = today + timedelta(days=10)
        self.future_out = today + timedelta(days=12)
        self.client.force_authenticate(self.guest)

    def cancel(self, booking, method='put'):
        url = reverse('booking-cancel', args=[booking.pk])
        return getattr(self.client, method)(url)

    def test_cancel_pending_booking(self):
        booking = create_booking(self.guest, self.property, date(2024, 7, 1), date(2024, 7, 3), status=Booking.STATUS_PENDING)
        response = self.cancel(booking)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_CANCELLED)

    def test_cancel_future_confirmed_booking_via_post(self):
        booking = create_booking(self.guest, self.property, self.future_in, self.future_out)
        response = self.cancel(booking, method='post')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data['data']['booking']['status'], Booking.STATUS_CANCELLED)

    def test_cancel_twice_fails(self):
        booking = create_booking(self.guest, self.property, self.future_in, self.future_out)
        self.assertEqual(self.cancel(booking).status_code, status.HTTP_200_OK)
        response = self.cancel(booking)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Booking is already cancelled.')

    def test_cannot_cancel_completed_booking(self):
        booking = create_booking(self.guest, self.property, date(2024, 7, 1), date(2024, 7, 3), status=Booking.STATUS_COMPLETED)
        response = self.cancel(booking)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_COMPLETED)

    def test_cannot_cancel_confirmed_booking_after_check_in(self):
        today = timezone.localdate()
        booking = create_booking(self.guest, self.property, today, today + timedelta(days=2))
        response = self.cancel(booking)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Confirmed bookings can only be cancelled before check-in.')

    def test_cannot_cancel_someone_elses_booking(self):
        other = create_user('other@example.com')
        booking = create_booking(other, self.property, self.future_in, self.future_out)
        response = self.cancel(booking)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_CONFIRMED)

    def test_cancelled_booking_frees_the_dates(self):
        booking = create_booking(self.guest, self.property, self.future_in, self.future_out)
        self.cancel(booking)
        response = self.client.post(reverse('booking-list-create'), {
            'property_id': self.property.pk,
            'check_in': self.future_in.isoformat(),
            'check_out': self.future_out.isoformat(),
            'guests': 2,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)


class BookingTransitionAPITests(APITestCase):
    def setUp(self):
        self.host = create_user('host@example.com', role=User.ROLE_HOST)
        self.other_host = create_user('other-host@example.com', role=User.ROLE_HOST)
        self.admin = create_user('admin@example.com', role=User.ROLE_ADMIN)
        self.guest = create_user('guest@example.com')
        self.property = create_property(self.host)
        self.booking = create_booking(
            self.guest, self.property, date(2024, 7, 1), date(2024, 7, 3), status=Booking.STATUS_PENDING
        )

    def transition(self, user, new_status, booking=None):
        self.client.force_authenticate(user)
        booking = booking or self.booking
        return self.client.put(reverse('booking-status', args=[booking.pk]), {'status': new_status})

    def test_host_confirms_then_completes(self):
        response = self.transition(self.host, 'confirmed')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        response = self.transition(self.host, 'completed')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.STATUS_COMPLETED)

    def test_pending_cannot_jump_to_completed(self):
        response = self.transition(self.host, 'completed')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot change a pending booking to completed.')

    def test_terminal_states_are_final(self):
        self.booking.status = Booking.STATUS_CANCELLED
        self.booking.save()
        response = self.transition(self.admin, 'confirmed')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_confirming_overlapping_booking_conflicts(self):
        create_booking(create_user('early@example.com'), self.property, date(2024, 7, 2), date(2024, 7, 5))
        response = self.transition(self.host, 'confirmed')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Property is not available for the selected dates.')

    def test_other_host_is_forbidden(self):
        response = self.transition(self.other_host, 'confirmed')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_may_transition_any_booking(self):
        response = self.transition(self.admin, 'confirmed')
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_guest_is_forbidden(self):
        response = self.transition(self.guest, 'confirmed')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cannot_complete_before_check_out(self):
        today = timezone.localdate()
        upcoming = create_booking(self.guest, self.property, today + timedelta(days=30), today + timedelta(days=32))
        response = self.transition(self.host, 'completed', upcoming)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A booking can only be completed once its check-out date is reached.')
        upcoming.refresh_from_db()
        self.assertEqual(upcoming.status, Booking.STATUS_CONFIRMED)

        # Without a completed stay the guest still cannot review
        self.client.force_authenticate(self.guest)
        response = self.client.post(reverse('review-create'), {
            'property_id': self.property.pk,
            'rating': 5,
            'comment': 'Reviewing a stay that has not happened yet.',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'You can only review properties you have stayed at.')

    def test_complete_on_check_out_day(self):
        today = timezone.localdate()
        stay = create_booking(self.guest, self.property, today - timedelta(days=2), today)
        response = self.transition(self.host, 'completed', stay)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from booking.models import Booking
from properties.models import Property
from reviews.models import Review
from users.models import User


class SeedDemoDataTests(TestCase):

    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command('seed_demo_data', stdout=out)
        self.assertIn('Created: john@example.com (host)', out.getvalue())

        out = StringIO()
        call_command('seed_demo_data', stdout=out)
        self.assertIn('Exists: john@example.com (host)', out.getvalue())

        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Property.objects.count(), 3)
        self.assertEqual(Booking.objects.filter(status=Booking.STATUS_COMPLETED).count(), 1)
        self.assertEqual(Review.objects.count(), 1)

    def test_seeded_accounts_can_log_in(self):
        call_command('seed_demo_data', '--password', 'demo-pass-1', stdout=StringIO())
        jane = User.objects.get(email='jane@example.com')
        self.assertTrue(jane.check_password('demo-pass-1'))
        self.assertEqual(jane.role, User.ROLE_GUEST)
        nagarkot = Property.objects.get(city='Nagarkot')
        self.assertEqual(nagarkot.amenity_labels, ['Wi-Fi', 'Mountain View', 'Breakfast', 'Parking', 'Heater'])

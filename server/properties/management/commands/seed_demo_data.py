"""
Populate a development database with demo users, listings, a past stay and
its review. Safe to run repeatedly: existing rows are reused.

    python manage.py seed_demo_data
"""
import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from booking.models import Booking
from properties.models import Property
from reviews.models import Review
from users.models import User

USERS_DATA = [
    {
        'email': 'admin@stayhub.com',
        'first_name': 'Admin',
        'last_name': 'User',
        'phone': '+9779800000000',
        'role': User.ROLE_ADMIN,
    },
    {
        'email': 'john@example.com',
        'first_name': 'John',
        'last_name': 'Host',
        'phone': '+9779800000001',
        'role': User.ROLE_HOST,
    },
    {
        'email': 'jane@example.com',
        'first_name': 'Jane',
        'last_name': 'Guest',
        'phone': '+9779800000002',
        'role': User.ROLE_GUEST,
    },
]

PROPERTIES_DATA = [
    {
        'title': 'Sunny Retreat in Nagarkot',
        'description': 'A beautiful mountain retreat with stunning sunrise views over the Himalayas. '
                       'Perfect for a peaceful getaway with modern amenities and traditional Nepali hospitality.',
        'type': Property.TYPE_HOUSE,
        'address': 'Nagarkot Hill Station',
        'city': 'Nagarkot',
        'state': 'Bagmati',
        'country': 'Nepal',
        'zip_code': '44600',
        'latitude': Decimal('27.7172'),
        'longitude': Decimal('85.5328'),
        'price': Decimal('3500.00'),
        'bedrooms': 2,
        'bathrooms': 2,
        'max_guests': 4,
        'amenities': ['Wi-Fi', 'Mountain View', 'Breakfast', 'Parking', 'Heater'],
        'images': ['https://placehold.co/600x400?text=Nagarkot'],
    },
    {
        'title': 'Cozy Cabin in Pokhara',
        'description': 'Lakeside cabin with beautiful views of Phewa Lake and the Annapurna range. '
                       'Ideal for adventure seekers and nature lovers.',
        'type': Property.TYPE_CABIN,
        'address': 'Lakeside, Pokhara',
        'city': 'Pokhara',
        'state': 'Gandaki',
        'country': 'Nepal',
        'zip_code': '33700',
        'latitude': Decimal('28.2096'),
        'longitude': Decimal('83.9856'),
        'price': Decimal('5200.00'),
        'bedrooms': 3,
        'bathrooms': 2,
        'max_guests': 6,
        'amenities': ['Lake View', 'Wi-Fi', 'Boating', 'Trekking Guide', 'Kitchen'],
        'images': ['https://placehold.co/600x400?text=Pokhara'],
    },
    {
        'title': 'Wildlife Lodge in Chitwan',
        'description': 'Experience wildlife up close in this eco-friendly lodge located in the heart of Chitwan National Park.',
        'type': Property.TYPE_VILLA,
        'address': 'Sauraha, Chitwan National Park',
        'city': 'Chitwan',
        'state': 'Narayani',
        'country': 'Nepal',
        'zip_code': '44200',
        'latitude': Decimal('27.5786'),
        'longitude': Decimal('84.4951'),
        'price': Decimal('2800.00'),
        'bedrooms': 2,
        'bathrooms': 1,
        'max_guests': 4,
        'amenities': ['Safari', 'Wildlife View', 'Restaurant', 'Guide', 'Nature Walk'],
        'images': ['https://placehold.co/600x400?text=Chitwan'],
    },
]


class Command(BaseCommand):
    help = "Create demo users, properties, a completed booking and a review"

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default='password123',
            help="Password for newly created demo accounts",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("=== Creating Users ===")
        users = {}
        for data in USERS_DATA:
            user = User.objects.filter(email=data['email']).first()
            created = user is None
            if created:
                extra = {key: value for key, value in data.items() if key not in ('email', 'first_name', 'last_name')}
                user = User.objects.create_user(
                    data['email'],
                    data['first_name'],
                    data['last_name'],
                    password=options['password'],
                    is_verified=True,
                    is_staff=data['role'] == User.ROLE_ADMIN,
                    **extra,
                )
            users[data['role']] = user
            self.stdout.write(f"{'Created' if created else 'Exists'}: {user.email} ({user.role})")

        self.stdout.write("=== Creating Properties ===")
        host = users[User.ROLE_HOST]
        properties = []
        for data in PROPERTIES_DATA:
            fields = dict(data)
            amenities = fields.pop('amenities')
            images = fields.pop('images')
            prop, created = Property.objects.get_or_create(host=host, title=fields.pop('title'), defaults=fields)
            if created:
                prop.replace_amenities(amenities)
                prop.replace_images(images)
            properties.append(prop)
            self.stdout.write(f"{'Created' if created else 'Exists'}: {prop.title}")

        self.stdout.write("=== Creating Bookings ===")
        guest = users[User.ROLE_GUEST]
        stay = properties[0]
        booking, created = Booking.objects.get_or_create(
            user=guest,
            property=stay,
            check_in=datetime.date(2024, 7, 1),
            check_out=datetime.date(2024, 7, 3),
            defaults={
                'guests': 2,
                'total_price': stay.price * 2,
                'status': Booking.STATUS_COMPLETED,
            },
        )
        self.stdout.write(f"{'Created' if created else 'Exists'}: {booking.booking_reference}")

        self.stdout.write("=== Creating Reviews ===")
        review, created = Review.objects.get_or_create(
            user=guest,
            property=stay,
            defaults={
                'rating': 5,
                'comment': 'Amazing place with breathtaking views! The sunrise from the balcony was unforgettable. '
                           'Highly recommended for anyone looking for a peaceful retreat.',
            },
        )
        self.stdout.write(f"{'Created' if created else 'Exists'}: review of {review.property.title}")

        self.stdout.write(self.style.SUCCESS(
            f"Demo data ready: {len(users)} users, {len(properties)} properties"
        ))

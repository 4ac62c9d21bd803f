"""Builders shared by the API test suites."""
from decimal import Decimal

from booking.models import Booking
from properties.models import Property
from users.models import User

DEFAULT_PASSWORD = 'StrongPass123'


def create_user(email, role=User.ROLE_GUEST, **extra):
    extra.setdefault('first_name', email.split('@')[0].title())
    extra.setdefault('last_name', 'Tester')
    first_name = extra.pop('first_name')
    last_name = extra.pop('last_name')
    return User.objects.create_user(
        email, first_name, last_name, password=DEFAULT_PASSWORD, role=role, **extra
    )


def create_property(host, amenities=(), images=(), **overrides):
    fields = {
        'title': 'Sunny Retreat in Nagarkot',
        'description': 'A mountain retreat with sunrise views over the Himalayas.',
        'type': Property.TYPE_HOUSE,
        'address': 'Nagarkot Hill Station',
        'city': 'Nagarkot',
        'state': 'Bagmati',
        'country': 'Nepal',
        'zip_code': '44600',
        'price': Decimal('3500.00'),
        'currency': 'NPR',
        'bedrooms': 2,
        'bathrooms': 2,
        'max_guests': 4,
    }
    fields.update(overrides)
    property_instance = Property.objects.create(host=host, **fields)
    if amenities:
        property_instance.replace_amenities(list(amenities))
    if images:
        property_instance.replace_images(list(images))
    return property_instance


def create_booking(user, property_instance, check_in, check_out, status=Booking.STATUS_CONFIRMED, guests=2, **extra):
    nights = (check_out - check_in).days
    return Booking.objects.create(
        user=user,
        property=property_instance,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        total_price=property_instance.price * nights,
        status=status,
        **extra,
    )

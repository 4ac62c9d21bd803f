from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class PropertyQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def bookable(self):
        """Active listings the host has opened for bookings."""
        return self.filter(is_active=True, availability=True)


class Property(models.Model):
    TYPE_APARTMENT = 'apartment'
    TYPE_HOUSE = 'house'
    TYPE_VILLA = 'villa'
    TYPE_CABIN = 'cabin'
    TYPE_HOTEL = 'hotel'

    TYPE_CHOICES = [
        (TYPE_APARTMENT, 'Apartment'),
        (TYPE_HOUSE, 'House'),
        (TYPE_VILLA, 'Villa'),
        (TYPE_CABIN, 'Cabin'),
        (TYPE_HOTEL, 'Hotel'),
    ]

    host = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='properties')
    title = models.CharField(max_length=100)
    description = models.TextField()
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)

    address = models.CharField(max_length=255)
    city = models.CharField(max_length=50, db_index=True)
    state = models.CharField(max_length=50)
    country = models.CharField(max_length=50)
    zip_code = models.CharField(max_length=10)
    latitude = models.DecimalField(max_digits=10, decimal_places=8, null=True, blank=True)
    longitude = models.DecimalField(max_digits=11, decimal_places=8, null=True, blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))], db_index=True)
    currency = models.CharField(max_length=3, default='NPR')
    bedrooms = models.PositiveIntegerField()
    bathrooms = models.PositiveIntegerField()
    max_guests = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    availability = models.BooleanField(default=True, help_text="Host toggle: accepting new bookings")
    is_active = models.BooleanField(default=True, db_index=True, help_text="False once the listing is deleted")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PropertyQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'Properties'

    def __str__(self):
        return self.title

    @property
    def amenity_labels(self):
        return [amenity.label for amenity in self.amenities.all()]

    @property
    def image_urls(self):
        return [image.image_url for image in self.images.all()]

    def replace_amenities(self, labels):
        self.amenities.all().delete()
        Amenity.objects.bulk_create([Amenity(property=self, label=label) for label in labels])

    def replace_images(self, urls):
        self.images.all().delete()
        PropertyImage.objects.bulk_create([
            PropertyImage(property=self, image_url=url, order=position)
            for position, url in enumerate(urls)
        ])


class Amenity(models.Model):
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='amenities')
    label = models.CharField(max_length=100)

    class Meta:
        verbose_name_plural = 'Amenities'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['property', 'label'], name='unique_amenity_per_property'),
        ]

    def __str__(self):
        return self.label


class PropertyImage(models.Model):
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='images')
    image_url = models.URLField(max_length=500)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['order']

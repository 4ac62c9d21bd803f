import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from properties.models import Property


class Booking(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('card', 'Card'),
        ('esewa', 'eSewa'),
        ('khalti', 'Khalti'),
    ]

    PAYMENT_PROVIDER_CHOICES = [
        ('stripe', 'Stripe'),
        ('esewa', 'eSewa'),
        ('khalti', 'Khalti'),
    ]

    # Booking reference (e.g., BK-2024-3F9A1C2E)
    booking_reference = models.CharField(max_length=50, unique=True, blank=True)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='bookings')

    check_in = models.DateField()
    check_out = models.DateField(help_text="Exclusive: the guest leaves on this day")
    guests = models.PositiveIntegerField()
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)

    # Set only on bookings created through a confirmed payment
    payment_intent_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    payment_provider = models.CharField(max_length=20, choices=PAYMENT_PROVIDER_CHOICES, blank=True)
    payment_completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['property', 'status', 'check_in', 'check_out'], name='booking_overlap_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F('check_in')),
                name='booking_check_out_after_check_in',
            ),
        ]

    def __str__(self):
        return f"{self.booking_reference} - {self.user.email}"

    def save(self, *args, **kwargs):
        if not self.booking_reference:
            year = timezone.now().year
            self.booking_reference = f"BK-{year}-{uuid.uuid4().hex[:8].upper()}"
        super().save(*args, **kwargs)

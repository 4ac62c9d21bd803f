from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['booking_reference', 'user', 'property', 'check_in', 'check_out', 'guests', 'total_price', 'status', 'created_at']
    list_filter = ['status', 'payment_method', 'created_at', 'check_in']
    search_fields = ['booking_reference', 'user__email', 'property__title', 'payment_intent_id']
    readonly_fields = ['booking_reference', 'payment_intent_id', 'payment_completed_at', 'created_at', 'updated_at']
    raw_id_fields = ['user', 'property']

    fieldsets = (
        ('Booking Information', {
            'fields': ('booking_reference', 'user', 'property', 'status')
        }),
        ('Stay', {
            'fields': ('check_in', 'check_out', 'guests', 'total_price', 'notes')
        }),
        ('Payment', {
            'fields': ('payment_intent_id', 'payment_method', 'payment_provider', 'payment_completed_at')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at')
        }),
    )

from django.contrib import admin

from .models import Amenity, Property, PropertyImage


class AmenityInline(admin.TabularInline):
    model = Amenity
    extra = 1


class PropertyImageInline(admin.TabularInline):
    model = PropertyImage
    extra = 1


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ['title', 'host', 'city', 'country', 'type', 'price', 'max_guests', 'availability', 'is_active', 'created_at']
    list_filter = ['type', 'availability', 'is_active', 'country', 'created_at']
    search_fields = ['title', 'city', 'description', 'host__email']
    raw_id_fields = ['host']
    inlines = [AmenityInline, PropertyImageInline]

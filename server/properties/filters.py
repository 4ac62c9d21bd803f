import django_filters

from .models import Amenity, Property


class PropertyFilter(django_filters.FilterSet):
    city = django_filters.CharFilter(field_name='city', lookup_expr='icontains')
    type = django_filters.ChoiceFilter(field_name='type', choices=Property.TYPE_CHOICES)
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')
    min_bedrooms = django_filters.NumberFilter(field_name='bedrooms', lookup_expr='gte')
    min_guests = django_filters.NumberFilter(field_name='max_guests', lookup_expr='gte')
    amenities = django_filters.CharFilter(method='filter_amenities')

    class Meta:
        model = Property
        fields = ['city', 'type', 'min_price', 'max_price', 'min_bedrooms', 'min_guests', 'amenities']

    def filter_amenities(self, queryset, name, value):
        """Comma separated labels; a property must carry every one of them."""
        labels = [label.strip() for label in value.split(',') if label.strip()]
        for label in labels:
            queryset = queryset.filter(
                pk__in=Amenity.objects.filter(label__iexact=label).values('property_id')
            )
        return queryset

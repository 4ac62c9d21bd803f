import logging

from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from booking.services import check_availability
from core.permissions import IsHost
from reviews.serializers import ReviewSerializer

from . import services
from .models import Property
from .serializers import AvailabilityQuerySerializer, PropertyDetailSerializer, PropertySerializer

logger = logging.getLogger(__name__)


class PropertyListCreateView(generics.ListCreateAPIView):
    """
    Search active listings or publish a new one.

    Filters: ``city``, ``type``, ``min_price``, ``max_price``,
    ``min_bedrooms``, ``min_guests`` and ``amenities`` (comma separated, all
    required). Sorting: ``sort_by`` and ``sort_order``.
    """
    serializer_class = PropertySerializer

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsHost()]
        return [AllowAny()]

    def get_queryset(self):
        return services.search_properties(self.request.query_params)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        property_instance = serializer.save(host=request.user)
        logger.info(f"Property {property_instance.pk} created by host {request.user.pk}")
        return Response({
            'success': True,
            'message': 'Property created successfully',
            'data': {'property': self.get_serializer(services.get_property(property_instance.pk)).data}
        }, status=status.HTTP_201_CREATED)


class MyPropertyListView(generics.ListAPIView):
    serializer_class = PropertySerializer
    permission_classes = [IsHost]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Property.objects.none()
        return services.list_host_properties(self.request.user)


class PropertyDetailView(generics.GenericAPIView):
    serializer_class = PropertyDetailSerializer

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsHost()]

    def get(self, request, pk):
        property_instance = services.get_property(pk)
        reviews = services.get_property_reviews(property_instance)
        return Response({
            'success': True,
            'data': {
                'property': self.get_serializer(property_instance).data,
                'reviews': ReviewSerializer(reviews, many=True).data,
            }
        })

    def put(self, request, pk):
        return self._update(request, pk, partial=False)

    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    def _update(self, request, pk, partial):
        property_instance = services.get_managed_property(request.user, pk)
        serializer = PropertySerializer(property_instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            'success': True,
            'message': 'Property updated successfully',
            'data': {'property': self.get_serializer(services.get_property(pk)).data}
        })

    def delete(self, request, pk):
        services.deactivate_property(request.user, pk)
        return Response({
            'success': True,
            'message': 'Property deleted successfully'
        }, status=status.HTTP_200_OK)


class PropertyAvailabilityView(APIView):
    """Whether a listing is free for ``check_in``/``check_out`` (confirmed bookings only)."""
    permission_classes = [AllowAny]

    def get(self, request, pk):
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = check_availability(pk, **query.validated_data)
        return Response({'success': True, 'data': result})

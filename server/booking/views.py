from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.permissions import IsHost

from . import services
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingDetailSerializer,
    BookingListQuerySerializer,
    BookingListSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    HostedBookingSerializer,
)


class StatusFilterMixin:

    def get_status_filter(self):
        query = BookingListQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        return query.validated_data.get('status')


class BookingListCreateView(StatusFilterMixin, generics.ListCreateAPIView):
    """
    List the current user's bookings or create a new one.

    New bookings start as ``pending``. Only confirmed bookings block dates,
    so a pending booking never rejects another request for the same stay.
    """
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return BookingCreateSerializer
        return BookingListSerializer

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()
        return services.list_bookings(self.request.user, self.get_status_filter())

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.create_booking(request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'message': 'Booking created successfully',
            'data': {'booking': BookingSerializer(booking).data}
        }, status=status.HTTP_201_CREATED)


class HostedBookingListView(StatusFilterMixin, generics.ListAPIView):
    """Bookings made on the properties the current host owns."""
    serializer_class = HostedBookingSerializer
    permission_classes = [IsHost]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()
        return services.list_hosted_bookings(self.request.user, self.get_status_filter())


class BookingDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        booking = services.get_booking(request.user, pk)
        return Response({
            'success': True,
            'data': {'booking': BookingDetailSerializer(booking).data}
        })


class BookingCancelView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, pk):
        booking = services.cancel_booking(request.user, pk)
        return Response({
            'success': True,
            'message': 'Booking cancelled successfully',
            'data': {'booking': BookingSerializer(booking).data}
        }, status=status.HTTP_200_OK)

    post = put


class BookingStatusView(generics.GenericAPIView):
    serializer_class = BookingStatusSerializer
    permission_classes = [IsHost]

    def put(self, request, pk):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.transition_booking(request.user, pk, serializer.validated_data['status'])
        return Response({
            'success': True,
            'message': f'Booking {booking.status}',
            'data': {'booking': BookingSerializer(booking).data}
        })

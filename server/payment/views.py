from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from booking.models import Booking

from . import services
from .serializers import (
    PaymentConfirmResponseSerializer,
    PaymentConfirmSerializer,
    PaymentHistorySerializer,
    PaymentIntentCreateSerializer,
    PaymentIntentSerializer,
)


class PaymentIntentCreateView(APIView):
    """Start the payment flow for a prospective stay."""
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        request_body=PaymentIntentCreateSerializer,
        responses={
            201: openapi.Response(
                description="Payment intent created",
                examples={
                    "application/json": {
                        "success": True,
                        "message": "Payment intent created successfully",
                        "data": {
                            "payment_intent": {
                                "id": "pi_3f9a1c2e7b6d4a0e9c8b7a61",
                                "client_secret": "pi_3f9a1c2e7b6d4a0e9c8b7a61_secret_x1y2z3",
                                "amount": "5000.00",
                                "currency": "NPR",
                                "status": "requires_payment_method"
                            }
                        }
                    }
                }
            ),
            400: "Bad Request - invalid input, capacity exceeded or dates taken",
            404: "Not Found - property missing or unavailable"
        },
        operation_description="Validate the stay and open a payment intent. No booking is created yet."
    )
    def post(self, request):
        serializer = PaymentIntentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        intent = services.create_intent(request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'message': 'Payment intent created successfully',
            'data': {'payment_intent': PaymentIntentSerializer(intent).data}
        }, status=status.HTTP_201_CREATED)


class PaymentConfirmView(APIView):
    """Confirm a payment intent and create the confirmed booking."""
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        request_body=PaymentConfirmSerializer,
        responses={
            200: openapi.Response(
                description="Payment confirmed and booking created",
                schema=PaymentConfirmResponseSerializer,
            ),
            400: "Bad Request - payment failed or dates no longer available",
            403: "Forbidden - intent belongs to another user",
            404: "Not Found - intent unknown or expired"
        },
        operation_description=(
            "Verify the payment with the provider and create a confirmed booking. "
            "Confirming the same intent again returns the existing booking."
        )
    )
    def post(self, request):
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking, receipt, created = services.confirm_payment(request.user, **serializer.validated_data)
        message = (
            'Payment confirmed and booking created successfully'
            if created else 'Payment already confirmed'
        )
        return Response({
            'success': True,
            'message': message,
            'data': PaymentConfirmResponseSerializer({'booking': booking, 'payment': receipt}).data
        }, status=status.HTTP_200_OK)


class PaymentHistoryView(generics.ListAPIView):
    serializer_class = PaymentHistorySerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()
        return services.payment_history(self.request.user)

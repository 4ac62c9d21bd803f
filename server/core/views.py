from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthCheckView(APIView):
    """Liveness probe"""
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        return Response({
            'status': 'OK',
            'message': 'Server is running',
            'timestamp': timezone.now().isoformat(),
            'debug': settings.DEBUG,
        }, status=status.HTTP_200_OK)

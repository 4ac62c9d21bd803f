from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from .views import HealthCheckView

schema_view = get_schema_view(
    openapi.Info(
        title="StayHub API",
        default_version='v1',
        description="Vacation rental marketplace: listings, bookings, payments and reviews",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', HealthCheckView.as_view(), name='health'),

    path('api/', include('users.urls')),
    path('api/', include('properties.urls')),
    path('api/', include('booking.urls')),
    path('api/', include('payment.urls')),
    path('api/', include('reviews.urls')),

    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]

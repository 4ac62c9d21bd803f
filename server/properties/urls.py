from django.urls import path

from .views import (
    MyPropertyListView,
    PropertyAvailabilityView,
    PropertyDetailView,
    PropertyListCreateView,
)

urlpatterns = [
    path('properties/', PropertyListCreateView.as_view(), name='property-list'),
    path('properties/mine/', MyPropertyListView.as_view(), name='property-mine'),
    path('properties/<int:pk>/', PropertyDetailView.as_view(), name='property-detail'),
    path('properties/<int:pk>/availability/', PropertyAvailabilityView.as_view(), name='property-availability'),
]

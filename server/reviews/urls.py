from django.urls import path

from .views import (
    MyReviewListView,
    PropertyReviewListView,
    ReviewCreateView,
    ReviewDetailView,
)

urlpatterns = [
    path('reviews/', ReviewCreateView.as_view(), name='review-create'),
    path('reviews/mine/', MyReviewListView.as_view(), name='review-mine'),
    path('reviews/property/<int:property_id>/', PropertyReviewListView.as_view(), name='property-reviews'),
    path('reviews/<int:pk>/', ReviewDetailView.as_view(), name='review-detail'),
]

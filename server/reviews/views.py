from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from . import services
from .models import Review
from .serializers import (
    MyReviewSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    ReviewWriteSerializer,
)


class ReviewCreateView(generics.GenericAPIView):
    serializer_class = ReviewCreateSerializer
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = services.create_review(request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'message': 'Review created successfully',
            'data': {'review': ReviewSerializer(review).data}
        }, status=status.HTTP_201_CREATED)


class MyReviewListView(generics.ListAPIView):
    serializer_class = MyReviewSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Review.objects.none()
        return (
            Review.objects.filter(user=self.request.user)
            .select_related('property')
            .prefetch_related('property__images')
            .order_by('-created_at', '-id')
        )


class PropertyReviewListView(generics.ListAPIView):
    """Paginated reviews of one property plus its rating summary."""
    serializer_class = ReviewSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        return services.property_reviews(self.kwargs['property_id'])

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        summary = services.rating_summary(queryset)
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.paginator.get_paginated_response(serializer.data, **summary)


class ReviewDetailView(generics.GenericAPIView):
    serializer_class = ReviewWriteSerializer
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        review = generics.get_object_or_404(Review.objects.select_related('user'), pk=pk)
        return Response({'success': True, 'data': {'review': ReviewSerializer(review).data}})

    def put(self, request, pk):
        return self._update(request, pk, partial=False)

    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    def _update(self, request, pk, partial):
        review = services.get_authored_review(request.user, pk)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        for attr, value in serializer.validated_data.items():
            setattr(review, attr, value)
        review.save()
        return Response({
            'success': True,
            'message': 'Review updated successfully',
            'data': {'review': ReviewSerializer(review).data}
        })

    def delete(self, request, pk):
        services.delete_review(request.user, pk)
        return Response({
            'success': True,
            'message': 'Review deleted successfully'
        }, status=status.HTTP_200_OK)

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    UserRegisterView,
    LoginView,
    LogoutView,
    UserProfileView,
    # Admin views
    UserListView,
    UserManageView,
)

urlpatterns = [
    # Public endpoints
    path('auth/register/', UserRegisterView.as_view(), name='register'),
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # Authenticated endpoints
    path('auth/logout/', LogoutView.as_view(), name='logout'),
    path('auth/profile/', UserProfileView.as_view(), name='user-profile'),

    # Admin endpoints
    path('users/', UserListView.as_view(), name='admin-user-list'),
    path('users/<int:pk>/', UserManageView.as_view(), name='admin-user-manage'),
]

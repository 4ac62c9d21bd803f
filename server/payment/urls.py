from django.urls import path

from .views import PaymentConfirmView, PaymentHistoryView, PaymentIntentCreateView

urlpatterns = [
    path('payments/create-intent/', PaymentIntentCreateView.as_view(), name='payment-create-intent'),
    path('payments/confirm/', PaymentConfirmView.as_view(), name='payment-confirm'),
    path('payments/history/', PaymentHistoryView.as_view(), name='payment-history'),
]

from django.urls import path

from . import views

urlpatterns = [
    path('payments/process/', views.PaymentProcessView.as_view(), name='payment-process'),
]

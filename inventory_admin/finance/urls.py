from django.urls import path
from .views import (
    gst_rate_list_create, gst_rate_detail, gst_calculate,
    payment_gateway_list, payment_gateway_active, payment_gateway_update, payment_gateway_toggle,
)

urlpatterns = [
    # GST
    path('finance/gst-rates', gst_rate_list_create, name='gst-rate-list-create'),
    path('finance/gst-rates/<int:pk>', gst_rate_detail, name='gst-rate-detail'),
    path('finance/gst/calculate', gst_calculate, name='gst-calculate'),

    # Payment gateways
    path('payment-gateway', payment_gateway_list, name='payment-gateway-list'),
    path('payment-gateway/active', payment_gateway_active, name='payment-gateway-active'),
    path('payment-gateway/<str:name>', payment_gateway_update, name='payment-gateway-update'),
    path('payment-gateway/<str:name>/toggle', payment_gateway_toggle, name='payment-gateway-toggle'),
]

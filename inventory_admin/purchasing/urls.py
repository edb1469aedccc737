from django.urls import path
from .views import (
    purchase_order_list_create, purchase_order_next_number, purchase_order_stats, purchase_order_detail,
    bill_list_create, bill_next_grn, bill_stats, bill_detail, bill_payment,
    supplier_bills, supplier_purchase_orders,
)

urlpatterns = [
    path('purchase-orders', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/next-number', purchase_order_next_number, name='purchase-order-next-number'),
    path('purchase-orders/stats', purchase_order_stats, name='purchase-order-stats'),
    path('purchase-orders/<int:pk>', purchase_order_detail, name='purchase-order-detail'),
    path('bills', bill_list_create, name='bill-list-create'),
    path('bills/next-grn', bill_next_grn, name='bill-next-grn'),
    path('bills/stats', bill_stats, name='bill-stats'),
    path('bills/<int:pk>', bill_detail, name='bill-detail'),
    path('bills/<int:pk>/payment', bill_payment, name='bill-payment'),
    path('suppliers/<int:pk>/bills', supplier_bills, name='supplier-bills'),
    path('suppliers/<int:pk>/purchase-orders', supplier_purchase_orders, name='supplier-purchase-orders'),
]

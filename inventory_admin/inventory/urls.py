from django.urls import path
from .views import (
    stock_adjustment_list_create,
    processing_pool_list, processing_pool_detail, processing_pool_recipe,
    processing_transaction_list_create, processing_transaction_detail,
)

urlpatterns = [
    path('stock-adjustments', stock_adjustment_list_create, name='stock-adjustment-list-create'),
    path('processing-pool', processing_pool_list, name='processing-pool-list'),
    path('processing-pool/<int:pk>', processing_pool_detail, name='processing-pool-detail'),
    path('processing-pool/<int:pk>/recipe', processing_pool_recipe, name='processing-pool-recipe'),
    path('processing-transactions', processing_transaction_list_create, name='processing-transaction-list-create'),
    path('processing-transactions/<int:pk>', processing_transaction_detail, name='processing-transaction-detail'),
]

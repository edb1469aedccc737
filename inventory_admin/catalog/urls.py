from django.urls import path
from .views import (
    category_list_create, category_detail,
    item_list_create, item_check_sku, item_detail,
)

urlpatterns = [
    path('categories', category_list_create, name='category-list-create'),
    path('categories/<int:pk>', category_detail, name='category-detail'),
    path('items', item_list_create, name='item-list-create'),
    path('items/check-sku', item_check_sku, name='item-check-sku'),
    path('items/<int:pk>', item_detail, name='item-detail'),
]

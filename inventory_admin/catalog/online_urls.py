from django.urls import path
from .views import online_product_list_create, online_product_detail, public_product_detail

urlpatterns = [
    path('online-products', online_product_list_create, name='online-product-list-create'),
    path('online-products/<int:pk>', online_product_detail, name='online-product-detail'),
    path('frontend/products/<slug:slug>', public_product_detail, name='public-product-detail'),
]

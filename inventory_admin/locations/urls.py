from django.urls import path
from .views import warehouse_list_create, warehouse_detail

urlpatterns = [
    path('warehouses', warehouse_list_create, name='warehouse-list-create'),
    path('warehouses/<int:pk>', warehouse_detail, name='warehouse-detail'),
]

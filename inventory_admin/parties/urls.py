from django.urls import path
from .views import supplier_list_create, supplier_detail

urlpatterns = [
    path('suppliers', supplier_list_create, name='supplier-list-create'),
    path('suppliers/<int:pk>', supplier_detail, name='supplier-detail'),
]

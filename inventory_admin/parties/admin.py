from django.contrib import admin
from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'phone', 'email', 'state', 'tax_id', 'is_active', 'created_at']
    list_filter = ['is_active', 'supplier_type', 'state']
    search_fields = ['name', 'code', 'phone', 'email', 'tax_id']
    ordering = ['name']

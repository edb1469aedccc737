from django.contrib import admin
from .models import Warehouse


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'city', 'state', 'phone', 'is_active', 'created_at']
    list_filter = ['is_active', 'state']
    search_fields = ['name', 'code', 'city']
    ordering = ['name']

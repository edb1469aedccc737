from django.contrib import admin
from .models import GSTRate, PaymentGateway


@admin.register(GSTRate)
class GSTRateAdmin(admin.ModelAdmin):
    list_display = ['name', 'rate', 'is_active', 'updated_at']
    list_filter = ['is_active']
    search_fields = ['name']
    ordering = ['rate']


@admin.register(PaymentGateway)
class PaymentGatewayAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'test_mode', 'updated_at']
    list_filter = ['is_active', 'test_mode']
    exclude = ['secret_key', 'webhook_secret']

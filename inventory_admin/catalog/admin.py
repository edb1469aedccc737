from django.contrib import admin
from .models import Category, Item, OnlineProduct


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'parent', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['item_name', 'item_code', 'category', 'warehouse', 'quantity', 'uom', 'status', 'item_type']
    list_filter = ['status', 'item_type', 'category', 'warehouse']
    search_fields = ['item_name', 'item_code', 'hsn_code']
    readonly_fields = ['quantity', 'status', 'created_at', 'updated_at']


@admin.register(OnlineProduct)
class OnlineProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'item', 'selling_price', 'mrp', 'is_published', 'is_featured']
    list_filter = ['is_published', 'is_featured']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}

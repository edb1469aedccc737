from django.contrib import admin
from .models import StockAdjustment, ProcessingPool, ProcessingRecipe, ProcessingTransaction


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(admin.ModelAdmin):
    list_display = ['item', 'adjustment_method', 'adjustment_type', 'quantity', 'previous_quantity',
                    'new_quantity', 'grn_number', 'created_at']
    list_filter = ['adjustment_method', 'adjustment_type', 'reason']
    search_fields = ['item__item_name', 'item__item_code', 'grn_number', 'po_number']
    readonly_fields = ['created_at']


@admin.register(ProcessingPool)
class ProcessingPoolAdmin(admin.ModelAdmin):
    list_display = ['item', 'warehouse', 'current_stock', 'uom', 'avg_purchase_price', 'total_value', 'status']
    list_filter = ['status', 'warehouse']
    search_fields = ['item__item_name']


@admin.register(ProcessingRecipe)
class ProcessingRecipeAdmin(admin.ModelAdmin):
    list_display = ['pool', 'output_item', 'times_created', 'total_quantity', 'last_created_at']


@admin.register(ProcessingTransaction)
class ProcessingTransactionAdmin(admin.ModelAdmin):
    list_display = ['transaction_number', 'pool', 'input_quantity', 'wastage_quantity', 'total_cost', 'processed_at']
    search_fields = ['transaction_number']
    readonly_fields = ['created_at']

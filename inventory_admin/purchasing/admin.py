from django.contrib import admin
from .models import PurchaseOrder, PurchaseOrderItem, Bill, BillItem


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ['item_total', 'total_gst_amount', 'total_price']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'supplier_name', 'warehouse', 'po_date', 'status', 'grand_total', 'created_at']
    list_filter = ['status', 'gst_type']
    search_fields = ['po_number', 'supplier_name']
    readonly_fields = ['sub_total', 'total_cgst', 'total_sgst', 'total_igst', 'total_gst', 'grand_total']
    inlines = [PurchaseOrderItemInline]


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0
    readonly_fields = ['item_total', 'total_gst_amount', 'total_price']


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ['grn_number', 'supplier_name', 'supplier_invoice_no', 'bill_date', 'payment_status',
                    'grand_total', 'paid_amount']
    list_filter = ['payment_status', 'gst_type']
    search_fields = ['grn_number', 'po_number', 'supplier_name', 'supplier_invoice_no']
    readonly_fields = ['sub_total', 'total_cgst', 'total_sgst', 'total_igst', 'total_gst', 'grand_total']
    inlines = [BillItemInline]

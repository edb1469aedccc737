from decimal import Decimal
from django.db import models


class DocumentTotals(models.Model):
    """Order-level inputs and derived totals shared by purchase orders and bills"""
    GST_TYPE_CHOICES = [
        ('cgst_sgst', 'CGST + SGST'),
        ('igst', 'IGST'),
    ]
    DISCOUNT_TYPE_CHOICES = [
        ('flat', 'Flat'),
        ('percentage', 'Percentage'),
    ]

    gst_type = models.CharField(max_length=20, choices=GST_TYPE_CHOICES, default='igst')
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    discount_type = models.CharField(max_length=20, choices=DISCOUNT_TYPE_CHOICES, default='flat')
    other_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    rounding_adjustment = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    sub_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_quantity = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal('0'))
    total_discount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_cgst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_sgst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_igst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_gst = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    grand_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))

    class Meta:
        abstract = True


class LineGST(models.Model):
    """Per-line GST columns, always derived from quantity, price and rate"""
    gst_rate = models.ForeignKey('finance.GSTRate', on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    gst_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    gst_type = models.CharField(max_length=20, default='igst')
    cgst_percentage = models.DecimalField(max_digits=6, decimal_places=3, default=Decimal('0'))
    sgst_percentage = models.DecimalField(max_digits=6, decimal_places=3, default=Decimal('0'))
    igst_percentage = models.DecimalField(max_digits=6, decimal_places=3, default=Decimal('0'))
    cgst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    sgst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    igst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_gst_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    item_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))

    class Meta:
        abstract = True


class PurchaseOrder(DocumentTotals):
    """Purchase order sent to a supplier"""
    DRAFT = 'draft'
    COMPLETED = 'completed'
    STATUS_CHOICES = [
        (DRAFT, 'Draft'),
        (COMPLETED, 'Completed'),
    ]
    ALLOWED_TRANSITIONS = {
        DRAFT: (DRAFT, COMPLETED),
        COMPLETED: (COMPLETED,),
    }

    po_number = models.CharField(max_length=50, unique=True)
    supplier = models.ForeignKey('parties.Supplier', on_delete=models.PROTECT, related_name='purchase_orders')
    supplier_name = models.CharField(max_length=200, blank=True)
    contact_person_name = models.CharField(max_length=200, blank=True)
    supplier_phone = models.CharField(max_length=20, blank=True)
    supplier_email = models.EmailField(blank=True)
    supplier_gstin = models.CharField(max_length=20, blank=True)
    supplier_state = models.CharField(max_length=100, blank=True)
    billing_address = models.TextField(blank=True)
    shipping_address = models.TextField(blank=True)
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.PROTECT, related_name='purchase_orders')
    warehouse_name = models.CharField(max_length=200, blank=True)
    po_date = models.DateField()
    expected_delivery_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=DRAFT)
    notes = models.TextField(blank=True)
    currency = models.CharField(max_length=10, default='INR')
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.po_number

    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, ())

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status'], name='po_status_idx'),
            models.Index(fields=['supplier', 'status'], name='po_supplier_status_idx'),
        ]


class PurchaseOrderItem(LineGST):
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey('catalog.Item', on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_order_lines')
    category = models.CharField(max_length=200, blank=True)
    product_name = models.CharField(max_length=255)
    sku = models.CharField(max_length=100, blank=True)
    hsn_code = models.CharField(max_length=20, blank=True)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    uom = models.CharField(max_length=20, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    mrp = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    class Meta:
        db_table = 'purchase_order_items'
        ordering = ['id']


class Bill(DocumentTotals):
    """Supplier bill / goods received note; saving one receives stock"""
    UNPAID = 'unpaid'
    PARTIAL = 'partial'
    PAID = 'paid'
    PAYMENT_STATUS_CHOICES = [
        (UNPAID, 'Unpaid'),
        (PARTIAL, 'Partially Paid'),
        (PAID, 'Paid'),
    ]

    grn_number = models.CharField(max_length=50, unique=True)
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='bills')
    po_number = models.CharField(max_length=50, blank=True)
    supplier = models.ForeignKey('parties.Supplier', on_delete=models.PROTECT, related_name='bills')
    supplier_name = models.CharField(max_length=200, blank=True)
    contact_person_name = models.CharField(max_length=200, blank=True)
    supplier_phone = models.CharField(max_length=20, blank=True)
    supplier_email = models.EmailField(blank=True)
    supplier_gstin = models.CharField(max_length=20, blank=True)
    supplier_state = models.CharField(max_length=100, blank=True)
    supplier_invoice_no = models.CharField(max_length=100)
    supplier_invoice_date = models.DateField(null=True, blank=True)
    bill_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)
    received_date = models.DateField(null=True, blank=True)
    billing_address = models.TextField(blank=True)
    shipping_address = models.TextField(blank=True)
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.PROTECT, related_name='bills')
    warehouse_name = models.CharField(max_length=200, blank=True)
    transporter_name = models.CharField(max_length=200, blank=True)
    delivery_challan_number = models.CharField(max_length=100, blank=True)
    eway_bill_number = models.CharField(max_length=100, blank=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=UNPAID)
    payment_date = models.DateField(null=True, blank=True)
    paid_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    invoice_copy = models.FileField(upload_to='bill-invoices/', blank=True, null=True)
    remarks = models.TextField(blank=True)
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='bills')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.grn_number

    @property
    def bill_number(self):
        return self.grn_number

    @property
    def balance_due(self):
        return max(self.grand_total - self.paid_amount, Decimal('0'))

    class Meta:
        db_table = 'bills'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['payment_status'], name='bill_payment_status_idx'),
            models.Index(fields=['supplier', 'payment_status'], name='bill_supplier_payment_idx'),
        ]


class BillItem(LineGST):
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey('catalog.Item', on_delete=models.SET_NULL, null=True, blank=True, related_name='bill_lines')
    category = models.CharField(max_length=200, blank=True)
    product_name = models.CharField(max_length=255)
    sku = models.CharField(max_length=100, blank=True)
    hsn_code = models.CharField(max_length=20, blank=True)
    quantity_ordered = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    quantity_received = models.DecimalField(max_digits=12, decimal_places=3)
    quantity_accepted = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    quantity_rejected = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    uom = models.CharField(max_length=20, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    mrp = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    batch_number = models.CharField(max_length=100, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    manufacturing_date = models.DateField(null=True, blank=True)

    def __str__(self):
        return f"{self.product_name} x {self.quantity_received}"

    class Meta:
        db_table = 'bill_items'
        ordering = ['id']

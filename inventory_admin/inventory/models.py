from decimal import Decimal
from django.db import models


class StockAdjustment(models.Model):
    """Audit trail of every change to an item's inventory quantity"""
    METHOD_CHOICES = [
        ('purchase_order', 'Purchase Order / Bill'),
        ('processing', 'Processing'),
        ('manual', 'Manual'),
        ('adjustment', 'Adjustment'),
    ]
    TYPE_CHOICES = [
        ('increase', 'Increase'),
        ('decrease', 'Decrease'),
    ]
    REASON_CHOICES = [
        ('purchase', 'Purchase'),
        ('purchase_reversal', 'Purchase Reversal'),
        ('processing', 'Processing'),
        ('damaged', 'Damaged'),
        ('expired', 'Expired'),
        ('found', 'Found'),
        ('theft', 'Theft'),
        ('correction', 'Correction'),
        ('other', 'Other'),
    ]

    item = models.ForeignKey('catalog.Item', on_delete=models.CASCADE, related_name='adjustments')
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.SET_NULL, null=True, blank=True, related_name='adjustments')
    adjustment_method = models.CharField(max_length=20, choices=METHOD_CHOICES, default='manual')
    adjustment_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    previous_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    new_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    reason = models.CharField(max_length=30, choices=REASON_CHOICES, default='other')
    reason_details = models.CharField(max_length=255, blank=True)
    grn_number = models.CharField(max_length=50, blank=True)
    po_number = models.CharField(max_length=50, blank=True)
    batch_number = models.CharField(max_length=100, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='stock_adjustments')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.item} {self.adjustment_type} {self.quantity}"

    class Meta:
        db_table = 'stock_adjustments'
        ordering = ['-created_at', '-id']


class ProcessingPool(models.Model):
    """Raw stock of a processing item in a warehouse, valued at weighted average cost"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    item = models.ForeignKey('catalog.Item', on_delete=models.CASCADE, related_name='processing_pools')
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.PROTECT, related_name='processing_pools')
    current_stock = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    uom = models.CharField(max_length=20)
    avg_purchase_price = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    total_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    total_purchased = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    total_processed = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    total_wastage = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.item.item_name} @ {self.warehouse.name}"

    class Meta:
        db_table = 'processing_pools'
        ordering = ['-created_at']
        unique_together = [['item', 'warehouse']]


class ProcessingRecipe(models.Model):
    """Outputs previously produced from a pool, offered as a recipe"""
    pool = models.ForeignKey(ProcessingPool, on_delete=models.CASCADE, related_name='recipes')
    input_item = models.ForeignKey('catalog.Item', on_delete=models.CASCADE, related_name='recipes_as_input')
    output_item = models.ForeignKey('catalog.Item', on_delete=models.CASCADE, related_name='recipes_as_output')
    output_uom = models.CharField(max_length=20, blank=True)
    times_created = models.PositiveIntegerField(default=0)
    total_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    first_created_at = models.DateTimeField(auto_now_add=True)
    last_created_at = models.DateTimeField()

    class Meta:
        db_table = 'processing_recipes'
        ordering = ['-last_created_at']
        unique_together = [['pool', 'output_item']]


class ProcessingTransaction(models.Model):
    """Conversion of pool stock into finished items"""
    STATUS_CHOICES = [
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    transaction_number = models.CharField(max_length=50, unique=True)
    pool = models.ForeignKey(ProcessingPool, on_delete=models.PROTECT, related_name='transactions')
    input_item = models.ForeignKey('catalog.Item', on_delete=models.PROTECT, related_name='processing_inputs')
    input_quantity = models.DecimalField(max_digits=12, decimal_places=3)
    input_uom = models.CharField(max_length=20, blank=True)
    input_unit_cost = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('0'))
    input_total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.PROTECT, related_name='processing_transactions')
    outputs = models.JSONField(default=list)
    wastage_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    wastage_quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    processing_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='completed')
    processed_at = models.DateTimeField()
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='processing_transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.transaction_number

    class Meta:
        db_table = 'processing_transactions'
        ordering = ['-processed_at']

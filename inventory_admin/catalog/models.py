from decimal import Decimal, ROUND_HALF_UP
from django.db import models
from django.utils.text import slugify


class Category(models.Model):
    """Item categories; `parent` makes a sub-category"""
    name = models.CharField(max_length=200, db_index=True)
    parent = models.ForeignKey('self', on_delete=models.SET_NULL, null=True, blank=True, related_name='children')
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['name']


class Item(models.Model):
    """Inventory item. Processing items keep their stock in a processing pool."""
    REGULAR = 'regular'
    PROCESSING = 'processing'
    ITEM_TYPE_CHOICES = [
        (REGULAR, 'Regular'),
        (PROCESSING, 'Processing'),
    ]

    IN_STOCK = 'in_stock'
    LOW_STOCK = 'low_stock'
    OUT_OF_STOCK = 'out_of_stock'
    STATUS_CHOICES = [
        (IN_STOCK, 'In Stock'),
        (LOW_STOCK, 'Low Stock'),
        (OUT_OF_STOCK, 'Out of Stock'),
    ]

    item_name = models.CharField(max_length=255, db_index=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='items')
    item_code = models.CharField(max_length=100, unique=True, blank=True, null=True, help_text="SKU")
    uom = models.CharField(max_length=20, help_text="Unit of measure, e.g. kg, pcs")
    purchase_price = models.DecimalField(max_digits=12, decimal_places=2)
    gst_rate = models.ForeignKey('finance.GSTRate', on_delete=models.SET_NULL, null=True, blank=True, related_name='items')
    gst_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    hsn_code = models.CharField(max_length=20, blank=True)
    warehouse = models.ForeignKey('locations.Warehouse', on_delete=models.PROTECT, related_name='items')
    opening_stock = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    low_stock_alert_level = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=IN_STOCK)
    expiry_date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True)
    image = models.ImageField(upload_to='items/', blank=True, null=True)
    item_type = models.CharField(max_length=20, choices=ITEM_TYPE_CHOICES, default=REGULAR)
    requires_processing = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.item_name} ({self.item_code})" if self.item_code else self.item_name

    @property
    def is_processing(self):
        return self.item_type == self.PROCESSING

    def compute_status(self):
        """Stock status from quantity; processing items always read in_stock"""
        if self.is_processing:
            return self.IN_STOCK
        if self.quantity <= 0:
            return self.OUT_OF_STOCK
        if self.quantity <= self.low_stock_alert_level:
            return self.LOW_STOCK
        return self.IN_STOCK

    def refresh_status(self):
        self.status = self.compute_status()
        return self.status

    class Meta:
        db_table = 'items'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='items_status_idx'),
            models.Index(fields=['item_type'], name='items_item_type_idx'),
        ]


class OnlineProduct(models.Model):
    """Storefront listing for an inventory item"""
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='online_products')
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=280, unique=True)
    short_description = models.CharField(max_length=500, blank=True)
    description = models.TextField(blank=True)
    selling_price = models.DecimalField(max_digits=12, decimal_places=2)
    mrp = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    images = models.JSONField(default=list, blank=True)
    is_published = models.BooleanField(default=False)
    is_featured = models.BooleanField(default=False)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self.unique_slug(self.name)
        super().save(*args, **kwargs)

    @classmethod
    def unique_slug(cls, name):
        base = slugify(name) or 'product'
        slug = base
        suffix = 2
        while cls.objects.filter(slug=slug).exists():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    @property
    def discount_percentage(self):
        if not self.mrp or self.mrp <= self.selling_price:
            return 0
        return int(((self.mrp - self.selling_price) / self.mrp * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    class Meta:
        db_table = 'online_products'
        ordering = ['-created_at']

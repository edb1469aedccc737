from django.db import models


class Supplier(models.Model):
    """Suppliers; `state` decides the GST split on their purchase documents"""
    SUPPLIER_TYPE_CHOICES = [
        ('manufacturer', 'Manufacturer'),
        ('distributor', 'Distributor'),
        ('wholesaler', 'Wholesaler'),
        ('retailer', 'Retailer'),
        ('other', 'Other'),
    ]

    name = models.CharField(max_length=200)
    code = models.CharField(max_length=50, unique=True, blank=True, null=True)
    supplier_type = models.CharField(max_length=20, choices=SUPPLIER_TYPE_CHOICES, blank=True)
    contact_person = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20)
    alternate_phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField()
    tax_id = models.CharField(max_length=20, blank=True, help_text="GSTIN")
    billing_address_line1 = models.CharField(max_length=255, blank=True)
    billing_address_line2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, blank=True, default='India')
    shipping_same_as_billing = models.BooleanField(default=True)
    shipping_address_line1 = models.CharField(max_length=255, blank=True)
    shipping_address_line2 = models.CharField(max_length=255, blank=True)
    shipping_city = models.CharField(max_length=100, blank=True)
    shipping_state = models.CharField(max_length=100, blank=True)
    shipping_postal_code = models.CharField(max_length=20, blank=True)
    shipping_country = models.CharField(max_length=100, blank=True)
    attachment = models.FileField(upload_to='supplier-attachments/', blank=True, null=True)
    remarks = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def billing_address(self):
        parts = [self.billing_address_line1, self.billing_address_line2, self.city, self.state,
                 self.postal_code, self.country]
        return ', '.join(part for part in parts if part)

    @property
    def shipping_address(self):
        if self.shipping_same_as_billing:
            return self.billing_address
        parts = [self.shipping_address_line1, self.shipping_address_line2, self.shipping_city,
                 self.shipping_state, self.shipping_postal_code, self.shipping_country]
        return ', '.join(part for part in parts if part)

    class Meta:
        db_table = 'suppliers'
        ordering = ['-created_at']

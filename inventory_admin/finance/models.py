from decimal import Decimal
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class GSTRate(models.Model):
    """GST slabs offered on item and purchase document lines"""
    name = models.CharField(max_length=100)
    rate = models.DecimalField(
        max_digits=5, decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Percentage, e.g. 18.00",
    )
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.rate}%)"

    class Meta:
        db_table = 'gst_rates'
        ordering = ['rate', 'name']


class PaymentGateway(models.Model):
    """Storefront payment gateway credentials"""
    RAZORPAY = 'razorpay'
    STRIPE = 'stripe'
    COD = 'cod'
    NAME_CHOICES = [
        (RAZORPAY, 'Razorpay'),
        (STRIPE, 'Stripe'),
        (COD, 'Cash on Delivery'),
    ]

    name = models.CharField(max_length=20, choices=NAME_CHOICES, unique=True)
    api_key = models.CharField(max_length=255, blank=True)
    secret_key = models.CharField(max_length=255, blank=True)
    webhook_secret = models.CharField(max_length=255, blank=True)
    test_mode = models.BooleanField(default=True)
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.get_name_display()

    @property
    def requires_credentials(self):
        return self.name != self.COD

    class Meta:
        db_table = 'payment_gateways'
        ordering = ['name']

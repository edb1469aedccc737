from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Admin user; `state` decides the GST split on purchase documents"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    state = models.CharField(max_length=100, blank=True, default='')
    is_onboarded = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('stock_adjust', 'Stock Adjustment'),
        ('stock_purchase', 'Stock Added (Bill)'),
        ('stock_processing', 'Stock Added (Processing)'),
        ('status_change', 'Status Change'),
        ('payment_update', 'Payment Update'),
        ('settings_update', 'Settings Update'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., item name, PO number)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., PO number, GRN number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_9e6f1d_idx'),
            models.Index(fields=['action'], name='audit_logs_action_5c2b7a_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_3f8e2c_idx'),
            models.Index(fields=['object_reference'], name='audit_logs_object__7d1a4b_idx'),
        ]

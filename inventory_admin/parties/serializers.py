from rest_framework import serializers
from .models import Supplier


class SupplierSerializer(serializers.ModelSerializer):
    billing_address = serializers.CharField(read_only=True)
    shipping_address = serializers.CharField(read_only=True)

    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'code', 'supplier_type', 'contact_person', 'phone', 'alternate_phone', 'email',
            'tax_id', 'billing_address_line1', 'billing_address_line2', 'city', 'state', 'postal_code',
            'country', 'shipping_same_as_billing', 'shipping_address_line1', 'shipping_address_line2',
            'shipping_city', 'shipping_state', 'shipping_postal_code', 'shipping_country',
            'billing_address', 'shipping_address', 'attachment', 'remarks', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'code': {'validators': []}}

    def validate_code(self, value):
        # blank codes are stored as NULL so the unique index ignores them
        if not value or not value.strip():
            return None
        value = value.strip().upper()
        duplicates = Supplier.objects.filter(code=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("Supplier with this code already exists.")
        return value

    def validate_tax_id(self, value):
        return value.strip().upper()

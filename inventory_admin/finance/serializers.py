from rest_framework import serializers
from inventory_admin.parties.models import Supplier
from .gst import GST_TYPES, DISCOUNT_FLAT, DISCOUNT_PERCENTAGE
from .models import GSTRate, PaymentGateway


class GSTRateSerializer(serializers.ModelSerializer):
    class Meta:
        model = GSTRate
        fields = ['id', 'name', 'rate', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        rate = attrs.get('rate', getattr(self.instance, 'rate', None))
        name = attrs.get('name', getattr(self.instance, 'name', None))
        duplicates = GSTRate.objects.filter(name__iexact=name, rate=rate)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'name': 'A GST rate with this name and percentage already exists.'})
        return attrs


class GSTCalculateSerializer(serializers.Serializer):
    """
    Input of the calculator preview. Numeric fields are kept raw; the
    calculator treats malformed numbers as 0.
    """
    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    supplier_state = serializers.CharField(required=False, allow_blank=True)
    admin_state = serializers.CharField(required=False, allow_blank=True)
    gst_type = serializers.ChoiceField(choices=GST_TYPES, required=False)
    discount = serializers.CharField(required=False, allow_blank=True, default='0')
    discount_type = serializers.ChoiceField(choices=[DISCOUNT_FLAT, DISCOUNT_PERCENTAGE], default=DISCOUNT_FLAT)
    other_charges = serializers.CharField(required=False, allow_blank=True, default='0')
    rounding_adjustment = serializers.CharField(required=False, allow_blank=True, default='0')
    quantity_field = serializers.ChoiceField(choices=['quantity', 'quantity_received'], default='quantity')


class PaymentGatewaySerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(source='get_name_display', read_only=True)
    has_api_key = serializers.SerializerMethodField()
    has_secret_key = serializers.SerializerMethodField()
    has_webhook_secret = serializers.SerializerMethodField()

    class Meta:
        model = PaymentGateway
        fields = ['id', 'name', 'display_name', 'api_key', 'test_mode', 'is_active',
                  'has_api_key', 'has_secret_key', 'has_webhook_secret', 'created_at', 'updated_at']

    def get_has_api_key(self, obj):
        return bool(obj.api_key)

    def get_has_secret_key(self, obj):
        return bool(obj.secret_key)

    def get_has_webhook_secret(self, obj):
        return bool(obj.webhook_secret)


class PaymentGatewayUpdateSerializer(serializers.Serializer):
    api_key = serializers.CharField(required=False, allow_blank=True, max_length=255)
    secret_key = serializers.CharField(required=False, allow_blank=True, max_length=255, write_only=True)
    webhook_secret = serializers.CharField(required=False, allow_blank=True, max_length=255, write_only=True)
    test_mode = serializers.BooleanField(required=False)
    is_active = serializers.BooleanField(required=False)

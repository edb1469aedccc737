from rest_framework import serializers
from .models import Warehouse


class WarehouseSerializer(serializers.ModelSerializer):
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'code', 'address', 'city', 'state', 'pincode', 'phone', 'email',
                  'is_active', 'item_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        # uniqueness is checked on the normalized code below
        extra_kwargs = {'code': {'validators': []}}

    def get_item_count(self, obj):
        return obj.items.count()

    def validate_code(self, value):
        value = value.strip().upper()
        duplicates = Warehouse.objects.filter(code=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("Warehouse with this code already exists.")
        return value

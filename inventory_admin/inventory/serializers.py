from decimal import Decimal
from rest_framework import serializers
from inventory_admin.catalog.models import Item
from .models import StockAdjustment, ProcessingPool, ProcessingRecipe, ProcessingTransaction


class StockAdjustmentSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.item_name', read_only=True)
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, default=None)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = StockAdjustment
        fields = ['id', 'item', 'item_name', 'item_code', 'warehouse', 'warehouse_name',
                  'adjustment_method', 'adjustment_type', 'quantity', 'previous_quantity', 'new_quantity',
                  'reason', 'reason_details', 'grn_number', 'po_number', 'batch_number', 'expiry_date',
                  'notes', 'created_by', 'created_by_username', 'created_at']
        read_only_fields = fields


class ManualAdjustmentSerializer(serializers.Serializer):
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    adjustment_type = serializers.ChoiceField(choices=StockAdjustment.TYPE_CHOICES)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    reason = serializers.ChoiceField(choices=StockAdjustment.REASON_CHOICES, default='correction')
    reason_details = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        item = attrs['item']
        if item.is_processing:
            raise serializers.ValidationError({'item': 'Processing items are stocked through their processing pool.'})
        if attrs['adjustment_type'] == 'decrease' and attrs['quantity'] > item.quantity:
            raise serializers.ValidationError(
                {'quantity': f"Cannot decrease by {attrs['quantity']}; only {item.quantity} {item.uom} in stock."}
            )
        return attrs


class ProcessingPoolSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.item_name', read_only=True)
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    category = serializers.IntegerField(source='item.category_id', read_only=True)
    category_name = serializers.CharField(source='item.category.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)

    class Meta:
        model = ProcessingPool
        fields = ['id', 'item', 'item_name', 'item_code', 'category', 'category_name', 'warehouse',
                  'warehouse_name', 'current_stock', 'uom', 'avg_purchase_price', 'total_value',
                  'total_purchased', 'total_processed', 'total_wastage', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


class ProcessingRecipeSerializer(serializers.ModelSerializer):
    item_id = serializers.IntegerField(source='output_item_id', read_only=True)
    item_name = serializers.CharField(source='output_item.item_name', read_only=True)
    uom = serializers.CharField(source='output_uom', read_only=True)
    current_stock = serializers.DecimalField(source='output_item.quantity', max_digits=12, decimal_places=3, read_only=True)

    class Meta:
        model = ProcessingRecipe
        fields = ['id', 'item_id', 'item_name', 'uom', 'current_stock', 'times_created',
                  'total_quantity', 'first_created_at', 'last_created_at']


class ProcessingTransactionSerializer(serializers.ModelSerializer):
    input_item_name = serializers.CharField(source='input_item.item_name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = ProcessingTransaction
        fields = ['id', 'transaction_number', 'pool', 'input_item', 'input_item_name', 'input_quantity',
                  'input_uom', 'input_unit_cost', 'input_total_cost', 'warehouse', 'warehouse_name',
                  'outputs', 'wastage_percent', 'wastage_quantity', 'processing_cost', 'total_cost',
                  'notes', 'status', 'processed_at', 'created_by_username', 'created_at']
        read_only_fields = fields


class ProcessingOutputSerializer(serializers.Serializer):
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))


class ProcessingTransactionCreateSerializer(serializers.Serializer):
    pool = serializers.PrimaryKeyRelatedField(queryset=ProcessingPool.objects.all())
    input_item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all(), required=False)
    input_quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    outputs = ProcessingOutputSerializer(many=True, allow_empty=False)
    wastage_percent = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'),
                                               max_value=Decimal('100'), default=Decimal('0'))
    processing_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'),
                                               default=Decimal('0'))
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        pool = attrs['pool']
        input_item = attrs.get('input_item')
        if input_item is not None and input_item.pk != pool.item_id:
            raise serializers.ValidationError({'input_item': 'Input item does not belong to this processing pool.'})
        for output in attrs['outputs']:
            if output['item'].pk == pool.item_id:
                raise serializers.ValidationError({'outputs': 'An output cannot be the pool item itself.'})
            if output['item'].is_processing:
                raise serializers.ValidationError(
                    {'outputs': f"'{output['item'].item_name}' is a processing item and cannot be an output."}
                )
        return attrs

from decimal import Decimal
from rest_framework import serializers
from inventory_admin.core.utils import create_with_document_number, get_admin_state
from inventory_admin.core.validators import validate_document_upload
from inventory_admin.finance.gst import IGST, calculate_totals, determine_gst_type
from .models import PurchaseOrder, PurchaseOrderItem, Bill, BillItem

DERIVED_LINE_FIELDS = [
    'gst_type', 'cgst_percentage', 'sgst_percentage', 'igst_percentage',
    'cgst_amount', 'sgst_amount', 'igst_amount', 'total_gst_amount', 'item_total', 'total_price',
]
DERIVED_TOTAL_FIELDS = [
    'gst_type', 'sub_total', 'total_quantity', 'total_discount', 'total_cgst', 'total_sgst',
    'total_igst', 'total_gst', 'grand_total',
]
SUPPLIER_SNAPSHOT = {
    'supplier_name': 'name',
    'contact_person_name': 'contact_person',
    'supplier_phone': 'phone',
    'supplier_email': 'email',
    'supplier_gstin': 'tax_id',
    'supplier_state': 'state',
}


class LineItemSerializer(serializers.ModelSerializer):
    """Common validation for purchase document lines"""
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    gst_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'),
                                              max_value=Decimal('100'), required=False)
    product_name = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate(self, attrs):
        item = attrs.get('item')
        if item is not None:
            attrs['product_name'] = attrs.get('product_name') or item.item_name
            attrs.setdefault('sku', item.item_code or '')
            attrs.setdefault('hsn_code', item.hsn_code)
            attrs.setdefault('uom', item.uom)
            attrs.setdefault('category', item.category.name)
        if not attrs.get('product_name'):
            raise serializers.ValidationError({'product_name': 'Each line needs an item or a product name.'})

        gst_rate = attrs.get('gst_rate')
        if 'gst_percentage' not in attrs:
            if gst_rate is not None:
                attrs['gst_percentage'] = gst_rate.rate
            elif item is not None:
                attrs['gst_percentage'] = item.gst_percentage
            else:
                attrs['gst_percentage'] = Decimal('0')
        return attrs


class PurchaseOrderItemSerializer(LineItemSerializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))

    class Meta:
        model = PurchaseOrderItem
        fields = ['id', 'item', 'category', 'product_name', 'sku', 'hsn_code', 'quantity', 'uom', 'price',
                  'gst_rate', 'gst_percentage', 'mrp'] + DERIVED_LINE_FIELDS
        read_only_fields = DERIVED_LINE_FIELDS


class BillItemSerializer(LineItemSerializer):
    quantity_received = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    quantity_accepted = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'),
                                                 required=False, allow_null=True)
    quantity_rejected = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'),
                                                 required=False)

    class Meta:
        model = BillItem
        fields = ['id', 'item', 'category', 'product_name', 'sku', 'hsn_code', 'quantity_ordered',
                  'quantity_received', 'quantity_accepted', 'quantity_rejected', 'uom', 'price',
                  'gst_rate', 'gst_percentage', 'mrp', 'batch_number', 'expiry_date',
                  'manufacturing_date'] + DERIVED_LINE_FIELDS
        read_only_fields = DERIVED_LINE_FIELDS

    def validate(self, attrs):
        attrs = super().validate(attrs)
        received = attrs['quantity_received']
        accepted = attrs.get('quantity_accepted')
        if accepted is not None and accepted > received:
            raise serializers.ValidationError({'quantity_accepted': 'Accepted quantity cannot exceed received quantity.'})
        if 'quantity_rejected' not in attrs:
            attrs['quantity_rejected'] = received - accepted if accepted is not None else Decimal('0')
        if attrs.get('quantity_ordered') is None:
            attrs['quantity_ordered'] = received
        return attrs


class PurchaseDocumentSerializer(serializers.ModelSerializer):
    """
    Shared create/update for purchase orders and bills.

    Lines are replaced wholesale and every derived figure is recomputed
    from them; totals sent by the client are ignored.
    """
    line_model = None
    line_parent_field = None
    quantity_field = 'quantity'
    line_input_fields = ()
    number_field = None
    number_prefix = None

    discount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    other_charges = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'),
                                             required=False)
    rounding_adjustment = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('-1'),
                                                   max_value=Decimal('1'), required=False)

    gst_warning = None

    def validate(self, attrs):
        def current(field, default):
            if field in attrs:
                return attrs[field]
            return getattr(self.instance, field) if self.instance is not None else default

        discount = current('discount', Decimal('0'))
        discount_type = current('discount_type', 'flat')
        if discount_type == 'percentage' and discount > 100:
            raise serializers.ValidationError({'discount': 'Percentage discount cannot exceed 100.'})

        lines = attrs.get('items')
        if lines is None:
            lines = self._existing_lines(self.instance) if self.instance is not None else []
        totals = calculate_totals(
            lines, IGST,
            discount=discount,
            discount_type=discount_type,
            other_charges=current('other_charges', Decimal('0')),
            rounding_adjustment=current('rounding_adjustment', Decimal('0')),
            quantity_field=self.quantity_field,
        )
        if totals.discount_amount > totals.subtotal:
            raise serializers.ValidationError({'discount': 'Discount cannot exceed the subtotal.'})
        if totals.grand_total < 0:
            raise serializers.ValidationError({'rounding_adjustment': 'Grand total cannot be negative.'})
        return attrs

    def _user(self):
        request = self.context.get('request')
        return getattr(request, 'user', None)

    def _apply_snapshots(self, validated_data):
        supplier = validated_data.get('supplier')
        if supplier is not None:
            for field, source in SUPPLIER_SNAPSHOT.items():
                if not validated_data.get(field):
                    validated_data[field] = getattr(supplier, source) or ''
            if not validated_data.get('billing_address'):
                validated_data['billing_address'] = supplier.billing_address
            if not validated_data.get('shipping_address'):
                validated_data['shipping_address'] = supplier.shipping_address
        warehouse = validated_data.get('warehouse')
        if warehouse is not None:
            validated_data['warehouse_name'] = warehouse.name

    def _existing_lines(self, instance):
        lines = []
        for line in instance.items.select_related('item', 'gst_rate').all():
            lines.append({field: getattr(line, field) for field in self.line_input_fields})
        return lines

    def _compute_totals(self, validated_data, lines, instance=None):
        supplier = validated_data.get('supplier') or instance.supplier
        gst_type, self.gst_warning = determine_gst_type(get_admin_state(self._user()), supplier.state)

        def current(field, default):
            if field in validated_data:
                return validated_data[field]
            return getattr(instance, field) if instance is not None else default

        totals = calculate_totals(
            lines,
            gst_type,
            discount=current('discount', Decimal('0')),
            discount_type=current('discount_type', 'flat'),
            other_charges=current('other_charges', Decimal('0')),
            rounding_adjustment=current('rounding_adjustment', Decimal('0')),
            quantity_field=self.quantity_field,
        )
        validated_data.update(totals.model_fields())
        return totals

    def _write_lines(self, document, lines, totals):
        document.items.all().delete()
        for data, result in zip(lines, totals.lines):
            self.line_model.objects.create(
                **{self.line_parent_field: document},
                **data,
                gst_type=result.gst_type,
                cgst_percentage=result.cgst_percentage,
                sgst_percentage=result.sgst_percentage,
                igst_percentage=result.igst_percentage,
                cgst_amount=result.cgst_amount,
                sgst_amount=result.sgst_amount,
                igst_amount=result.igst_amount,
                total_gst_amount=result.total_gst_amount,
                item_total=result.item_total,
                total_price=result.total_price,
            )

    def create(self, validated_data):
        lines = validated_data.pop('items')
        self._apply_snapshots(validated_data)
        totals = self._compute_totals(validated_data, lines)
        self.before_create(validated_data)
        document = self._create_numbered(validated_data)
        self._write_lines(document, lines, totals)
        return document

    def _create_numbered(self, validated_data):
        parent_create = super().create
        if validated_data.get(self.number_field):
            return parent_create(validated_data)
        return create_with_document_number(
            self.Meta.model, self.number_field, self.number_prefix,
            lambda number: parent_create({**validated_data, self.number_field: number}),
        )

    def update(self, instance, validated_data):
        lines = validated_data.pop('items', None)
        if lines is None:
            lines = self._existing_lines(instance)
        self._apply_snapshots(validated_data)
        totals = self._compute_totals(validated_data, lines, instance)
        self.before_update(instance, validated_data)
        document = super().update(instance, validated_data)
        self._write_lines(document, lines, totals)
        if getattr(document, '_prefetched_objects_cache', None):
            # lines were replaced; drop the stale prefetched ones
            document._prefetched_objects_cache = {}
        return document

    def before_create(self, validated_data):
        pass

    def before_update(self, instance, validated_data):
        pass


class PurchaseOrderSerializer(PurchaseDocumentSerializer):
    line_model = PurchaseOrderItem
    line_parent_field = 'purchase_order'
    quantity_field = 'quantity'
    number_field = 'po_number'
    number_prefix = 'PO'
    line_input_fields = ('item', 'category', 'product_name', 'sku', 'hsn_code', 'quantity', 'uom',
                         'price', 'gst_rate', 'gst_percentage', 'mrp')

    items = PurchaseOrderItemSerializer(many=True, allow_empty=False)
    supplier_display = serializers.CharField(source='supplier.name', read_only=True)
    has_bill = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'supplier', 'supplier_display', 'supplier_name', 'contact_person_name',
            'supplier_phone', 'supplier_email', 'supplier_gstin', 'supplier_state', 'billing_address',
            'shipping_address', 'warehouse', 'warehouse_name', 'po_date', 'expected_delivery_date', 'status',
            'notes', 'currency', 'gst_type', 'discount', 'discount_type', 'other_charges', 'rounding_adjustment',
            'sub_total', 'total_quantity', 'total_discount', 'total_cgst', 'total_sgst', 'total_igst',
            'total_gst', 'grand_total', 'items', 'has_bill', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['po_number', 'warehouse_name', 'created_by', 'created_at', 'updated_at'] + DERIVED_TOTAL_FIELDS

    def get_has_bill(self, obj):
        return obj.bills.exists()


class BillSerializer(PurchaseDocumentSerializer):
    line_model = BillItem
    line_parent_field = 'bill'
    quantity_field = 'quantity_received'
    number_field = 'grn_number'
    number_prefix = 'GRN'
    line_input_fields = ('item', 'category', 'product_name', 'sku', 'hsn_code', 'quantity_ordered',
                         'quantity_received', 'quantity_accepted', 'quantity_rejected', 'uom', 'price',
                         'gst_rate', 'gst_percentage', 'mrp', 'batch_number', 'expiry_date', 'manufacturing_date')

    items = BillItemSerializer(many=True, allow_empty=False)
    grn_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    bill_number = serializers.CharField(read_only=True)
    balance_due = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    supplier_display = serializers.CharField(source='supplier.name', read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id', 'grn_number', 'bill_number', 'purchase_order', 'po_number', 'supplier', 'supplier_display',
            'supplier_name', 'contact_person_name', 'supplier_phone', 'supplier_email', 'supplier_gstin',
            'supplier_state', 'supplier_invoice_no', 'supplier_invoice_date', 'bill_date', 'due_date',
            'received_date', 'billing_address', 'shipping_address', 'warehouse', 'warehouse_name',
            'transporter_name', 'delivery_challan_number', 'eway_bill_number', 'payment_status',
            'payment_date', 'paid_amount', 'balance_due', 'gst_type', 'discount', 'discount_type', 'other_charges',
            'rounding_adjustment', 'sub_total', 'total_quantity', 'total_discount', 'total_cgst',
            'total_sgst', 'total_igst', 'total_gst', 'grand_total', 'invoice_copy', 'remarks', 'items',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['po_number', 'warehouse_name', 'paid_amount', 'created_by',
                            'created_at', 'updated_at'] + DERIVED_TOTAL_FIELDS

    def validate_grn_number(self, value):
        value = (value or '').strip()
        if not value:
            return value
        duplicates = Bill.objects.filter(grn_number=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError(f'A bill with GRN number "{value}" already exists.')
        return value

    def validate_invoice_copy(self, value):
        return validate_document_upload(value)

    def validate(self, attrs):
        purchase_order = attrs.get('purchase_order')
        supplier = attrs.get('supplier') or getattr(self.instance, 'supplier', None)
        if purchase_order is not None and supplier is not None and purchase_order.supplier_id != supplier.pk:
            raise serializers.ValidationError({'purchase_order': 'Purchase order belongs to a different supplier.'})
        return super().validate(attrs)

    def _apply_payment(self, validated_data, instance=None):
        status = validated_data.get('payment_status', getattr(instance, 'payment_status', Bill.UNPAID))
        if status == Bill.PAID:
            validated_data['paid_amount'] = validated_data['grand_total']
        elif status == Bill.UNPAID:
            validated_data['paid_amount'] = Decimal('0')

    def before_create(self, validated_data):
        purchase_order = validated_data.get('purchase_order')
        validated_data['po_number'] = purchase_order.po_number if purchase_order else ''
        self._apply_payment(validated_data)

    def before_update(self, instance, validated_data):
        if 'grn_number' in validated_data and not validated_data['grn_number']:
            validated_data.pop('grn_number')
        if 'purchase_order' in validated_data:
            purchase_order = validated_data['purchase_order']
            validated_data['po_number'] = purchase_order.po_number if purchase_order else ''
        self._apply_payment(validated_data, instance)


class BillPaymentSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=Bill.PAYMENT_STATUS_CHOICES)
    payment_date = serializers.DateField(required=False, allow_null=True)
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'), required=False)

    def validate(self, attrs):
        bill = self.context['bill']
        if attrs['payment_status'] == Bill.PARTIAL:
            amount = attrs.get('paid_amount')
            if amount is None:
                raise serializers.ValidationError({'paid_amount': 'Paid amount is required for a partial payment.'})
            if amount > bill.grand_total:
                raise serializers.ValidationError({'paid_amount': 'Paid amount cannot exceed the bill total.'})
        return attrs

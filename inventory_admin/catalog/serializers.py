from decimal import Decimal
from rest_framework import serializers
from inventory_admin.core.validators import validate_image_upload
from .models import Category, Item, OnlineProduct


class CategoryChildSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'is_active']


class CategorySerializer(serializers.ModelSerializer):
    parent_name = serializers.CharField(source='parent.name', read_only=True, default=None)
    children = CategoryChildSerializer(many=True, read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'parent', 'parent_name', 'description', 'is_active',
                  'children', 'item_count', 'created_at', 'updated_at']

    def get_item_count(self, obj):
        return obj.items.count()

    def validate_parent(self, value):
        if value is not None and self.instance is not None:
            node = value
            while node is not None:
                if node.pk == self.instance.pk:
                    raise serializers.ValidationError("A category cannot be its own parent.")
                node = node.parent
        return value


class ItemSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    gst_rate_name = serializers.CharField(source='gst_rate.name', read_only=True, default=None)
    low_stock_alert_level = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'),
                                                     required=False, allow_null=True)
    gst_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'),
                                              max_value=Decimal('100'), required=False)
    purchase_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    opening_stock = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'), required=False)

    class Meta:
        model = Item
        fields = ['id', 'item_name', 'category', 'category_name', 'item_code', 'uom', 'purchase_price',
                  'gst_rate', 'gst_rate_name', 'gst_percentage', 'hsn_code', 'warehouse', 'warehouse_name',
                  'opening_stock', 'quantity', 'low_stock_alert_level', 'status', 'expiry_date',
                  'description', 'image', 'item_type', 'requires_processing', 'created_at', 'updated_at']
        read_only_fields = ['quantity', 'status', 'created_at', 'updated_at']
        # SKU uniqueness is reported by the views with its own error
        extra_kwargs = {'item_code': {'validators': []}}

    def validate_item_code(self, value):
        value = (value or '').strip()
        return value or None

    def validate_image(self, value):
        return validate_image_upload(value)

    def validate(self, attrs):
        instance = self.instance
        item_type = attrs.get('item_type', instance.item_type if instance else Item.REGULAR)

        if instance is not None and 'item_type' in attrs and attrs['item_type'] != instance.item_type:
            raise serializers.ValidationError({'item_type': 'Item type cannot be changed once the item exists.'})

        if item_type == Item.REGULAR:
            missing = 'low_stock_alert_level' not in attrs if instance is None else False
            if missing or ('low_stock_alert_level' in attrs and attrs['low_stock_alert_level'] is None):
                raise serializers.ValidationError(
                    {'low_stock_alert_level': 'Low stock alert level is required for regular items.'}
                )
        elif attrs.get('low_stock_alert_level', 0) is None:
            attrs['low_stock_alert_level'] = Decimal('0')

        if item_type == Item.PROCESSING:
            attrs['requires_processing'] = True

        gst_rate = attrs.get('gst_rate')
        if gst_rate is not None and 'gst_percentage' not in attrs:
            attrs['gst_percentage'] = gst_rate.rate
        return attrs


class ItemOptionSerializer(serializers.ModelSerializer):
    """Compact item shape for form dropdowns"""
    class Meta:
        model = Item
        fields = ['id', 'item_name', 'item_code', 'uom', 'purchase_price', 'gst_percentage',
                  'hsn_code', 'category', 'item_type']


class OnlineProductSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.item_name', read_only=True)
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    discount_percentage = serializers.IntegerField(read_only=True)
    slug = serializers.SlugField(max_length=280, required=False, allow_blank=True)

    class Meta:
        model = OnlineProduct
        fields = ['id', 'item', 'item_name', 'item_code', 'name', 'slug', 'short_description', 'description',
                  'selling_price', 'mrp', 'discount_percentage', 'images', 'is_published', 'is_featured',
                  'meta_title', 'meta_description', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_slug(self, value):
        if not value:
            return value
        queryset = OnlineProduct.objects.filter(slug=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A product with this slug already exists.")
        return value

    def validate_images(self, value):
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise serializers.ValidationError("Images must be a list of URLs.")
        return value

    def validate(self, attrs):
        selling_price = attrs.get('selling_price', getattr(self.instance, 'selling_price', None))
        mrp = attrs.get('mrp', getattr(self.instance, 'mrp', None))
        if mrp is not None and selling_price is not None and selling_price > mrp:
            raise serializers.ValidationError({'selling_price': 'Selling price cannot exceed MRP.'})
        return attrs


class RelatedProductSerializer(serializers.ModelSerializer):
    discount_percentage = serializers.IntegerField(read_only=True)
    image = serializers.SerializerMethodField()

    class Meta:
        model = OnlineProduct
        fields = ['id', 'name', 'slug', 'selling_price', 'mrp', 'discount_percentage', 'image']

    def get_image(self, obj):
        return obj.images[0] if obj.images else None


class PublicProductSerializer(serializers.ModelSerializer):
    """Storefront product page"""
    discount_percentage = serializers.IntegerField(read_only=True)
    category = serializers.CharField(source='item.category.name', read_only=True)
    uom = serializers.CharField(source='item.uom', read_only=True)
    in_stock = serializers.SerializerMethodField()
    stock_status = serializers.CharField(source='item.status', read_only=True)
    related_products = serializers.SerializerMethodField()

    class Meta:
        model = OnlineProduct
        fields = ['id', 'name', 'slug', 'short_description', 'description', 'selling_price', 'mrp',
                  'discount_percentage', 'images', 'category', 'uom', 'in_stock', 'stock_status',
                  'is_featured', 'meta_title', 'meta_description', 'related_products']

    def get_in_stock(self, obj):
        return obj.item.quantity > 0

    def get_related_products(self, obj):
        related = (
            OnlineProduct.objects
            .filter(is_published=True, item__category_id=obj.item.category_id)
            .exclude(pk=obj.pk)
            .order_by('-is_featured', '-created_at')[:4]
        )
        return RelatedProductSerializer(related, many=True).data

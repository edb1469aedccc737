import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db import transaction
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from inventory_admin.core.pagination import paginate
from inventory_admin.core.responses import success_response, error_response, validation_error_response
from inventory_admin.core.utils import create_audit_log
from inventory_admin.inventory.services import seed_pool_from_opening_stock
from .filters import ItemFilter, OnlineProductFilter
from .models import Category, Item, OnlineProduct
from .serializers import (
    CategorySerializer, ItemSerializer, OnlineProductSerializer, PublicProductSerializer,
)

logger = logging.getLogger(__name__)


def sku_taken(sku, exclude=None):
    if not sku:
        return False
    queryset = Item.objects.filter(item_code__iexact=sku.strip())
    if exclude:
        queryset = queryset.exclude(pk=exclude)
    return queryset.exists()


def duplicate_sku_response(sku):
    return error_response(
        'Duplicate SKU/Item Code',
        message=f'An item with SKU/Item Code "{sku}" already exists.',
    )


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def category_list_create(request):
    """List all categories (with children) or create a new one"""
    if request.method == 'GET':
        categories = Category.objects.select_related('parent').prefetch_related('children').all()
        if request.query_params.get('active') == 'true':
            categories = categories.filter(is_active=True)
        if request.query_params.get('top_level') == 'true':
            categories = categories.filter(parent__isnull=True)
        search = request.query_params.get('search')
        if search:
            categories = categories.filter(name__icontains=search)
        serializer = CategorySerializer(categories, many=True)
        return success_response(serializer.data)
    else:
        serializer = CategorySerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        category = serializer.save()
        create_audit_log(request, 'create', 'Category', category.id, object_name=category.name)
        return success_response(serializer.data, message='Category created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk):
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'GET':
        return success_response(CategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        serializer.save()
        create_audit_log(request, 'update', 'Category', category.id, object_name=category.name)
        return success_response(serializer.data, message='Category updated successfully')
    else:
        try:
            category.delete()
        except ProtectedError:
            return error_response(
                'Category in use',
                message='Cannot delete a category that still has items. Move or delete the items first.',
            )
        create_audit_log(request, 'delete', 'Category', pk, object_name=category.name)
        return success_response(None, message='Category deleted successfully')


# Item views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def item_list_create(request):
    """
    List items (filtered, paginated) or create an item.

    Processing items are created with zero inventory; their opening stock
    goes into the processing pool instead.
    """
    if request.method == 'GET':
        queryset = Item.objects.select_related('category', 'warehouse', 'gst_rate').all()
        filterset = ItemFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return validation_error_response(filterset.errors, error='Invalid filters')
        return paginate(filterset.qs, request, ItemSerializer)
    else:
        sku = (request.data.get('item_code') or '').strip()
        if sku_taken(sku):
            logger.warning(f"Item creation rejected: duplicate SKU {sku}")
            return duplicate_sku_response(sku)

        serializer = ItemSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            logger.warning(f"Item creation validation failed: {serializer.errors}")
            return validation_error_response(serializer.errors)

        with transaction.atomic():
            item = serializer.save()
            if item.is_processing:
                item.quantity = 0
            else:
                item.quantity = item.opening_stock
            item.refresh_status()
            item.save(update_fields=['quantity', 'status'])
            if item.is_processing:
                seed_pool_from_opening_stock(item)

        logger.info(f"Item '{item.item_name}' ({item.item_type}) created by {request.user.username}")
        create_audit_log(request, 'create', 'Item', item.id, object_name=item.item_name,
                         object_reference=item.item_code)
        return success_response(ItemSerializer(item, context={'request': request}).data,
                                message='Item created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_check_sku(request):
    """Whether an SKU is free; `exclude` skips the item being edited"""
    sku = (request.query_params.get('sku') or '').strip()
    if not sku:
        return error_response('Missing required fields', message='sku is required')
    exclude = request.query_params.get('exclude')
    if exclude and not exclude.isdigit():
        exclude = None
    return success_response({'sku': sku, 'available': not sku_taken(sku, exclude)})


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def item_detail(request, pk):
    """Retrieve, update or delete an item. Updates never touch the quantity."""
    item = get_object_or_404(Item.objects.select_related('category', 'warehouse', 'gst_rate'), pk=pk)

    if request.method == 'GET':
        return success_response(ItemSerializer(item, context={'request': request}).data)
    elif request.method in ('PUT', 'PATCH'):
        sku = (request.data.get('item_code') or '').strip()
        if sku_taken(sku, exclude=item.pk):
            return duplicate_sku_response(sku)

        if request.data.get('remove_image') in (True, 'true', '1') and item.image:
            item.image.delete(save=False)
            item.image = None

        serializer = ItemSerializer(item, data=request.data, partial=request.method == 'PATCH',
                                    context={'request': request})
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        item = serializer.save()
        item.refresh_status()
        item.save(update_fields=['status', 'updated_at'])
        create_audit_log(request, 'update', 'Item', item.id, object_name=item.item_name,
                         object_reference=item.item_code)
        return success_response(serializer.data, message='Item updated successfully')
    else:
        name, code = item.item_name, item.item_code
        try:
            item.delete()
        except ProtectedError:
            return error_response('Item in use', message='Cannot delete an item that is referenced by other records.')
        logger.info(f"Item {pk} '{name}' deleted by {request.user.username}")
        create_audit_log(request, 'delete', 'Item', pk, object_name=name, object_reference=code)
        return success_response(None, message='Item deleted successfully')


# Online product views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def online_product_list_create(request):
    if request.method == 'GET':
        queryset = OnlineProduct.objects.select_related('item').all()
        filterset = OnlineProductFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return validation_error_response(filterset.errors, error='Invalid filters')
        return paginate(filterset.qs, request, OnlineProductSerializer)
    else:
        serializer = OnlineProductSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        product = serializer.save()
        create_audit_log(request, 'create', 'OnlineProduct', product.id, object_name=product.name,
                         object_reference=product.slug)
        return success_response(OnlineProductSerializer(product).data,
                                message='Product created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def online_product_detail(request, pk):
    product = get_object_or_404(OnlineProduct.objects.select_related('item'), pk=pk)

    if request.method == 'GET':
        return success_response(OnlineProductSerializer(product).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = OnlineProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        product = serializer.save()
        create_audit_log(request, 'update', 'OnlineProduct', product.id, object_name=product.name,
                         object_reference=product.slug)
        return success_response(OnlineProductSerializer(product).data, message='Product updated successfully')
    else:
        name = product.name
        product.delete()
        create_audit_log(request, 'delete', 'OnlineProduct', pk, object_name=name)
        return success_response(None, message='Product deleted successfully')


@api_view(['GET'])
@permission_classes([AllowAny])
def public_product_detail(request, slug):
    """Published product page with up to four related products"""
    product = get_object_or_404(
        OnlineProduct.objects.select_related('item', 'item__category'),
        slug=slug, is_published=True,
    )
    return success_response(PublicProductSerializer(product).data)

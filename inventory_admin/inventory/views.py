import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from inventory_admin.core.pagination import paginate
from inventory_admin.core.responses import success_response, validation_error_response
from inventory_admin.core.utils import create_audit_log
from . import services
from .models import StockAdjustment, ProcessingPool, ProcessingTransaction
from .serializers import (
    StockAdjustmentSerializer, ManualAdjustmentSerializer,
    ProcessingPoolSerializer, ProcessingRecipeSerializer,
    ProcessingTransactionSerializer, ProcessingTransactionCreateSerializer,
)

logger = logging.getLogger(__name__)


# Stock adjustment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stock_adjustment_list_create(request):
    """List stock adjustments or record a manual adjustment"""
    if request.method == 'GET':
        queryset = StockAdjustment.objects.select_related('item', 'warehouse', 'created_by').all()
        params = request.query_params
        if params.get('item'):
            queryset = queryset.filter(item_id=params['item'])
        if params.get('warehouse'):
            queryset = queryset.filter(warehouse_id=params['warehouse'])
        if params.get('method'):
            queryset = queryset.filter(adjustment_method=params['method'])
        if params.get('type'):
            queryset = queryset.filter(adjustment_type=params['type'])
        if params.get('grn_number'):
            queryset = queryset.filter(grn_number=params['grn_number'])
        return paginate(queryset, request, StockAdjustmentSerializer)
    else:
        serializer = ManualAdjustmentSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        data = serializer.validated_data
        delta = data['quantity'] if data['adjustment_type'] == 'increase' else -data['quantity']

        with transaction.atomic():
            adjustment = services.change_item_stock(
                data['item'], delta, 'manual',
                reason=data['reason'],
                user=request.user,
                reason_details=data['reason_details'],
                notes=data['notes'],
            )
        create_audit_log(
            request, 'stock_adjust', 'Item', data['item'].id,
            object_name=data['item'].item_name,
            changes={'type': data['adjustment_type'], 'quantity': str(data['quantity']), 'reason': data['reason']},
        )
        return success_response(StockAdjustmentSerializer(adjustment).data,
                                message='Stock adjusted successfully', status=status.HTTP_201_CREATED)


# Processing pool views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def processing_pool_list(request):
    """Processing pool entries, filterable by warehouse, status and category"""
    queryset = ProcessingPool.objects.select_related('item', 'item__category', 'warehouse').all()
    params = request.query_params
    if params.get('warehouse'):
        queryset = queryset.filter(warehouse_id=params['warehouse'])
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    if params.get('category'):
        queryset = queryset.filter(item__category_id=params['category'])
    if params.get('search'):
        queryset = queryset.filter(item__item_name__icontains=params['search'])
    data = ProcessingPoolSerializer(queryset, many=True).data
    return success_response(data, count=len(data))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def processing_pool_detail(request, pk):
    pool = get_object_or_404(ProcessingPool.objects.select_related('item', 'item__category', 'warehouse'), pk=pk)
    return success_response(ProcessingPoolSerializer(pool).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def processing_pool_recipe(request, pk):
    """Items previously produced from this pool with their current stock"""
    pool = get_object_or_404(ProcessingPool, pk=pk)
    recipes = pool.recipes.select_related('output_item').all()
    return success_response(ProcessingRecipeSerializer(recipes, many=True).data)


# Processing transaction views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def processing_transaction_list_create(request):
    """List processing transactions or process pool stock into items"""
    if request.method == 'GET':
        queryset = ProcessingTransaction.objects.select_related('input_item', 'warehouse', 'created_by').all()
        params = request.query_params
        if params.get('pool'):
            queryset = queryset.filter(pool_id=params['pool'])
        if params.get('warehouse'):
            queryset = queryset.filter(warehouse_id=params['warehouse'])
        if params.get('start_date'):
            queryset = queryset.filter(processed_at__date__gte=params['start_date'])
        if params.get('end_date'):
            queryset = queryset.filter(processed_at__date__lte=params['end_date'])
        return paginate(queryset, request, ProcessingTransactionSerializer)
    else:
        serializer = ProcessingTransactionCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors, error='Missing required fields')
        data = serializer.validated_data

        record = services.process_pool_stock(
            data['pool'],
            data['input_quantity'],
            data['outputs'],
            wastage_percent=data['wastage_percent'],
            processing_cost=data['processing_cost'],
            notes=data['notes'],
            user=request.user,
            input_item=data.get('input_item'),
        )
        create_audit_log(
            request, 'stock_processing', 'ProcessingTransaction', record.id,
            object_name=record.input_item.item_name,
            object_reference=record.transaction_number,
            changes={'input_quantity': str(record.input_quantity), 'outputs': record.outputs},
        )
        return success_response(ProcessingTransactionSerializer(record).data,
                                message='Processing completed successfully', status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def processing_transaction_detail(request, pk):
    record = get_object_or_404(ProcessingTransaction.objects.select_related('input_item', 'warehouse'), pk=pk)
    return success_response(ProcessingTransactionSerializer(record).data)

import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db.models import ProtectedError, Q
from inventory_admin.core.responses import success_response, error_response, validation_error_response
from inventory_admin.core.utils import create_audit_log
from .models import Warehouse
from .serializers import WarehouseSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def warehouse_list_create(request):
    """List all warehouses or create a new warehouse"""
    if request.method == 'GET':
        warehouses = Warehouse.objects.all()
        if request.query_params.get('active') == 'true':
            warehouses = warehouses.filter(is_active=True)
        search = request.query_params.get('search')
        if search:
            warehouses = warehouses.filter(Q(name__icontains=search) | Q(code__icontains=search) | Q(city__icontains=search))
        serializer = WarehouseSerializer(warehouses, many=True)
        return success_response(serializer.data)
    else:
        serializer = WarehouseSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Warehouse creation validation failed: {serializer.errors}")
            return validation_error_response(serializer.errors)
        warehouse = serializer.save()
        logger.info(f"Warehouse '{warehouse.name}' created by {request.user.username}")
        create_audit_log(request, 'create', 'Warehouse', warehouse.id, object_name=warehouse.name)
        return success_response(serializer.data, message='Warehouse created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def warehouse_detail(request, pk):
    """Retrieve, update or delete a warehouse"""
    warehouse = get_object_or_404(Warehouse, pk=pk)

    if request.method == 'GET':
        serializer = WarehouseSerializer(warehouse)
        return success_response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WarehouseSerializer(warehouse, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        serializer.save()
        create_audit_log(request, 'update', 'Warehouse', warehouse.id, object_name=warehouse.name)
        return success_response(serializer.data, message='Warehouse updated successfully')
    else:  # DELETE
        try:
            warehouse.delete()
        except ProtectedError:
            logger.warning(f"Refused to delete warehouse {pk}: still referenced by stock records")
            return error_response(
                'Warehouse in use',
                message='Cannot delete a warehouse that still holds items, pools or bills. Deactivate it instead.',
            )
        create_audit_log(request, 'delete', 'Warehouse', pk, object_name=warehouse.name)
        return success_response(None, message='Warehouse deleted successfully')

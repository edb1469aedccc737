import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.db.models import ProtectedError, Q
from django.shortcuts import get_object_or_404
from inventory_admin.core.responses import success_response, error_response, validation_error_response
from inventory_admin.core.utils import create_audit_log
from .models import Supplier
from .serializers import SupplierSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.all()
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(phone__icontains=search) |
                Q(code__icontains=search) |
                Q(email__icontains=search) |
                Q(tax_id__icontains=search)
            )
        is_active = request.query_params.get('is_active')
        if is_active in ('true', 'false'):
            queryset = queryset.filter(is_active=is_active == 'true')
        serializer = SupplierSerializer(queryset, many=True, context={'request': request})
        return success_response(serializer.data, count=len(serializer.data))
    else:
        serializer = SupplierSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return validation_error_response(serializer.errors, error='Missing required fields')
        supplier = serializer.save()
        logger.info(f"Supplier '{supplier.name}' created by {request.user.username}")
        create_audit_log(request, 'create', 'Supplier', supplier.id, object_name=supplier.name)
        return success_response(serializer.data, message='Supplier created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier, context={'request': request})
        return success_response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        if str(request.data.get('remove_attachment', '')).lower() == 'true' and supplier.attachment:
            supplier.attachment.delete(save=False)
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH',
                                        context={'request': request})
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        serializer.save()
        create_audit_log(request, 'update', 'Supplier', supplier.id, object_name=supplier.name)
        return success_response(serializer.data, message='Supplier updated successfully')
    else:  # DELETE
        try:
            supplier.delete()
        except ProtectedError:
            return error_response(
                'Supplier in use',
                message='Cannot delete a supplier that has purchase orders or bills. Deactivate it instead.',
            )
        create_audit_log(request, 'delete', 'Supplier', pk, object_name=supplier.name)
        return success_response(None, message='Supplier deleted successfully')

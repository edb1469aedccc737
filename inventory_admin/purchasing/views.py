import json
import logging
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Sum
from django.shortcuts import get_object_or_404
from inventory_admin.core.exceptions import InvalidStatusTransition
from inventory_admin.core.pagination import paginate
from inventory_admin.core.responses import success_response, error_response, validation_error_response
from inventory_admin.core.utils import create_audit_log, next_document_number
from inventory_admin.inventory.services import apply_bill_stock, bill_stock_lines, reverse_bill_stock, update_bill_stock
from inventory_admin.parties.models import Supplier
from .models import PurchaseOrder, Bill
from .serializers import PurchaseOrderSerializer, BillSerializer, BillPaymentSerializer

logger = logging.getLogger(__name__)


def request_payload(request):
    """
    Plain dict of the request body. Multipart forms send `items` as a JSON
    string next to the uploaded file.
    """
    data = request.data.dict() if hasattr(request.data, 'dict') else dict(request.data)
    items = data.get('items')
    if isinstance(items, str):
        try:
            data['items'] = json.loads(items) if items.strip() else []
        except ValueError:
            data['items'] = None
    return data


def missing_fields(data, required):
    return [field for field in required if data.get(field) in (None, '', [])]


def filter_documents(queryset, params, date_field):
    if params.get('supplier'):
        queryset = queryset.filter(supplier_id=params['supplier'])
    if params.get('warehouse'):
        queryset = queryset.filter(warehouse_id=params['warehouse'])
    if params.get('start_date'):
        queryset = queryset.filter(**{f'{date_field}__gte': params['start_date']})
    if params.get('end_date'):
        queryset = queryset.filter(**{f'{date_field}__lte': params['end_date']})
    return queryset


def _money(value):
    return value if value is not None else Decimal('0')


# Purchase order views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders or create one; totals are computed server-side"""
    if request.method == 'GET':
        queryset = PurchaseOrder.objects.select_related('supplier', 'warehouse').prefetch_related('items', 'bills')
        params = request.query_params
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('search'):
            queryset = queryset.filter(po_number__icontains=params['search'])
        queryset = filter_documents(queryset, params, 'po_date')
        if params.get('available_for_bill') == 'true':
            queryset = queryset.filter(status=PurchaseOrder.COMPLETED, bills__isnull=True)
        return paginate(queryset, request, PurchaseOrderSerializer)
    else:
        data = request_payload(request)
        missing = missing_fields(data, ['supplier', 'warehouse', 'items'])
        if missing:
            return error_response('Missing required fields', message=f"Required: {', '.join(missing)}")

        serializer = PurchaseOrderSerializer(data=data, context={'request': request})
        if not serializer.is_valid():
            logger.warning(f"Purchase order validation failed: {serializer.errors}")
            return validation_error_response(serializer.errors)

        with transaction.atomic():
            purchase_order = serializer.save(created_by=request.user)

        logger.info(f"Purchase order {purchase_order.po_number} ({purchase_order.status}) created by {request.user.username}")
        create_audit_log(request, 'create', 'PurchaseOrder', purchase_order.id,
                         object_name=purchase_order.supplier_name, object_reference=purchase_order.po_number,
                         changes={'status': purchase_order.status, 'grand_total': str(purchase_order.grand_total)})
        message = ('Purchase order created and marked as completed'
                   if purchase_order.status == PurchaseOrder.COMPLETED else 'Purchase order saved as draft')
        return success_response(PurchaseOrderSerializer(purchase_order).data, message=message,
                                status=status.HTTP_201_CREATED, warning=serializer.gst_warning)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_next_number(request):
    return success_response({'po_number': next_document_number(PurchaseOrder, 'po_number', 'PO')})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_stats(request):
    recent = PurchaseOrder.objects.values('id', 'po_number', 'supplier_name', 'grand_total', 'status', 'created_at')[:5]
    return success_response({
        'total': PurchaseOrder.objects.count(),
        'draft': PurchaseOrder.objects.filter(status=PurchaseOrder.DRAFT).count(),
        'completed': PurchaseOrder.objects.filter(status=PurchaseOrder.COMPLETED).count(),
        'total_value': _money(PurchaseOrder.objects.aggregate(total=Sum('grand_total'))['total']),
        'recent_purchase_orders': list(recent),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """
    Retrieve or update a purchase order. Lines are replaced on update.
    Purchase orders are never deleted.
    """
    purchase_order = get_object_or_404(
        PurchaseOrder.objects.select_related('supplier', 'warehouse').prefetch_related('items'), pk=pk
    )

    if request.method == 'GET':
        return success_response(PurchaseOrderSerializer(purchase_order).data)
    elif request.method in ('PUT', 'PATCH'):
        data = request_payload(request)
        new_status = data.get('status') or purchase_order.status
        if not purchase_order.can_transition_to(new_status):
            allowed = ', '.join(PurchaseOrder.ALLOWED_TRANSITIONS.get(purchase_order.status, ()))
            raise InvalidStatusTransition(
                f'Cannot change status from "{purchase_order.status}" to "{new_status}". Valid transitions: {allowed}'
            )

        old_status = purchase_order.status
        serializer = PurchaseOrderSerializer(purchase_order, data=data, partial=request.method == 'PATCH',
                                             context={'request': request})
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        with transaction.atomic():
            purchase_order = serializer.save()

        create_audit_log(request, 'update', 'PurchaseOrder', purchase_order.id,
                         object_name=purchase_order.supplier_name, object_reference=purchase_order.po_number,
                         changes={'status': {'old': old_status, 'new': purchase_order.status}})
        message = 'Purchase order updated'
        if old_status == PurchaseOrder.DRAFT and purchase_order.status == PurchaseOrder.COMPLETED:
            message = 'Purchase order marked as completed'
        return success_response(PurchaseOrderSerializer(purchase_order).data, message=message,
                                warning=serializer.gst_warning)
    else:
        logger.warning(f"Refused delete of purchase order {purchase_order.po_number} by {request.user.username}")
        return error_response(
            'Delete operation not allowed',
            message='Purchase orders cannot be deleted. Please cancel the purchase order instead using status update.',
            status=status.HTTP_403_FORBIDDEN,
        )


# Bill / GRN views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def bill_list_create(request):
    """List bills or record a new bill, receiving its stock"""
    if request.method == 'GET':
        queryset = Bill.objects.select_related('supplier', 'warehouse', 'purchase_order').prefetch_related('items')
        params = request.query_params
        if params.get('po'):
            queryset = queryset.filter(purchase_order_id=params['po'])
        if params.get('payment_status'):
            queryset = queryset.filter(payment_status=params['payment_status'])
        if params.get('status'):
            queryset = queryset.filter(payment_status=params['status'])
        if params.get('search'):
            queryset = queryset.filter(grn_number__icontains=params['search'])
        queryset = filter_documents(queryset, params, 'bill_date')
        return paginate(queryset, request, BillSerializer)
    else:
        data = request_payload(request)
        if data.get('items') is None and 'items' in data:
            return error_response('Validation failed', message='items: Invalid JSON.')
        missing = missing_fields(data, ['supplier_invoice_no', 'supplier', 'warehouse', 'items'])
        if missing:
            return error_response('Missing required fields', message=f"Required: {', '.join(missing)}")

        serializer = BillSerializer(data=data, context={'request': request})
        if not serializer.is_valid():
            logger.warning(f"Bill validation failed: {serializer.errors}")
            return validation_error_response(serializer.errors)

        with transaction.atomic():
            bill = serializer.save(created_by=request.user)
            apply_bill_stock(bill, user=request.user)

        logger.info(f"Bill {bill.grn_number} created by {request.user.username}, total {bill.grand_total}")
        create_audit_log(request, 'create', 'Bill', bill.id, object_name=bill.supplier_name,
                         object_reference=bill.grn_number,
                         changes={'grand_total': str(bill.grand_total), 'po_number': bill.po_number})
        return success_response(BillSerializer(bill).data, message='Bill created and stock updated successfully',
                                status=status.HTTP_201_CREATED, warning=serializer.gst_warning)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def bill_next_grn(request):
    return success_response({'grn_number': next_document_number(Bill, 'grn_number', 'GRN')})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def bill_stats(request):
    recent = Bill.objects.values('id', 'grn_number', 'supplier_name', 'grand_total', 'payment_status', 'created_at')[:5]
    return success_response({
        'total': Bill.objects.count(),
        'unpaid': Bill.objects.filter(payment_status=Bill.UNPAID).count(),
        'partial': Bill.objects.filter(payment_status=Bill.PARTIAL).count(),
        'paid': Bill.objects.filter(payment_status=Bill.PAID).count(),
        'total_value': _money(Bill.objects.aggregate(total=Sum('grand_total'))['total']),
        'unpaid_value': _money(
            Bill.objects.filter(payment_status=Bill.UNPAID).aggregate(total=Sum('grand_total'))['total']
        ),
        'recent_bills': list(recent),
    })


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def bill_detail(request, pk):
    """
    Retrieve, update or delete a bill. An update moves stock by the
    difference between the old and new lines; a delete takes it all out.
    """
    bill = get_object_or_404(Bill.objects.select_related('supplier', 'warehouse').prefetch_related('items'), pk=pk)

    if request.method == 'GET':
        return success_response(BillSerializer(bill).data)
    elif request.method in ('PUT', 'PATCH'):
        data = request_payload(request)
        if data.get('items') is None and 'items' in data:
            return error_response('Validation failed', message='items: Invalid JSON.')

        serializer = BillSerializer(bill, data=data, partial=request.method == 'PATCH',
                                    context={'request': request})
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        with transaction.atomic():
            previous_stock = bill_stock_lines(bill)
            if data.get('remove_invoice_copy') in (True, 'true', '1') and bill.invoice_copy:
                bill.invoice_copy.delete(save=False)
                bill.invoice_copy = None
            bill = serializer.save()
            update_bill_stock(bill, previous_stock, user=request.user)

        create_audit_log(request, 'update', 'Bill', bill.id, object_name=bill.supplier_name,
                         object_reference=bill.grn_number, changes={'grand_total': str(bill.grand_total)})
        return success_response(BillSerializer(bill).data, message='Bill updated successfully',
                                warning=serializer.gst_warning)
    else:
        grn_number, supplier_name = bill.grn_number, bill.supplier_name
        with transaction.atomic():
            reverse_bill_stock(bill, user=request.user)
            bill.delete()
        logger.info(f"Bill {grn_number} deleted by {request.user.username}; stock reversed")
        create_audit_log(request, 'delete', 'Bill', pk, object_name=supplier_name, object_reference=grn_number)
        return success_response(None, message='Bill deleted and stock reversed successfully')


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def bill_payment(request, pk):
    """Update payment status; `paid` settles the full grand total"""
    bill = get_object_or_404(Bill, pk=pk)
    serializer = BillPaymentSerializer(data=request.data, context={'bill': bill})
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)
    data = serializer.validated_data

    old_status = bill.payment_status
    bill.payment_status = data['payment_status']
    bill.payment_date = data.get('payment_date')
    if bill.payment_status == Bill.PAID:
        bill.paid_amount = bill.grand_total
    elif bill.payment_status == Bill.PARTIAL:
        bill.paid_amount = data['paid_amount']
    else:
        bill.paid_amount = Decimal('0')
    bill.save(update_fields=['payment_status', 'payment_date', 'paid_amount', 'updated_at'])

    create_audit_log(request, 'payment_update', 'Bill', bill.id, object_name=bill.supplier_name,
                     object_reference=bill.grn_number,
                     changes={'payment_status': {'old': old_status, 'new': bill.payment_status},
                              'paid_amount': str(bill.paid_amount)})
    return success_response(BillSerializer(bill).data, message='Payment status updated successfully')


# Supplier documents
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_bills(request, pk):
    supplier = get_object_or_404(Supplier, pk=pk)
    bills = supplier.bills.prefetch_related('items').all()
    data = BillSerializer(bills, many=True).data
    return success_response(data, count=len(data))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def supplier_purchase_orders(request, pk):
    supplier = get_object_or_404(Supplier, pk=pk)
    purchase_orders = supplier.purchase_orders.prefetch_related('items', 'bills').all()
    data = PurchaseOrderSerializer(purchase_orders, many=True).data
    return success_response(data, count=len(data))

import logging
from decimal import Decimal, InvalidOperation
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.shortcuts import get_object_or_404
from inventory_admin.core.cache_utils import GST_RATES_CACHE_TTL, get_or_set, gst_rates_key
from inventory_admin.core.responses import success_response, error_response, validation_error_response
from inventory_admin.core.utils import create_audit_log, get_admin_state
from . import gst
from .gateways import validate_gateway_credentials
from .models import GSTRate, PaymentGateway
from .serializers import (
    GSTRateSerializer, GSTCalculateSerializer,
    PaymentGatewaySerializer, PaymentGatewayUpdateSerializer,
)

logger = logging.getLogger(__name__)


def decimals_to_str(value):
    """Render Decimals as strings the way DecimalField serializers do"""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {key: decimals_to_str(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [decimals_to_str(item) for item in value]
    return value


# GST rate views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def gst_rate_list_create(request):
    """List GST rates (cached) or create a new rate"""
    if request.method == 'GET':
        active_only = request.query_params.get('active') == 'true'

        def load():
            rates = GSTRate.objects.all()
            if active_only:
                rates = rates.filter(is_active=True)
            return GSTRateSerializer(rates, many=True).data

        data = get_or_set(gst_rates_key(active_only), load, GST_RATES_CACHE_TTL)
        return success_response(data, count=len(data))
    else:
        serializer = GSTRateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        rate = serializer.save()
        logger.info(f"GST rate '{rate}' created by {request.user.username}")
        create_audit_log(request, 'create', 'GSTRate', rate.id, object_name=str(rate))
        return success_response(serializer.data, message='GST rate created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def gst_rate_detail(request, pk):
    """Retrieve, update or delete a GST rate"""
    rate = get_object_or_404(GSTRate, pk=pk)

    if request.method == 'GET':
        return success_response(GSTRateSerializer(rate).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = GSTRateSerializer(rate, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        serializer.save()
        create_audit_log(request, 'update', 'GSTRate', rate.id, object_name=str(rate))
        return success_response(serializer.data, message='GST rate updated successfully')
    else:  # DELETE
        name = str(rate)
        rate.delete()
        create_audit_log(request, 'delete', 'GSTRate', pk, object_name=name)
        return success_response(None, message='GST rate deleted successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def gst_calculate(request):
    """
    Preview totals for a purchase order or bill form.

    The GST type is taken from `gst_type` when given, otherwise from the
    admin state compared with the supplier state.
    """
    serializer = GSTCalculateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)
    params = serializer.validated_data

    warning = None
    gst_type = params.get('gst_type')
    if not gst_type:
        supplier = params.get('supplier')
        supplier_state = params.get('supplier_state') or (supplier.state if supplier else '')
        admin_state = params.get('admin_state') or get_admin_state(request.user)
        gst_type, warning = gst.determine_gst_type(admin_state, supplier_state)
        if warning:
            logger.warning(f"GST preview for {request.user.username} defaulted to IGST: state missing")

    try:
        totals = gst.calculate_totals(
            params['items'],
            gst_type,
            discount=params['discount'],
            discount_type=params['discount_type'],
            other_charges=params['other_charges'],
            rounding_adjustment=params['rounding_adjustment'],
            quantity_field=params['quantity_field'],
        )
        rounding = gst.rounding_options(totals.before_rounding)
    except InvalidOperation:
        logger.warning(f"GST preview for {request.user.username} rejected: amounts out of range")
        return error_response('Invalid amounts', message='Amounts are too large to calculate.')
    data = totals.as_dict()
    data['rounding_options'] = rounding
    data['warning'] = warning
    return success_response(decimals_to_str(data), message=warning)


# Payment gateway views
def ensure_default_gateways():
    for name, _label in PaymentGateway.NAME_CHOICES:
        PaymentGateway.objects.get_or_create(name=name, defaults={'is_active': False})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_gateway_list(request):
    """All gateways with credential flags; secrets are never returned"""
    ensure_default_gateways()
    gateways = PaymentGateway.objects.all()
    return success_response(PaymentGatewaySerializer(gateways, many=True).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def payment_gateway_active(request):
    """Gateways enabled for checkout"""
    gateways = PaymentGateway.objects.filter(is_active=True)
    data = [{'name': g.name, 'api_key': g.api_key, 'test_mode': g.test_mode} for g in gateways]
    return success_response(data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def payment_gateway_update(request, name):
    """Save gateway credentials after validating them with the provider"""
    if name not in dict(PaymentGateway.NAME_CHOICES):
        return error_response('Invalid gateway', message='Invalid gateway name. Must be one of: razorpay, stripe, cod')

    serializer = PaymentGatewayUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)
    updates = serializer.validated_data

    gateway, _created = PaymentGateway.objects.get_or_create(name=name, defaults={'is_active': False})
    api_key = updates.get('api_key', gateway.api_key)
    secret_key = updates.get('secret_key', gateway.secret_key)
    webhook_secret = updates.get('webhook_secret', gateway.webhook_secret)

    if any(field in updates for field in ('api_key', 'secret_key', 'webhook_secret')):
        logger.info(f"Validating {name} credentials")
        result = validate_gateway_credentials(name, api_key, secret_key, webhook_secret)
        if not result['valid']:
            return error_response('Credential validation failed', message=result['message'])
        logger.info(f"{name} credentials validated successfully")

    if updates.get('is_active') and gateway.requires_credentials and not api_key:
        return error_response('Missing API key', message='API Key is required to enable the payment gateway')

    for field, value in updates.items():
        setattr(gateway, field, value)
    gateway.save()

    create_audit_log(request, 'settings_update', 'PaymentGateway', gateway.id, object_name=gateway.name,
                     changes={'fields': sorted(updates.keys())})
    return success_response(PaymentGatewaySerializer(gateway).data,
                            message='Payment gateway updated and validated successfully')


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def payment_gateway_toggle(request, name):
    """Enable or disable a gateway"""
    is_active = request.data.get('is_active')
    if not isinstance(is_active, bool):
        return error_response('Invalid value', message='is_active must be a boolean value')

    gateway = PaymentGateway.objects.filter(name=name).first()
    if gateway is None:
        if name != PaymentGateway.COD:
            return error_response('Not configured', message='Payment gateway not configured. Please add API key first.')
        gateway = PaymentGateway.objects.create(name=name, is_active=is_active)
    else:
        if is_active and gateway.requires_credentials and not gateway.api_key:
            return error_response('Missing API key', message='API Key is required to enable the payment gateway')
        gateway.is_active = is_active
        gateway.save(update_fields=['is_active', 'updated_at'])

    create_audit_log(request, 'status_change', 'PaymentGateway', gateway.id, object_name=gateway.name,
                     changes={'is_active': is_active})
    return success_response(
        PaymentGatewaySerializer(gateway).data,
        message=f"Payment gateway {'enabled' if is_active else 'disabled'} successfully",
    )

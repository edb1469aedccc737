import logging
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.core.exceptions import ObjectDoesNotExist
from .models import AuditLog
from .pagination import paginate
from .responses import success_response, validation_error_response
from .serializers import UserSerializer, ProfileUpdateSerializer, AuditLogSerializer
from .utils import create_audit_log, get_admin_state

logger = logging.getLogger(__name__)


class AdminTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['state'] = user.state
        return token


class AdminLoginView(TokenObtainPairView):
    serializer_class = AdminTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        logger.info(f"Admin login: {request.data.get('username')}")
        response.data = {'success': True, 'data': response.data, 'message': 'Login successful'}
        return response


class AdminTokenRefreshSerializer(TokenRefreshSerializer):
    """Refresh that reports a deleted user as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class AdminTokenRefreshView(TokenRefreshView):
    serializer_class = AdminTokenRefreshSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        response.data = {'success': True, 'data': response.data}
        return response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admin_me(request):
    """Current admin, including the business state used for GST"""
    data = UserSerializer(request.user).data
    data['admin_state'] = get_admin_state(request.user)
    return success_response(data)


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def admin_profile(request):
    """Update name, contact details and state of the current admin"""
    serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)

    user = serializer.save()
    create_audit_log(
        request=request,
        action='update',
        model_name='User',
        object_id=str(user.id),
        object_name=user.username,
        changes={key: str(value) for key, value in serializer.validated_data.items()},
    )
    return success_response(UserSerializer(user).data, message='Profile updated successfully')


@api_view(['GET'])
@permission_classes([AllowAny])
def admin_state(request):
    """Public lookup of the admin business state"""
    user = request.user if request.user.is_authenticated else None
    return success_response({'state': get_admin_state(user)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def audit_log_list(request):
    """List audit logs with optional action/model/reference filters"""
    queryset = AuditLog.objects.select_related('user').all()

    action = request.query_params.get('action')
    if action:
        queryset = queryset.filter(action=action)
    model_name = request.query_params.get('model_name')
    if model_name:
        queryset = queryset.filter(model_name=model_name)
    reference = request.query_params.get('reference')
    if reference:
        queryset = queryset.filter(object_reference__icontains=reference)
    user_id = request.query_params.get('user')
    if user_id:
        queryset = queryset.filter(user_id=user_id)

    return paginate(queryset, request, AuditLogSerializer)

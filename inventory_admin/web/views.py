import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny, IsAuthenticatedOrReadOnly
from django.shortcuts import get_object_or_404
from django.utils import timezone
from inventory_admin.core.cache_utils import (
    COMPANY_SETTINGS_KEY, WEB_SETTINGS_KEY, SETTINGS_CACHE_TTL, PUBLIC_PAGE_CACHE_TTL,
    get_or_set, public_policy_key, seo_page_key,
)
from inventory_admin.core.responses import success_response, error_response, validation_error_response
from inventory_admin.core.utils import create_audit_log
from inventory_admin.core.validators import validate_image_upload
from rest_framework.exceptions import ValidationError
from .models import Banner, CompanySettings, Policy, PageSEO, WebSettings, default_social_media
from .serializers import (
    BannerSerializer, CompanySettingsSerializer, PolicySerializer, PageSEOSerializer, WebSettingsSerializer,
)

logger = logging.getLogger(__name__)


# Banners
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def banner_list_create(request):
    if request.method == 'GET':
        banners = Banner.objects.all()
        if request.query_params.get('active') == 'true':
            banners = banners.filter(is_active=True)
        return success_response(BannerSerializer(banners, many=True).data)
    else:
        if not request.data.get('image'):
            return error_response('Banner image is required', message='Upload a banner image.')
        serializer = BannerSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        banner = serializer.save()
        create_audit_log(request, 'create', 'Banner', banner.id, object_name=banner.title)
        return success_response(serializer.data, message='Banner created successfully', status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def banner_detail(request, pk):
    banner = get_object_or_404(Banner, pk=pk)

    if request.method == 'GET':
        return success_response(BannerSerializer(banner).data)
    elif request.method in ('PUT', 'PATCH'):
        old_image = banner.image.name if banner.image else None
        # keep the stored image when the form does not send a new one
        serializer = BannerSerializer(banner, data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        banner = serializer.save()
        if old_image and banner.image.name != old_image:
            banner.image.storage.delete(old_image)
        create_audit_log(request, 'update', 'Banner', banner.id, object_name=banner.title)
        return success_response(serializer.data, message='Banner updated successfully')
    else:
        title = banner.title
        if banner.image:
            banner.image.delete(save=False)
        banner.delete()
        create_audit_log(request, 'delete', 'Banner', pk, object_name=title)
        return success_response(None, message='Banner deleted successfully')


# Company settings
def _company_settings_data():
    company = CompanySettings.load()
    if company is None:
        return {
            'id': None, 'company_name': '', 'tagline': '', 'description': '', 'email': '', 'phone': '',
            'address': '', 'city': '', 'state': '', 'zip_code': '', 'country': '', 'website': '',
            'map_iframe': '', 'social_media': default_social_media(),
        }
    return CompanySettingsSerializer(company).data


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def company_settings(request):
    """Public company details; POST creates or replaces the single row"""
    if request.method == 'GET':
        return success_response(get_or_set(COMPANY_SETTINGS_KEY, _company_settings_data, SETTINGS_CACHE_TTL))

    serializer = CompanySettingsSerializer(CompanySettings.load(), data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)
    company = serializer.save()
    logger.info(f"Company settings saved by {request.user.username}")
    create_audit_log(request, 'update', 'CompanySettings', company.id, object_name=company.company_name)
    return success_response(serializer.data, message='Company settings saved successfully')


# Policies
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def policy_list_save(request):
    """
    GET returns one entry per policy type, stored or placeholder.
    POST upserts by `policy_type`; every save of an existing policy bumps
    its version.
    """
    if request.method == 'GET':
        stored = {policy.policy_type: policy for policy in Policy.objects.all()}
        data = []
        for policy_type in Policy.POLICY_TYPES:
            if policy_type in stored:
                data.append(PolicySerializer(stored[policy_type]).data)
            else:
                data.append(Policy.default_for(policy_type))
        return success_response(data)

    policy_type = request.data.get('policy_type')
    if policy_type not in Policy.POLICY_TYPES:
        return error_response('Invalid policy type', message=f'Policy type must be one of: {", ".join(Policy.POLICY_TYPES)}')

    existing = Policy.objects.filter(policy_type=policy_type).first()
    serializer = PolicySerializer(existing, data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)
    policy = serializer.save(
        slug=Policy.POLICY_TYPES[policy_type]['slug'],
        version=existing.version + 1 if existing else 1,
        last_updated=timezone.now(),
    )
    logger.info(f"Policy {policy_type} saved (v{policy.version})")
    create_audit_log(request, 'update' if existing else 'create', 'Policy', policy.id,
                     object_name=policy.title, changes={'version': policy.version})
    return success_response(PolicySerializer(policy).data, message='Policy saved successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def policy_by_type(request, policy_type):
    if policy_type not in Policy.POLICY_TYPES:
        return error_response('Invalid policy type')
    policy = Policy.objects.filter(policy_type=policy_type).first()
    if policy is None:
        return success_response(Policy.default_for(policy_type))
    return success_response(PolicySerializer(policy).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def public_policy(request, slug):
    def load():
        policy = Policy.objects.filter(slug=slug, is_published=True, is_active=True).first()
        return PolicySerializer(policy).data if policy else None

    data = get_or_set(public_policy_key(slug), load, PUBLIC_PAGE_CACHE_TTL)
    if data is None:
        return error_response('Policy not found or not published', status=status.HTTP_404_NOT_FOUND)
    return success_response(data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def policy_publish(request, pk):
    policy = get_object_or_404(Policy, pk=pk)
    is_published = request.data.get('is_published')
    if isinstance(is_published, str):
        is_published = is_published.lower() in ('true', '1')
    policy.is_published = bool(is_published)
    policy.last_updated = timezone.now()
    policy.save(update_fields=['is_published', 'last_updated', 'updated_at'])
    create_audit_log(request, 'update', 'Policy', policy.id, object_name=policy.title,
                     changes={'is_published': policy.is_published})
    state = 'published' if policy.is_published else 'unpublished'
    return success_response(PolicySerializer(policy).data, message=f'Policy {state} successfully')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def policy_delete(request, pk):
    policy = get_object_or_404(Policy, pk=pk)
    title = policy.title
    policy.delete()
    create_audit_log(request, 'delete', 'Policy', pk, object_name=title)
    return success_response(None, message='Policy deleted successfully')


# Page SEO
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def page_seo_list_save(request):
    """
    GET lists known public pages merged with stored entries (plus any
    custom paths). POST upserts by `page_path`.
    """
    if request.method == 'GET':
        stored = {seo.page_path: seo for seo in PageSEO.objects.all()}
        data = []
        for path, _name, _description in PageSEO.PUBLIC_PAGES:
            seo = stored.pop(path, None)
            data.append(PageSEOSerializer(seo).data if seo else PageSEO.default_for(path))
        data.extend(PageSEOSerializer(seo).data for seo in stored.values())
        return success_response(data)

    page_path = PageSEO.normalize_path(request.data.get('page_path'))
    if not request.data.get('page_path') or not (request.data.get('page_name') or '').strip():
        return error_response('Missing required fields', message='page_path and page_name are required')

    existing = PageSEO.objects.filter(page_path=page_path).first()
    old_image = existing.og_image.name if existing and existing.og_image else None
    serializer = PageSEOSerializer(existing, data=request.data, partial=existing is not None)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)
    seo = serializer.save()
    if old_image and seo.og_image.name != old_image:
        seo.og_image.storage.delete(old_image)
    create_audit_log(request, 'update' if existing else 'create', 'PageSEO', seo.id, object_name=seo.page_name,
                     object_reference=seo.page_path)
    return success_response(PageSEOSerializer(seo).data, message='Page SEO saved successfully')


@api_view(['GET'])
@permission_classes([AllowAny])
def page_seo_by_path(request, page_path):
    page_path = PageSEO.normalize_path(page_path)

    def load():
        seo = PageSEO.objects.filter(page_path=page_path).first()
        return PageSEOSerializer(seo).data if seo else PageSEO.default_for(page_path)

    data = get_or_set(seo_page_key(page_path), load, PUBLIC_PAGE_CACHE_TTL)
    if data is None:
        return error_response('Page not found', status=status.HTTP_404_NOT_FOUND)
    return success_response(data)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def page_seo_delete(request, pk):
    seo = get_object_or_404(PageSEO, pk=pk)
    path = seo.page_path
    if seo.og_image:
        seo.og_image.delete(save=False)
    seo.delete()
    create_audit_log(request, 'delete', 'PageSEO', pk, object_reference=path)
    return success_response(None, message='Page SEO deleted successfully')


# Web settings (logo / favicon)
def _web_settings_data():
    return WebSettingsSerializer(WebSettings.load()).data


@api_view(['GET'])
@permission_classes([AllowAny])
def web_settings(request):
    return success_response(get_or_set(WEB_SETTINGS_KEY, _web_settings_data, SETTINGS_CACHE_TTL))


def _replace_asset(request, field, label):
    settings = WebSettings.load()
    current = getattr(settings, field)

    if request.method == 'DELETE':
        if not current:
            return error_response(f'No {label} to delete', status=status.HTTP_404_NOT_FOUND)
        current.delete(save=False)
        setattr(settings, field, None)
        settings.save()
        create_audit_log(request, 'delete', 'WebSettings', settings.id, changes={field: None})
        return success_response(WebSettingsSerializer(settings).data, message=f'{label.capitalize()} deleted successfully')

    upload = request.FILES.get(field) or request.FILES.get('file')
    if upload is None:
        return error_response('No file uploaded', message=f'Attach the {label} as "{field}".')
    try:
        validate_image_upload(upload)
    except ValidationError as e:
        return validation_error_response({field: e.detail})

    if current:
        current.delete(save=False)
    setattr(settings, field, upload)
    settings.save()
    logger.info(f"Web settings {field} replaced by {request.user.username}")
    create_audit_log(request, 'update', 'WebSettings', settings.id, changes={field: getattr(settings, field).name})
    return success_response(WebSettingsSerializer(settings).data, message=f'{label.capitalize()} uploaded successfully')


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def web_settings_logo(request):
    return _replace_asset(request, 'logo', 'logo')


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def web_settings_favicon(request):
    return _replace_asset(request, 'favicon', 'favicon')

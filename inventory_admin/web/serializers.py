from rest_framework import serializers
from inventory_admin.core.validators import validate_image_upload
from .models import Banner, CompanySettings, Policy, PageSEO, WebSettings


class BannerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Banner
        fields = ['id', 'title', 'link_url', 'image', 'sort_order', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate_image(self, value):
        return validate_image_upload(value)


class CompanySettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanySettings
        fields = ['id', 'company_name', 'tagline', 'description', 'email', 'phone', 'address', 'city',
                  'state', 'zip_code', 'country', 'website', 'map_iframe', 'social_media',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_company_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Company name is required")
        return value

    def validate_social_media(self, value):
        if value in (None, ''):
            return {}
        if not isinstance(value, dict):
            raise serializers.ValidationError("Social media must be an object of network to URL.")
        return value


class PolicySerializer(serializers.ModelSerializer):
    policy_type = serializers.ChoiceField(choices=Policy.TYPE_CHOICES)

    class Meta:
        model = Policy
        fields = ['id', 'policy_type', 'title', 'slug', 'content', 'is_active', 'is_published', 'version',
                  'last_updated', 'created_at', 'updated_at']
        read_only_fields = ['slug', 'version', 'last_updated', 'created_at', 'updated_at']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def validate_content(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Content is required")
        return value


class PageSEOSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageSEO
        fields = ['id', 'page_path', 'page_name', 'description', 'meta_title', 'meta_description',
                  'meta_keywords', 'og_image', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        # upserted by path in the view
        extra_kwargs = {'page_path': {'validators': []}}

    def validate_page_path(self, value):
        return PageSEO.normalize_path(value)

    def validate_page_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Page name is required")
        return value

    def validate_og_image(self, value):
        return validate_image_upload(value)


class WebSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = WebSettings
        fields = ['id', 'logo', 'favicon', 'created_at', 'updated_at']
        read_only_fields = fields

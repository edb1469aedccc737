"""
Cache invalidation signals
Drop cached lookups whenever the underlying rows change
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .cache_utils import (
    COMPANY_SETTINGS_KEY, GST_RATES_ACTIVE_KEY, GST_RATES_ALL_KEY, WEB_SETTINGS_KEY,
    invalidate_keys, public_policy_key, seo_page_key,
)

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender='finance.GSTRate')
def invalidate_gst_rates_cache(sender, instance, **kwargs):
    invalidate_keys(GST_RATES_ALL_KEY, GST_RATES_ACTIVE_KEY)


@receiver([post_save, post_delete], sender='web.CompanySettings')
def invalidate_company_settings_cache(sender, instance, **kwargs):
    invalidate_keys(COMPANY_SETTINGS_KEY)


@receiver([post_save, post_delete], sender='web.WebSettings')
def invalidate_web_settings_cache(sender, instance, **kwargs):
    invalidate_keys(WEB_SETTINGS_KEY)


@receiver([post_save, post_delete], sender='web.PageSEO')
def invalidate_seo_cache(sender, instance, **kwargs):
    invalidate_keys(seo_page_key(instance.page_path))


@receiver([post_save, post_delete], sender='web.Policy')
def invalidate_policy_cache(sender, instance, **kwargs):
    # slug may have changed on update; the old slug entry simply expires
    invalidate_keys(public_policy_key(instance.slug))

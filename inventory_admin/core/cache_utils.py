"""
Caching helpers for small, read-mostly lookups (GST rates, company and web
settings, SEO entries, public policies). Redis backs the cache in
production; local memory in development and tests.
"""
from django.core.cache import cache
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
GST_RATES_CACHE_TTL = 600  # 10 minutes
SETTINGS_CACHE_TTL = 300  # 5 minutes
PUBLIC_PAGE_CACHE_TTL = 300  # 5 minutes

GST_RATES_ALL_KEY = "gst_rates:all"
GST_RATES_ACTIVE_KEY = "gst_rates:active"
COMPANY_SETTINGS_KEY = "company_settings"
WEB_SETTINGS_KEY = "web_settings"


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def gst_rates_key(active_only=False):
    return GST_RATES_ACTIVE_KEY if active_only else GST_RATES_ALL_KEY


def seo_page_key(page_path):
    return make_cache_key("seo_page", page_path)


def public_policy_key(slug):
    return make_cache_key("public_policy", slug)


def get_or_set(cache_key, producer, ttl):
    """
    Return the cached value for `cache_key`, computing and storing it with
    `producer()` on a miss. None results are not cached.
    """
    cached_data = cache.get(cache_key)
    if cached_data is not None:
        logger.debug(f"Cache HIT: {cache_key}")
        return cached_data

    logger.debug(f"Cache MISS: {cache_key}")
    data = producer()
    if data is not None:
        cache.set(cache_key, data, ttl)
    return data


def invalidate_keys(*keys):
    """Delete the given cache keys; a cache outage is logged, never raised"""
    try:
        cache.delete_many(list(keys))
        logger.info(f"Invalidated cache keys: {', '.join(keys)}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache keys {keys}: {str(e)}")

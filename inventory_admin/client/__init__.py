from .api import AdminApiClient, ApiError, load_form_context
from .debounce import Debouncer, SkuAvailabilityChecker

__all__ = ['AdminApiClient', 'ApiError', 'load_form_context', 'Debouncer', 'SkuAvailabilityChecker']

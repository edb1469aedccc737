"""
Domain exceptions and the DRF exception handler that turns every API error
into the {success: false, error, message} envelope.
"""
import logging
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler
from .responses import first_error_message

logger = logging.getLogger(__name__)


class DomainError(APIException):
    """Business rule violation raised from services; rendered as a 400"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'
    default_code = 'domain_error'
    error = 'Request failed'

    def __init__(self, detail=None, error=None):
        super().__init__(detail)
        if error:
            self.error = error


class InvalidStatusTransition(DomainError):
    error = 'Invalid status transition'


class InsufficientPoolStock(DomainError):
    error = 'Insufficient stock'


class OperationNotAllowed(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    error = 'Operation not allowed'


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            'success': False,
            'error': 'Validation failed',
            'message': first_error_message(response.data) or 'Invalid input.',
            'errors': response.data,
        }
        return response

    detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
    error = getattr(exc, 'error', None) or _error_title(response.status_code)
    response.data = {
        'success': False,
        'error': error,
        'message': str(detail) if detail else error,
    }
    if response.status_code >= 500:
        logger.error(f"API error in {context.get('view')}: {exc}")
    return response


def _error_title(status_code):
    return {
        status.HTTP_401_UNAUTHORIZED: 'Authentication required',
        status.HTTP_403_FORBIDDEN: 'Permission denied',
        status.HTTP_404_NOT_FOUND: 'Not found',
        status.HTTP_405_METHOD_NOT_ALLOWED: 'Method not allowed',
    }.get(status_code, 'Request failed')

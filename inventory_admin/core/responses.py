"""
Response envelope shared by every endpoint.

Success: {"success": true, "data": ..., "message": "..."}
Failure: {"success": false, "error": "...", "message": "..."}
"""
from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data=None, message=None, status=http_status.HTTP_200_OK, **extra):
    """Wrap `data` in the success envelope"""
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    body.update(extra)
    return Response(body, status=status)


def error_response(error, message=None, status=http_status.HTTP_400_BAD_REQUEST, **extra):
    """Wrap an error in the failure envelope"""
    body = {'success': False, 'error': error}
    if message:
        body['message'] = message
    body.update(extra)
    return Response(body, status=status)


def validation_error_response(errors, error='Validation failed'):
    """400 with the field-keyed error map from a serializer"""
    return error_response(error, message=first_error_message(errors), errors=errors)


def first_error_message(errors):
    """First human-readable message out of a DRF error structure"""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error_message(value)
            if message:
                return message if field in ('non_field_errors', 'detail') else f"{field}: {message}"
        return None
    if isinstance(errors, (list, tuple)):
        for value in errors:
            message = first_error_message(value)
            if message:
                return message
        return None
    return str(errors) if errors else None

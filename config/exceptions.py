"""
Global exception handler for consistent API error responses.
Follows DRF convention and returns a uniform { "detail", "code" } body.
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import PermissionDenied, ValidationError as DjangoValidationError
from django.conf import settings

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns:
    { "detail": str, "code": str, "errors": dict (optional) }
    """
    response = exception_handler(exc, context)
    if response is not None:
        if response.status_code >= 500:
            request = context.get('request') if context else None
            logger.error(
                'API error %s on %s: %s',
                response.status_code,
                request.path if request else 'unknown',
                exc,
            )
        if isinstance(response.data, dict):
            data = response.data
            if 'detail' not in data:
                data = {'detail': _first_message(data), 'errors': data}
        else:
            data = {'detail': _first_message(response.data)}
        data.setdefault('code', _get_code(exc))
        response.data = data
        return response

    if isinstance(exc, PermissionDenied):
        return Response(
            {'detail': str(exc) or 'Permission denied', 'code': 'permission_denied'},
            status=status.HTTP_403_FORBIDDEN
        )
    if isinstance(exc, DjangoValidationError):
        return Response(
            {'detail': '; '.join(exc.messages), 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST
        )

    logger.exception('Unhandled exception: %s', exc)
    error_detail = 'An internal error occurred.'
    if settings.DEBUG:
        error_detail = f'An internal error occurred: {exc}'
    # Never expose stack traces to the client
    return Response(
        {'detail': error_detail, 'code': 'internal_error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _first_message(data):
    if isinstance(data, list):
        return _first_message(data[0]) if data else 'Error'
    if isinstance(data, dict):
        for key, value in data.items():
            message = _first_message(value)
            return message if key == 'non_field_errors' else f'{key}: {message}'
        return 'Error'
    return str(data)


def _get_code(exc):
    get_codes = getattr(exc, 'get_codes', None)
    if callable(get_codes):
        codes = get_codes()
        if isinstance(codes, str):
            return codes
    codes = {
        'AuthenticationFailed': 'invalid_credentials',
        'NotAuthenticated': 'not_authenticated',
        'NotFound': 'not_found',
        'PermissionDenied': 'permission_denied',
        'ValidationError': 'validation_error',
    }
    return codes.get(type(exc).__name__, 'error')

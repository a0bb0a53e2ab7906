"""
Handler de excepciones de la API.

Traduce las excepciones de dominio y de DRF a respuestas JSON con la forma
{"error": <tipo>, "message": <texto>}.
"""
import logging

from django.conf import settings
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.authentication.exceptions import TokenExpired

from .exceptions import DomainError

logger = logging.getLogger(__name__)


def _error_response(kind, message, status_code, **extra):
    body = {'error': kind, 'message': message}
    body.update(extra)
    return Response(body, status=status_code)


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail)


def _request_path(context):
    request = context.get('request')
    return getattr(request, 'path', '-')


def api_exception_handler(exc, context):
    """
    Handler registrado en REST_FRAMEWORK['EXCEPTION_HANDLER'].
    """
    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.error(f"Error interno en {_request_path(context)}: {exc.message}")
        return _error_response(exc.error_kind, exc.message, exc.status_code)

    if isinstance(exc, InvalidToken):
        return _error_response(
            'InvalidToken', 'Token inválido', status.HTTP_403_FORBIDDEN
        )

    if isinstance(exc, TokenExpired):
        return _error_response(
            'TokenExpired', str(exc.detail), status.HTTP_401_UNAUTHORIZED
        )

    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            response.data = {
                'error': 'ValidationError',
                'message': _first_message(exc.detail),
                'details': exc.detail,
            }
        elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
            response.status_code = status.HTTP_401_UNAUTHORIZED
            response.data = {'error': 'Unauthorized', 'message': str(exc.detail)}
        elif isinstance(exc, (exceptions.NotFound, Http404)):
            response.data = {'error': 'NotFound', 'message': 'Recurso no encontrado'}
        elif isinstance(exc, exceptions.PermissionDenied):
            response.data = {'error': 'Forbidden', 'message': str(exc.detail)}
        elif isinstance(exc, exceptions.APIException):
            response.data = {'error': exc.default_code, 'message': str(exc.detail)}
        return response

    logger.exception(f"Error no controlado en {_request_path(context)}")
    set_rollback()
    message = str(exc) if settings.DEBUG else 'Algo salió mal'
    return _error_response('Internal', message, status.HTTP_500_INTERNAL_SERVER_ERROR)

import structlog
from rest_framework import status
from rest_framework.response import Response

from ..errors import DomainError, ErrorCode

logger = structlog.get_logger(__name__)

# ErrorCode -> (HTTP статус, код в теле ответа)
ERROR_RESPONSES = {
    ErrorCode.TEAM_EXISTS: (status.HTTP_400_BAD_REQUEST, 'TEAM_EXISTS'),
    ErrorCode.TEAM_NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'NOT_FOUND'),
    ErrorCode.USER_NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'NOT_FOUND'),
    ErrorCode.PR_NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'NOT_FOUND'),
    ErrorCode.AUTHOR_MISSING: (status.HTTP_404_NOT_FOUND, 'NOT_FOUND'),
    ErrorCode.PR_EXISTS: (status.HTTP_409_CONFLICT, 'PR_EXISTS'),
    ErrorCode.PR_MERGED: (status.HTTP_409_CONFLICT, 'PR_MERGED'),
    ErrorCode.NOT_ASSIGNED: (status.HTTP_409_CONFLICT, 'NOT_ASSIGNED'),
    ErrorCode.NO_CANDIDATE: (status.HTTP_409_CONFLICT, 'NO_CANDIDATE'),
}


def error_response(code: str, message: str, http_status: int) -> Response:
    return Response({
        'error': {
            'code': code,
            'message': message
        }
    }, status=http_status)


def domain_error_response(exc: DomainError) -> Response:
    http_status, code = ERROR_RESPONSES[exc.code]
    return error_response(code, exc.message, http_status)


def validation_error_response(errors) -> Response:
    return error_response('VALIDATION_ERROR', _first_message(errors), status.HTTP_400_BAD_REQUEST)


def server_error_response() -> Response:
    logger.exception('unhandled_error')
    return error_response('SERVER_ERROR', 'Internal server error', status.HTTP_500_INTERNAL_SERVER_ERROR)


def _first_message(errors) -> str:
    """Сводит ошибки сериализатора к одной строке вида 'field: message'"""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = _first_message(value)
            return message if field == 'non_field_errors' else f'{field}: {message}'
    if isinstance(errors, list) and errors:
        return _first_message(errors[0])
    return str(errors)

import uuid

import structlog

REQUEST_ID_HEADER = 'X-Request-ID'

logger = structlog.get_logger(__name__)


class RequestContextMiddleware:
    """
    Привязывает request id, метод и путь ко всем событиям лога,
    записанным во время обработки запроса
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.path,
        )
        try:
            response = self.get_response(request)
            logger.debug('request_finished', status_code=response.status_code)
        finally:
            structlog.contextvars.clear_contextvars()

        response[REQUEST_ID_HEADER] = request_id
        return response

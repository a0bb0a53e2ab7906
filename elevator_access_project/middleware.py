import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """Middleware para logging de cada request con su estado y duración"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start_time = time.time()

        response = self.get_response(request)

        duration = time.time() - start_time
        user = getattr(request, 'user', None)
        user_label = user.email if user is not None and user.is_authenticated else 'anonymous'

        logger.info(
            f"{request.method} {request.path} -> {response.status_code} "
            f"({duration:.3f}s) user={user_label} "
            f"ip={request.META.get('HTTP_X_FORWARDED_FOR', request.META.get('REMOTE_ADDR', 'N/A'))}"
        )

        return response

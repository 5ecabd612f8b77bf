import logging
import time

logger = logging.getLogger(__name__)

MAX_LINE = 80


class RequestLogMiddleware:
    """Log one line per API request: ``METHOD /api/path STATUS in Nms``."""
    PREFIXES = ('/api/', '/healthz')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if not path.startswith(self.PREFIXES):
            return self.get_response(request)
        started = time.monotonic()
        response = self.get_response(request)
        duration = int((time.monotonic() - started) * 1000)
        line = f"{request.method} {path} {response.status_code} in {duration}ms"
        if len(line) > MAX_LINE:
            line = line[:MAX_LINE - 1] + "…"
        logger.info(line)
        return response

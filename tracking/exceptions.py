import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class InvalidTransition(exceptions.ValidationError):
    """A status change that the workflow table does not allow."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__({'status': [f'لا يمكن تغيير الحالة من {current} إلى {target}']})


_CODES = {
    status.HTTP_400_BAD_REQUEST: 'validation_error',
    status.HTTP_401_UNAUTHORIZED: 'not_authenticated',
    status.HTTP_403_FORBIDDEN: 'permission_denied',
    status.HTTP_404_NOT_FOUND: 'not_found',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'method_not_allowed',
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: 'too_large',
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: 'unsupported_media_type',
    status.HTTP_429_TOO_MANY_REQUESTS: 'throttled',
}


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception("unhandled error in %s", getattr(view, '__name__', view.__class__.__name__))
        return Response(
            {'ok': False, 'error': {'code': 'server_error', 'message': 'حدث خطأ داخلي في الخادم'}},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    # NotAuthenticated comes back as 403 when no authenticator sends a challenge header
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        resp.status_code = status.HTTP_401_UNAUTHORIZED

    code = _CODES.get(resp.status_code, 'api_error')
    error = {'code': code}
    data = resp.data
    if isinstance(exc, exceptions.ValidationError) and isinstance(data, dict):
        error['message'] = 'بيانات غير صالحة'
        error['fields'] = data
    elif isinstance(exc, exceptions.ValidationError) and isinstance(data, list):
        error['message'] = ' '.join(str(item) for item in data) or 'بيانات غير صالحة'
    elif isinstance(exc, Http404):
        error['message'] = 'غير موجود'
    elif isinstance(data, dict):
        error['message'] = data.get('detail') or data
    else:
        error['message'] = str(data)
    headers = {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if resp.has_header(k)}
    return Response({'ok': False, 'error': error}, status=resp.status_code, headers=headers)

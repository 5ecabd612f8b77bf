from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware

from ..authentication import user_for_token


class TokenAuthMiddleware(BaseMiddleware):
    """Bind ``scope['user']`` from a ``?token=<key>`` query parameter.

    Browsers cannot set headers on the socket handshake, so the DRF token
    travels in the query string.  Without a valid token the user set by
    the session middleware is left untouched.
    """

    async def __call__(self, scope, receive, send):
        params = parse_qs(scope.get('query_string', b'').decode('latin-1'))
        key = (params.get('token') or [None])[0]
        if key:
            user = await database_sync_to_async(user_for_token)(key)
            if user is not None:
                scope = dict(scope, user=user, token_verified=True)
        return await super().__call__(scope, receive, send)

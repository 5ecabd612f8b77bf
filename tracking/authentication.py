"""
Token authentication used by the REST API and the notification socket.

The ``Authorization: Token <key>`` header is handled by DRF; the
socket handshake cannot carry headers from a browser, so
:func:`user_for_token` resolves the same keys for the realtime layer.
"""
from __future__ import annotations

from rest_framework import authentication
from rest_framework.authtoken.models import Token


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication with a stable project import path."""

    keyword = 'Token'


def user_for_token(key: str | None):
    """Return the active user owning ``key`` or ``None``."""
    if not key or not isinstance(key, str):
        return None
    token = Token.objects.select_related('user').filter(key=key.strip()).first()
    if token is None or not token.user.is_active:
        return None
    return token.user

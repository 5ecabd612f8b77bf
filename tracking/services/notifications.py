"""
Push notifications to connected WebSocket clients.

The channel layer is the registry of open sockets: every consumer joins
``notifications.all`` on connect and ``notifications.role.<role>`` once
its token has been verified.  :class:`Notifier` sends to those groups.
Each push carries a sequence number and a timestamp so clients can
detect gaps; delivery is still best-effort and a failed send is only
logged.
"""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

GROUP_ALL = 'notifications.all'
EVENT_TYPE = 'notify.message'
SEQ_KEY = 'notifications:seq'


def role_group(role: str) -> str:
    return f'notifications.role.{role}'


def next_seq() -> int:
    cache.add(SEQ_KEY, 0, timeout=None)
    try:
        return cache.incr(SEQ_KEY)
    except ValueError:
        # key evicted between add and incr
        cache.set(SEQ_KEY, 1, timeout=None)
        return 1


def build_event(kind: str, data) -> dict:
    return {
        'type': EVENT_TYPE,
        'payload': {
            'type': kind,
            'data': data,
            'seq': next_seq(),
            'ts': timezone.now().isoformat(),
        },
    }


class Notifier:
    """Send typed pushes through a channel layer.

    The layer is injected; by default the one named by
    ``NOTIFICATION_CHANNEL_LAYER`` is used.
    """

    def __init__(self, channel_layer=None):
        self._layer = channel_layer

    @property
    def channel_layer(self):
        if self._layer is None:
            self._layer = get_channel_layer(getattr(settings, 'NOTIFICATION_CHANNEL_LAYER', 'default'))
        return self._layer

    def to_role(self, role: str, kind: str, data) -> bool:
        return self._send(role_group(role), kind, data)

    def to_all(self, kind: str, data) -> bool:
        return self._send(GROUP_ALL, kind, data)

    async def ato_role(self, role: str, kind: str, data) -> bool:
        return await self._asend(role_group(role), kind, data)

    async def ato_all(self, kind: str, data) -> bool:
        return await self._asend(GROUP_ALL, kind, data)

    def _send(self, group: str, kind: str, data) -> bool:
        layer = self.channel_layer
        if layer is None:
            logger.warning("no channel layer configured; dropping %s", kind)
            return False
        try:
            async_to_sync(layer.group_send)(group, build_event(kind, data))
        except Exception:
            logger.exception("failed to push %s to %s", kind, group)
            return False
        return True

    async def _asend(self, group: str, kind: str, data) -> bool:
        layer = self.channel_layer
        if layer is None:
            logger.warning("no channel layer configured; dropping %s", kind)
            return False
        try:
            await layer.group_send(group, build_event(kind, data))
        except Exception:
            logger.exception("failed to push %s to %s", kind, group)
            return False
        return True

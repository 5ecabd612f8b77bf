import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from ..authentication import user_for_token
from ..services.notifications import GROUP_ALL, role_group

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncWebsocketConsumer):
    """Fault report pushes.

    Every socket receives updates sent to everyone.  Role-targeted pushes
    (new reports go to technicians) only reach sockets whose identity was
    verified from a token, either ``?token=`` on connect or an
    ``{"type": "authenticate", "token": ...}`` message.  Any ``role`` or
    ``userId`` sent by the client is ignored.
    """

    async def connect(self):
        self.role_group = None
        self.user_id = None
        self.role = None
        await self.channel_layer.group_add(GROUP_ALL, self.channel_name)
        await self.accept()
        user = self.scope.get('user')
        if self.scope.get('token_verified') or getattr(user, 'is_authenticated', False):
            await self._bind(user)
        await self.send(json.dumps({'type': 'welcome', 'message': 'connected', 'role': self.role}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(GROUP_ALL, self.channel_name)
        if self.role_group:
            await self.channel_layer.group_discard(self.role_group, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return
        try:
            data = json.loads(text_data)
        except ValueError:
            logger.warning("dropping malformed socket message: %.60r", text_data)
            return
        if not isinstance(data, dict):
            logger.warning("dropping non-object socket message: %.60r", text_data)
            return

        kind = data.get('type')
        if kind == 'authenticate':
            user = await database_sync_to_async(user_for_token)(data.get('token'))
            if user is None:
                await self.send(json.dumps({'type': 'error', 'code': 4401, 'message': 'invalid_token'}))
                return
            await self._bind(user)
            await self.send(json.dumps({'type': 'authenticated', 'userId': user.id, 'role': user.role}))
        elif kind == 'ping':
            await self.send(json.dumps({'type': 'pong'}))
        else:
            logger.debug("ignoring socket message of type %r", kind)

    async def _bind(self, user):
        group = role_group(user.role)
        if self.role_group and self.role_group != group:
            await self.channel_layer.group_discard(self.role_group, self.channel_name)
        await self.channel_layer.group_add(group, self.channel_name)
        self.role_group = group
        self.user_id = user.id
        self.role = user.role

    async def notify_message(self, event):
        # event: {"type": "notify.message", "payload": {"type", "data", "seq", "ts"}}
        await self.send(json.dumps(event.get('payload', {}), ensure_ascii=False))

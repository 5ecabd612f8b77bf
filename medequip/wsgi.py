"""
WSGI config for the medequip project.

It exposes the WSGI callable as a module-level variable named ``application``.
WebSocket notifications need the ASGI entrypoint in ``medequip.asgi``.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'medequip.settings')

application = get_wsgi_application()

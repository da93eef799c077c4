"""
ASGI config for the Onconet project.

Plain HTTP only; the API has no websocket routes.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "onconet.settings")

application = get_asgi_application()

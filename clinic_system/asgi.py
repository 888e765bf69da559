"""
ASGI config for the clinic project.

Plain HTTP only; every endpoint is a synchronous request/response view.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic_system.settings")

application = get_asgi_application()

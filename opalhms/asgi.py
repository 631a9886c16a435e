"""
ASGI config for the opalhms project.

The API is plain HTTP; this entry point exists for ASGI servers such as
uvicorn or daphne.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "opalhms.settings")

application = get_asgi_application()

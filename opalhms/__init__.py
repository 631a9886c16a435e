"""Django project package for the OPAL hospital management backend."""
from .celery import app as celery_app

__all__ = ("celery_app",)

from django.apps import AppConfig


class RecordsConfig(AppConfig):
    name = 'records'
    verbose_name = 'Hospital records'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        from .backends import build_backends

        self.backends = build_backends()

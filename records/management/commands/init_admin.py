# records/management/commands/init_admin.py
from django.core.management.base import BaseCommand

from records.backends import get_backends
from records.services.setup import create_default_admin


class Command(BaseCommand):
    help = "Create the default administrator account (idempotent)."

    def handle(self, *args, **opts):
        b = get_backends()
        result = create_default_admin(b.identity, b.store)
        creds = result.get('credentials')
        if creds is None:
            self.stdout.write(self.style.SUCCESS(result['message']))
            return
        self.stdout.write(self.style.SUCCESS(f"ok: {creds['email']} (admin)"))
        self.stdout.write(self.style.WARNING(f"password: {creds['password']}  (change it after first login)"))

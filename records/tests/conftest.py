"""
Shared fixtures.

The identity provider, object store and mailer are replaced by in-memory
fakes installed into the app's Backends container; the record store is
the real one over the test database.
"""
import itertools

import pytest
from django.apps import apps
from django.core.cache import cache
from rest_framework.test import APIClient

from opalhms import celery_app
from records.backends import Backends
from records.exceptions import ProviderRejected
from records.policy import Role
from records.services.identity import CallerIdentity, Session
from records.services.notifications import Delivery, Notifier
from records.store import RecordStore


class FakeIdentity:
    def __init__(self):
        self.tokens = {}
        self.accounts = {}
        self.deleted = []
        self._seq = itertools.count(1)

    def _user(self, email, metadata, user_id=None):
        return CallerIdentity.from_provider_user({
            'id': user_id or f'user-{next(self._seq)}',
            'email': email,
            'user_metadata': metadata,
        })

    def issue(self, role, name='Test User', user_id=None, department=None):
        user = self._user(f'{role}@opal.test', {'role': role, 'name': name, 'department': department}, user_id)
        token = f'token-{user.id}'
        self.tokens[token] = user
        return token, user

    def resolve(self, token):
        return self.tokens.get(token)

    def create_user(self, email, password, metadata):
        if email in self.accounts:
            raise ProviderRejected('A user with this email address has already been registered')
        user = self._user(email, metadata)
        self.accounts[email] = (password, user)
        return user

    def delete_user(self, user_id):
        self.deleted.append(user_id)
        self.accounts = {e: (p, u) for e, (p, u) in self.accounts.items() if u.id != user_id}

    def sign_in(self, email, password):
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            return None
        user = account[1]
        token = f'session-{user.id}'
        self.tokens[token] = user
        return Session(access_token=token, refresh_token='refresh', expires_in=3600), user


class FakeFiles:
    def __init__(self):
        self.objects = {}
        self.removed = []
        self._seq = itertools.count(1)

    def upload(self, path, data, content_type):
        self.objects[path] = (data, content_type)

    def signed_url(self, path, expires_in):
        return f'https://files.opal.test/{path}?token={next(self._seq)}'

    def remove(self, paths):
        self.removed.extend(paths)
        for p in paths:
            self.objects.pop(p, None)


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.error = None

    def send(self, to, subject, html):
        if self.error:
            return Delivery(False, self.error)
        self.sent.append({'to': to, 'subject': subject, 'html': html})
        return Delivery(True, data={'id': f'msg-{len(self.sent)}'})


@pytest.fixture(autouse=True)
def _reset_throttles():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(scope='session', autouse=True)
def _eager_celery():
    previous = celery_app.conf.task_always_eager
    celery_app.conf.update(task_always_eager=True)
    yield
    celery_app.conf.update(task_always_eager=previous)


@pytest.fixture
def backends(db):
    config = apps.get_app_config('records')
    original = config.backends
    mailer = FakeMailer()
    config.backends = Backends(
        store=RecordStore(),
        identity=FakeIdentity(),
        files=FakeFiles(),
        mailer=mailer,
        notifier=Notifier(mailer),
    )
    yield config.backends
    config.backends = original


@pytest.fixture
def store(backends):
    return backends.store


@pytest.fixture
def client_for(backends):
    """``client_for('doctor')`` -> (APIClient with a bearer token, CallerIdentity)."""

    def make(role, **kwargs):
        token, user = backends.identity.issue(role, **kwargs)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return client, user

    return make


@pytest.fixture
def admin(client_for):
    return client_for(Role.ADMIN.value, name='Ada Admin')[0]


@pytest.fixture
def anon():
    return APIClient()


@pytest.fixture
def patient_record(store):
    record = {
        'id': 'pat-1',
        'mrn': 'MRN202512345',
        'firstName': 'Jane',
        'lastName': 'Doe',
        'phone': '555-0100',
        'status': 'active',
    }
    store.mset({'patient:pat-1': record, 'patient:mrn:MRN202512345': 'pat-1'})
    return record

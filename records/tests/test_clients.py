import pytest
import requests

from records.exceptions import DependencyError, ProviderRejected
from records.policy import Role
from records.services.files import SupabaseStorage
from records.services.identity import SupabaseIdentity


class FakeResponse:
    def __init__(self, status_code, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError('no json')
        return self._payload


class FakeHTTP:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


USER = {
    'id': 'u-1',
    'email': 'doc@opal.test',
    'user_metadata': {'role': 'doctor', 'firstName': 'Greg', 'lastName': 'House', 'department': 'Diagnostics'},
}


def identity(*responses):
    http = FakeHTTP(*responses)
    return SupabaseIdentity('https://sb.test/', 'service-key', 'anon-key', session=http), http


def test_resolve_reads_role_from_metadata():
    client, http = identity(FakeResponse(200, USER))
    caller = client.resolve('tok')
    assert caller.id == 'u-1'
    assert caller.role is Role.DOCTOR
    assert caller.name == 'Greg House'
    assert caller.department == 'Diagnostics'
    method, url, kwargs = http.calls[0]
    assert (method, url) == ('GET', 'https://sb.test/auth/v1/user')
    assert kwargs['headers']['Authorization'] == 'Bearer tok'


def test_resolve_rejected_token_is_none():
    client, _ = identity(FakeResponse(401, {'msg': 'invalid JWT'}))
    assert client.resolve('expired') is None


def test_unknown_role_metadata_resolves_without_role():
    client, _ = identity(FakeResponse(200, {**USER, 'user_metadata': {'role': 'janitor'}}))
    assert client.resolve('tok').role is None


@pytest.mark.parametrize('failure', [FakeResponse(503, text='unavailable'), requests.ConnectionError('refused')])
def test_provider_outage_is_dependency_error(failure):
    client, _ = identity(failure)
    with pytest.raises(DependencyError):
        client.resolve('tok')


def test_unconfigured_url_is_dependency_error():
    client = SupabaseIdentity('', 'service-key')
    with pytest.raises(DependencyError):
        client.resolve('tok')


def test_create_user_rejected():
    client, _ = identity(FakeResponse(422, {'msg': 'A user with this email address has already been registered'}))
    with pytest.raises(ProviderRejected) as e:
        client.create_user('doc@opal.test', 'pw123456', {'role': 'doctor'})
    assert 'already been registered' in str(e.value.detail)


def test_create_user_sends_metadata():
    client, http = identity(FakeResponse(200, USER))
    user = client.create_user('doc@opal.test', 'pw123456', USER['user_metadata'])
    assert user.id == 'u-1'
    body = http.calls[0][2]['json']
    assert body['email_confirm'] is True
    assert body['user_metadata']['role'] == 'doctor'


def test_delete_missing_user_is_quiet():
    client, _ = identity(FakeResponse(404, {'msg': 'User not found'}))
    client.delete_user('gone')


def test_sign_in():
    client, http = identity(FakeResponse(200, {
        'access_token': 'at', 'refresh_token': 'rt', 'expires_in': 3600, 'token_type': 'bearer', 'user': USER,
    }))
    session, user = client.sign_in('doc@opal.test', 'pw')
    assert session.as_dict()['access_token'] == 'at'
    assert user.role is Role.DOCTOR
    assert http.calls[0][2]['params'] == {'grant_type': 'password'}
    assert http.calls[0][2]['headers']['apikey'] == 'anon-key'


def test_sign_in_bad_credentials():
    client, _ = identity(FakeResponse(400, {'error_description': 'Invalid login credentials'}))
    assert client.sign_in('doc@opal.test', 'wrong') is None


def test_signed_url_is_made_absolute():
    http = FakeHTTP(FakeResponse(200, {'signedURL': '/object/sign/medical-reports/p/a.pdf?token=t'}))
    storage = SupabaseStorage('https://sb.test', 'key', 'medical-reports', session=http)
    url = storage.signed_url('p/a.pdf', 60)
    assert url == 'https://sb.test/storage/v1/object/sign/medical-reports/p/a.pdf?token=t'
    assert http.calls[0][2]['json'] == {'expiresIn': 60}


def test_upload_rejected_is_400():
    http = FakeHTTP(FakeResponse(400, {'message': 'The resource already exists'}))
    storage = SupabaseStorage('https://sb.test', 'key', 'medical-reports', session=http)
    with pytest.raises(ProviderRejected):
        storage.upload('p/a.pdf', b'x', 'application/pdf')

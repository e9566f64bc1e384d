import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest
import requests
from flask import Flask

from auth.client import IdentityServiceError, UsersServiceClient


class _Response:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError('no JSON')
        return self._body


class _Transport:
    """Replaces ``requests.request``; replies are queued per test."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _app(api_url='https://users.example.com/v1/', api_key='secret'):
    app = Flask(__name__)
    app.config.update(
        USERS_SERVICE_API_URL=api_url,
        USERS_SERVICE_API_KEY=api_key,
        USERS_SERVICE_TIMEOUT=5.0,
    )
    return app


@pytest.fixture
def transport(monkeypatch):
    transport = _Transport()
    monkeypatch.setattr(requests, 'request', transport)
    return transport


@pytest.fixture
def client():
    app = _app()
    client = UsersServiceClient(app)
    assert app.extensions['users_service'] is client
    with app.app_context():
        yield client


def test_redirect_url(client, transport):
    transport.responses.append(_Response(body={'redirect_url': 'https://accounts.google.com/o/oauth2'}))

    assert client.get_oauth_redirect_url('google') == 'https://accounts.google.com/o/oauth2'
    method, url, kwargs = transport.calls[0]
    assert (method, url) == ('GET', 'https://users.example.com/v1/oauth/google/redirect_url')
    assert kwargs['headers'] == {'x-api-key': 'secret'}
    assert kwargs['timeout'] == 5.0


def test_exchange_code_posts_code(client, transport):
    transport.responses.append(_Response(body={'session_token': 'tok'}))

    assert client.exchange_code_for_session_token('abc') == 'tok'
    method, url, kwargs = transport.calls[0]
    assert (method, url) == ('POST', 'https://users.example.com/v1/sessions')
    assert kwargs['json'] == {'code': 'abc'}


def test_current_user_sends_bearer_token(client, transport):
    transport.responses.append(_Response(body={'id': 'u1', 'email': 'a@b.c'}))

    assert client.get_current_user('tok') == {'id': 'u1', 'email': 'a@b.c'}
    assert transport.calls[0][2]['headers']['Authorization'] == 'Bearer tok'


@pytest.mark.parametrize('status', [401, 403, 404])
def test_current_user_for_invalid_session(client, transport, status):
    transport.responses.append(_Response(status_code=status))

    assert client.get_current_user('stale') is None


def test_server_error_raises(client, transport):
    transport.responses.append(_Response(status_code=503))

    with pytest.raises(IdentityServiceError):
        client.get_current_user('tok')


def test_transport_error_raises(client, transport):
    transport.responses.append(requests.ConnectionError('refused'))

    with pytest.raises(IdentityServiceError):
        client.get_oauth_redirect_url()


def test_non_json_body_raises(client, transport):
    transport.responses.append(_Response(body=None))

    with pytest.raises(IdentityServiceError):
        client.exchange_code_for_session_token('abc')


def test_missing_token_in_reply_raises(client, transport):
    transport.responses.append(_Response(body={}))

    with pytest.raises(IdentityServiceError):
        client.exchange_code_for_session_token('abc')


def test_delete_session_tolerates_unknown_session(client, transport):
    transport.responses.extend([_Response(status_code=204), _Response(status_code=404)])

    client.delete_session('tok')
    client.delete_session('gone')

    assert [call[0] for call in transport.calls] == ['DELETE', 'DELETE']


def test_unconfigured_client_raises(transport):
    app = _app(api_url=None)
    client = UsersServiceClient(app)

    with app.app_context(), pytest.raises(IdentityServiceError):
        client.get_current_user('tok')
    assert transport.calls == []


def test_each_app_uses_its_own_settings(transport):
    client = UsersServiceClient()
    first, second = _app('https://one.example.com', 'key-1'), _app('https://two.example.com', 'key-2')
    client.init_app(first)
    client.init_app(second)
    transport.responses.extend([_Response(status_code=401), _Response(status_code=401)])

    with first.app_context():
        client.get_current_user('tok')
    with second.app_context():
        client.get_current_user('tok')

    assert [(url, kwargs['headers']['x-api-key']) for _, url, kwargs in transport.calls] == [
        ('https://one.example.com/users/me', 'key-1'),
        ('https://two.example.com/users/me', 'key-2'),
    ]


class _CookieSettingHandler(BaseHTTPRequestHandler):
    """Users service that sets a cookie on login and records cookies it is sent."""

    received_cookies = []

    def _reply(self, body, headers=()):
        payload = json.dumps(body).encode()
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(payload)))
        for name, value in headers:
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(payload)

    def do_POST(self):
        self.rfile.read(int(self.headers.get('Content-Length', 0)))
        self._reply({'session_token': 'alice-token'}, [('Set-Cookie', 'svc_session=alice; Path=/')])

    def do_GET(self):
        self.received_cookies.append(self.headers.get('Cookie'))
        self._reply({'id': 'bob'})

    def log_message(self, format, *args):
        pass


@pytest.fixture
def cookie_setting_service():
    _CookieSettingHandler.received_cookies = []
    server = HTTPServer(('127.0.0.1', 0), _CookieSettingHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{server.server_port}', _CookieSettingHandler.received_cookies
    server.shutdown()
    server.server_close()


def test_reply_cookies_are_not_sent_on_later_calls(cookie_setting_service):
    api_url, received_cookies = cookie_setting_service
    app = _app(api_url=api_url)
    client = UsersServiceClient(app)

    with app.app_context():
        assert client.exchange_code_for_session_token('alice-code') == 'alice-token'
        assert client.get_current_user('bob-token') == {'id': 'bob'}

    assert received_cookies == [None]

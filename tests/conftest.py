import pytest
import requests

from ninja_api import NinjaClient, NinjaConfig


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else repr(body)

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Maps request paths to canned responses (or exceptions) and records every GET."""

    def __init__(self, host, routes):
        self.host = host
        self.routes = routes
        self.requests = []

    def get(self, url, headers=None):
        self.requests.append((url, headers))
        result = self.routes.get(url[len(self.host):])
        if result is None:
            return FakeResponse(404, text='not found')
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def config():
    return NinjaConfig(access_key_id='key-id', secret_access_key='secret', host='https://ninja.test')


@pytest.fixture
def make_client(config):
    def _make(routes):
        session = FakeSession(config.host, routes)
        return NinjaClient(config, session=session), session
    return _make


@pytest.fixture
def connection_error():
    return requests.ConnectionError('connection refused')

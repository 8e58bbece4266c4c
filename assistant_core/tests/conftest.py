import json

import pytest


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or (json.dumps(payload) if payload is not None else "")

    def json(self):
        if self._payload is None:
            raise json.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload


class FakeHttp:
    """替换 httpx.AsyncClient，记录请求并返回预设响应或抛出预设异常。"""

    def __init__(self):
        self.response = FakeResponse(200, {})
        self.error = None
        self.calls = []
        self.client_kwargs = []

    def respond(self, status_code=200, payload=None, text=""):
        self.response = FakeResponse(status_code, payload, text)

    def fail(self, error):
        self.error = error

    def client_class(self):
        http = self

        class Client:
            def __init__(self, *a, **kw):
                http.client_kwargs.append(kw)

            async def __aenter__(self):
                return self

            async def __aexit__(self, *a):
                return False

            async def post(self, url, **kw):
                http.calls.append({"url": url, **kw})
                if http.error is not None:
                    raise http.error
                return http.response

        return Client


@pytest.fixture
def fake_http(monkeypatch):
    http = FakeHttp()
    monkeypatch.setattr("httpx.AsyncClient", http.client_class())
    return http

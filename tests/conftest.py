from __future__ import annotations
import pytest
import requests


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, raw: str | None = None):
        self._payload = payload
        self.status_code = status_code
        self._raw = raw

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._raw is not None:
            raise ValueError("not json")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    """Подменяет requests.Session: отдаёт заготовленные ответы и пишет вызовы."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        resp = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(resp, Exception):
            raise resp
        return resp


@pytest.fixture()
def fake_session():
    return FakeSession

@pytest.fixture()
def fake_response():
    return FakeResponse

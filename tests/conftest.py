"""Pytest shared fixtures for reconciliation tests."""
import json
import pathlib
import sys
from types import SimpleNamespace

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from auth0_sync.core.management import ManagementClient, Session


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload=None, text=None):
        self.status_code = status_code
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text


class FakeTransport:
    """Records requests and replays queued responses in order."""

    def __init__(self):
        self.responses = []
        self.requests = []
        self.closed = False

    def queue(self, status_code: int = 200, payload=None, text=None):
        self.responses.append(StubResponse(status_code, payload, text))
        return self

    def fail_with(self, exc: Exception):
        self.responses.append(exc)
        return self

    def request(self, method, url, data=None, params=None, headers=None, timeout=None):
        self.requests.append(SimpleNamespace(
            method=method,
            url=url,
            body=json.loads(data) if data else None,
            params=params,
            headers=headers or {},
            timeout=timeout,
        ))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_live_network(monkeypatch):
    """Unit tests must never reach a real management API."""

    def _refuse(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected network access in tests: {method} {url}")

    monkeypatch.setattr(requests.Session, "request", _refuse)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def session():
    return Session(domain="tenant.example.com", access_token="test-token")


@pytest.fixture
def client(session, transport):
    return ManagementClient(session, transport=transport)


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "critical: marks tests covering credential handling and drift detection"
    )

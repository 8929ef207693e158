"""Unit tests for the single request/response exchange."""
import pytest
import requests

from auth0_sync.core.management import (
    DecodeError,
    ExchangeResult,
    ManagementClient,
    Outcome,
    TransportError,
    exchange,
)


def test_exchange_sets_auth_and_content_type(transport, session):
    transport.queue(201, {"client_id": "abc"})

    result = exchange(transport, "POST", "/api/v2/clients", session, body={"name": "billing"})

    sent = transport.requests[0]
    assert sent.url == "https://tenant.example.com/api/v2/clients"
    assert sent.headers["Authorization"] == "Bearer test-token"
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.body == {"name": "billing"}
    assert result.status_code == 201
    assert result.outcome is Outcome.SUCCESS
    assert result.decode() == {"client_id": "abc"}


def test_exchange_without_body_sends_none(transport, session):
    transport.queue(204)

    exchange(transport, "DELETE", "/api/v2/clients/abc", session)

    assert transport.requests[0].body is None


@pytest.mark.parametrize("status, outcome", [
    (200, Outcome.SUCCESS),
    (204, Outcome.SUCCESS),
    (404, Outcome.NOT_FOUND),
    (400, Outcome.ERROR),
    (409, Outcome.ERROR),
    (500, Outcome.ERROR),
])
def test_status_is_classified_not_raised(transport, session, status, outcome):
    transport.queue(status, text="raw")

    result = exchange(transport, "GET", "/api/v2/clients/abc", session)

    assert result.outcome is outcome
    assert result.body == "raw"


@pytest.mark.parametrize("exc", [
    requests.ConnectionError("refused"),
    requests.Timeout("slow"),
    requests.exceptions.SSLError("bad cert"),
])
def test_transport_failures_are_fatal(transport, session, exc):
    transport.fail_with(exc)

    with pytest.raises(TransportError) as excinfo:
        exchange(transport, "GET", "/api/v2/clients/abc", session)

    assert excinfo.value.cause is exc
    assert excinfo.value.__cause__ is exc


def test_decode_rejects_invalid_json():
    result = ExchangeResult(status_code=200, body="<html>", endpoint="https://x/api")
    with pytest.raises(DecodeError) as excinfo:
        result.decode()
    assert excinfo.value.body == "<html>"


def test_client_passes_query_params_and_timeout(session, transport):
    transport.queue(200, [])

    client = ManagementClient(session, transport=transport, timeout=2.5)
    client.exchange("GET", "/api/v2/client-grants", params={"client_id": "a b", "audience": "x"})

    sent = transport.requests[0]
    assert sent.params == {"client_id": "a b", "audience": "x"}
    assert sent.timeout == 2.5


def test_client_does_not_close_injected_transport(session, transport):
    with ManagementClient(session, transport=transport):
        pass
    assert transport.closed is False


def test_client_closes_own_transport(session, monkeypatch):
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(True))

    with ManagementClient(session):
        pass

    assert closed == [True]

"""Unit tests for client grant reconciliation."""
import pytest

from auth0_sync.core.management import (
    AccessGrant,
    AccessGrantReconciler,
    CreateRejected,
    DecodeError,
    DeleteRejected,
    DuplicateResourceError,
    InvalidStateError,
    ReadError,
    ResourceState,
    UpdateRejected,
    unmanaged,
)

DESIRED = AccessGrant(
    client_id="abc123",
    audience="https://api.example.com/",
    scope=("read:invoices", "write:invoices"),
)


@pytest.fixture
def grants(client):
    return AccessGrantReconciler(client)


@pytest.fixture
def managed():
    return ResourceState(identity="cgr_1", attributes=DESIRED)


def test_create_posts_grant_and_captures_id(grants, transport):
    transport.queue(201, {"id": "cgr_1", **DESIRED.to_payload()})

    state = grants.create(unmanaged(), DESIRED)

    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.url == "https://tenant.example.com/api/v2/client-grants"
    assert sent.body == {
        "client_id": "abc123",
        "audience": "https://api.example.com/",
        "scope": ["read:invoices", "write:invoices"],
    }
    assert state.identity == "cgr_1"
    assert state.secret == ""


def test_create_conflict_is_rejected(grants, transport):
    transport.queue(409, text='{"statusCode":409,"message":"A resource with the same identifier already exists"}')

    with pytest.raises(CreateRejected) as excinfo:
        grants.create(unmanaged(), DESIRED)

    assert excinfo.value.status_code == 409


def test_read_filters_by_client_and_audience(grants, transport, managed):
    transport.queue(200, [{"id": "cgr_1", "client_id": "abc123",
                           "audience": "https://api.example.com/", "scope": ["read:invoices"]}])

    state = grants.read(managed)

    sent = transport.requests[0]
    assert sent.method == "GET"
    assert sent.url == "https://tenant.example.com/api/v2/client-grants"
    assert sent.params == {"client_id": "abc123", "audience": "https://api.example.com/"}
    assert state.identity == "cgr_1"
    assert state.attributes.scope == ("read:invoices",)


@pytest.mark.critical
def test_read_with_no_match_clears_identity(grants, transport, managed):
    transport.queue(200, [])

    state = grants.read(managed)

    assert not state.managed


def test_read_accepts_any_2xx(grants, transport, managed):
    transport.queue(206, [{"id": "cgr_1", "client_id": "abc123",
                           "audience": "https://api.example.com/", "scope": ["read:invoices"]}])

    state = grants.read(managed)

    assert state.identity == "cgr_1"
    assert state.attributes.scope == ("read:invoices",)


@pytest.mark.critical
def test_read_with_two_matches_is_duplicate_error(grants, transport, managed):
    body = [
        {"id": "cgr_1", "client_id": "abc123", "audience": "https://api.example.com/", "scope": []},
        {"id": "cgr_2", "client_id": "abc123", "audience": "https://api.example.com/", "scope": []},
    ]
    transport.queue(200, body)

    with pytest.raises(DuplicateResourceError) as excinfo:
        grants.read(managed)

    assert excinfo.value.matches == 2
    assert managed.identity == "cgr_1"


def test_read_match_with_other_id_is_absence(grants, transport, managed):
    transport.queue(200, [{"id": "cgr_9", "client_id": "abc123",
                           "audience": "https://api.example.com/", "scope": []}])

    state = grants.read(managed)

    assert not state.managed


def test_read_failure_raises_read_error(grants, transport, managed):
    transport.queue(403, text='{"message":"Insufficient scope"}')

    with pytest.raises(ReadError) as excinfo:
        grants.read(managed)

    assert excinfo.value.status_code == 403
    assert excinfo.value.body == '{"message":"Insufficient scope"}'


def test_read_404_is_not_treated_as_absence(grants, transport, managed):
    """The collection filter answers [] for absence; a 404 is a failure."""
    transport.queue(404, text="Not Found")

    with pytest.raises(ReadError):
        grants.read(managed)


def test_read_non_array_is_decode_error(grants, transport, managed):
    transport.queue(200, {"id": "cgr_1"})

    with pytest.raises(DecodeError):
        grants.read(managed)


def test_read_requires_client_and_audience(grants, transport):
    with pytest.raises(InvalidStateError):
        grants.read(ResourceState(identity="cgr_1"))
    assert transport.requests == []


def test_update_patches_instance(grants, transport, managed):
    transport.queue(200, {"id": "cgr_1", "scope": ["read:invoices"]})
    desired = AccessGrant(client_id="abc123", audience="https://api.example.com/", scope=("read:invoices",))

    state = grants.update(managed, desired)

    sent = transport.requests[0]
    assert sent.method == "PATCH"
    assert sent.url == "https://tenant.example.com/api/v2/client-grants/cgr_1"
    assert sent.body["scope"] == ["read:invoices"]
    assert state.identity == "cgr_1"
    assert state.attributes == desired


def test_update_rejection(grants, transport, managed):
    transport.queue(400, text="bad scope")

    with pytest.raises(UpdateRejected):
        grants.update(managed, DESIRED)


def test_delete_204_clears_identity(grants, transport, managed):
    transport.queue(204)

    state = grants.delete(managed)

    assert transport.requests[0].url == "https://tenant.example.com/api/v2/client-grants/cgr_1"
    assert not state.managed


def test_delete_404_is_reported(grants, transport, managed):
    transport.queue(404, text="Not Found")

    with pytest.raises(DeleteRejected):
        grants.delete(managed)


def test_delete_on_unmanaged_is_refused(grants, transport):
    with pytest.raises(InvalidStateError):
        grants.delete(unmanaged(DESIRED))
    assert transport.requests == []

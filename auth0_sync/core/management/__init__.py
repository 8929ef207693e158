"""Management API client library.

This package reconciles remote application clients and client grants with
declared state.

Architecture:
- client.py: Authentication, session, and single request/response exchange
- models.py: Typed desired-state records and ResourceState
- reconciler.py: Create/read/update/delete lifecycle shared by resource kinds
- applications.py: Application client reconciler
- grants.py: Client grant reconciler
- exceptions.py: Typed exceptions for error handling

Usage:
    from auth0_sync.core.management import (
        ApplicationClient, ApplicationClientReconciler, CredentialInput,
        ManagementClient, authenticate, unmanaged,
    )

    session = authenticate("tenant.auth0.com", CredentialInput(client_id="id", client_secret="secret"))
    with ManagementClient(session) as client:
        clients = ApplicationClientReconciler(client)
        state = clients.create(unmanaged(), ApplicationClient(name="billing"))
        state = clients.read(state)
        if not state.managed:
            ...  # deleted out of band, recreate on next run
"""
from .client import (
    REQUEST_TIMEOUT,
    CredentialInput,
    ExchangeResult,
    ManagementClient,
    Outcome,
    Session,
    TokenResponse,
    authenticate,
    exchange,
)
from .exceptions import (
    ManagementError,
    ConfigurationError,
    InvalidStateError,
    TransportError,
    ManagementAPIError,
    AuthRejected,
    CreateRejected,
    ReadError,
    UpdateRejected,
    DeleteRejected,
    DecodeError,
    DuplicateResourceError,
)
from .models import AccessGrant, ApplicationClient, ResourceState
from .reconciler import ResourceReconciler, unmanaged
from .applications import ApplicationClientReconciler
from .grants import AccessGrantReconciler

__all__ = [
    # Client
    "REQUEST_TIMEOUT",
    "CredentialInput",
    "ExchangeResult",
    "ManagementClient",
    "Outcome",
    "Session",
    "TokenResponse",
    "authenticate",
    "exchange",

    # Exceptions
    "ManagementError",
    "ConfigurationError",
    "InvalidStateError",
    "TransportError",
    "ManagementAPIError",
    "AuthRejected",
    "CreateRejected",
    "ReadError",
    "UpdateRejected",
    "DeleteRejected",
    "DecodeError",
    "DuplicateResourceError",

    # Models
    "AccessGrant",
    "ApplicationClient",
    "ResourceState",

    # Reconcilers
    "ResourceReconciler",
    "ApplicationClientReconciler",
    "AccessGrantReconciler",
    "unmanaged",
]

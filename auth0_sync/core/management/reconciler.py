"""Generic create/read/update/delete lifecycle shared by every resource kind."""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from .client import ExchangeResult, ManagementClient, Outcome
from .exceptions import (
    CreateRejected,
    DecodeError,
    DeleteRejected,
    InvalidStateError,
    UpdateRejected,
)
from .models import ResourceState

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ResourceReconciler(ABC, Generic[T]):
    """Drives one remote resource kind toward declared state.

    Every operation takes the current ResourceState and returns the next one;
    nothing is kept on the reconciler between calls. Subclasses describe the
    endpoints, the identity field, and how a read is performed.
    """

    kind = "resource"
    collection_path = ""
    identity_field = "id"

    def __init__(self, client: ManagementClient):
        """Initialize reconciler.

        Args:
            client: Authenticated management client
        """
        self.client = client

    def instance_path(self, identity: str) -> str:
        return f"{self.collection_path}/{identity}"

    def to_payload(self, desired: T) -> Dict[str, Any]:
        return desired.to_payload()

    @abstractmethod
    def from_payload(self, data: Dict[str, Any]) -> T:
        """Decode one wire object into the resource type."""

    def create(self, state: ResourceState[T], desired: T) -> ResourceState[T]:
        """Create the remote object.

        Args:
            state: Current state, must be unmanaged
            desired: Declared attributes

        Returns:
            Managed state carrying the server-assigned identity

        Raises:
            InvalidStateError: State already managed
            CreateRejected: Status other than 201
            DecodeError: Response without an identity
        """
        self._require_unmanaged(state, "create")
        result = self.client.exchange("POST", self.collection_path, body=self.to_payload(desired))
        if result.status_code != 201:
            self._log_failure("create", result)
            raise CreateRejected(result.status_code, result.body, result.endpoint)

        data = self._decode_object(result)
        identity = data.get(self.identity_field)
        if not isinstance(identity, str) or not identity:
            raise DecodeError(
                f"Create response from {result.endpoint} has no {self.identity_field}", result.body
            )
        logger.info("Created %s %s", self.kind, identity)
        return ResourceState(
            identity=identity,
            attributes=desired,
            secret=self._secret_from(data),
        )

    def read(self, state: ResourceState[T]) -> ResourceState[T]:
        """Refresh state from the remote object.

        Remote absence is not an error: the returned state is unmanaged, and
        the caller decides whether to recreate.

        Raises:
            InvalidStateError: State not managed
            ReadError: Non-2xx status that does not mean absence
        """
        self._require_managed(state, "read")
        return self._read(state)

    @abstractmethod
    def _read(self, state: ResourceState[T]) -> ResourceState[T]:
        """Fetch the remote object for a managed state."""

    def update(self, state: ResourceState[T], desired: T) -> ResourceState[T]:
        """Patch the remote object with the declared attributes.

        Raises:
            InvalidStateError: State not managed
            UpdateRejected: Status other than 200
        """
        self._require_managed(state, "update")
        result = self.client.exchange(
            "PATCH", self.instance_path(state.identity), body=self.to_payload(desired)
        )
        if result.status_code != 200:
            self._log_failure("update", result)
            raise UpdateRejected(result.status_code, result.body, result.endpoint)

        self._decode_object(result)
        logger.info("Updated %s %s", self.kind, state.identity)
        return ResourceState(identity=state.identity, attributes=desired, secret=state.secret)

    def delete(self, state: ResourceState[T]) -> ResourceState[T]:
        """Delete the remote object. Only 204 counts as success.

        Raises:
            InvalidStateError: State not managed
            DeleteRejected: Any other status, 404 included
        """
        self._require_managed(state, "delete")
        result = self.client.exchange("DELETE", self.instance_path(state.identity))
        if result.status_code != 204:
            self._log_failure("delete", result)
            raise DeleteRejected(result.status_code, result.body, result.endpoint)

        logger.info("Deleted %s %s", self.kind, state.identity)
        return ResourceState()

    def _forget(self, state: ResourceState[T], reason: str) -> ResourceState[T]:
        logger.warning("%s %s no longer exists remotely (%s)", self.kind, state.identity, reason)
        return ResourceState()

    def _secret_from(self, data: Dict[str, Any]) -> str:
        return ""

    def _decode_object(self, result: ExchangeResult) -> Dict[str, Any]:
        data = result.decode()
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object from {result.endpoint}", result.body)
        return data

    def _require_managed(self, state: ResourceState[T], operation: str) -> None:
        if not state.managed:
            raise InvalidStateError(f"Cannot {operation} an unmanaged {self.kind}")

    def _require_unmanaged(self, state: ResourceState[T], operation: str) -> None:
        if state.managed:
            raise InvalidStateError(
                f"Cannot {operation} {self.kind} {state.identity}: already managed"
            )

    def _log_failure(self, operation: str, result: ExchangeResult) -> None:
        logger.error("Invalid status code %d during %s of %s", result.status_code, operation, self.kind)
        logger.debug("Response body: %s", result.body)

    def _is_absent(self, result: ExchangeResult) -> bool:
        return result.outcome is Outcome.NOT_FOUND


def unmanaged(attributes: Optional[T] = None) -> ResourceState[T]:
    """Initial state for a resource that has not been created yet."""
    return ResourceState(attributes=attributes)

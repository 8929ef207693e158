"""Application client reconciliation."""
from __future__ import annotations
from typing import Any, Dict

from .client import Outcome
from .exceptions import DecodeError, ReadError
from .models import ApplicationClient, ResourceState
from .reconciler import ResourceReconciler


class ApplicationClientReconciler(ResourceReconciler[ApplicationClient]):
    """Reconciler for /api/v2/clients, keyed by the server-assigned client_id."""

    kind = "client"
    collection_path = "/api/v2/clients"
    identity_field = "client_id"

    def from_payload(self, data: Dict[str, Any]) -> ApplicationClient:
        return ApplicationClient.from_payload(data)

    def _secret_from(self, data: Dict[str, Any]) -> str:
        return data.get("client_secret") or ""

    def _read(self, state: ResourceState[ApplicationClient]) -> ResourceState[ApplicationClient]:
        result = self.client.exchange("GET", self.instance_path(state.identity))
        if self._is_absent(result):
            return self._forget(state, "404")
        if result.outcome is not Outcome.SUCCESS:
            self._log_failure("read", result)
            raise ReadError(result.status_code, result.body, result.endpoint)

        data = self._decode_object(result)
        remote_id = data.get("client_id")
        if remote_id and remote_id != state.identity:
            raise DecodeError(
                f"Read of client {state.identity} returned client {remote_id}", result.body
            )
        return ResourceState(
            identity=state.identity,
            attributes=self.from_payload(data),
            secret=state.secret,
        )

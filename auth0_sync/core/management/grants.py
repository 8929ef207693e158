"""Client grant reconciliation.

The grant collection has no single-object GET, so reads filter the collection
by client and audience. At most one grant may exist per pair; more than one
is a consistency error the reconciler refuses to resolve.
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from .client import Outcome
from .exceptions import DecodeError, DuplicateResourceError, InvalidStateError, ReadError
from .models import AccessGrant, ResourceState
from .reconciler import ResourceReconciler

logger = logging.getLogger(__name__)


class AccessGrantReconciler(ResourceReconciler[AccessGrant]):
    """Reconciler for /api/v2/client-grants, keyed by the grant id."""

    kind = "grant"
    collection_path = "/api/v2/client-grants"
    identity_field = "id"

    def from_payload(self, data: Dict[str, Any]) -> AccessGrant:
        return AccessGrant.from_payload(data)

    def _read(self, state: ResourceState[AccessGrant]) -> ResourceState[AccessGrant]:
        grant = state.attributes
        if grant is None or not grant.client_id or not grant.audience:
            raise InvalidStateError(
                f"Cannot read grant {state.identity} without its client_id and audience"
            )

        result = self.client.exchange(
            "GET",
            self.collection_path,
            params={"client_id": grant.client_id, "audience": grant.audience},
        )
        if result.outcome is not Outcome.SUCCESS:
            self._log_failure("read", result)
            raise ReadError(result.status_code, result.body, result.endpoint)

        matches = result.decode()
        if not isinstance(matches, list):
            raise DecodeError(f"Expected a JSON array from {result.endpoint}", result.body)
        if len(matches) > 1:
            logger.error(
                "Found %d grants for client %s and audience %s",
                len(matches), grant.client_id, grant.audience,
            )
            raise DuplicateResourceError(len(matches), result.body)
        if not matches:
            return self._forget(state, "no matching grant")

        match = matches[0]
        if not isinstance(match, dict):
            raise DecodeError(f"Expected a grant object from {result.endpoint}", result.body)
        if match.get("id") != state.identity:
            # the pair is now held by a grant this state never created
            return self._forget(state, f"replaced by {match.get('id')}")

        return ResourceState(identity=state.identity, attributes=self.from_payload(match))

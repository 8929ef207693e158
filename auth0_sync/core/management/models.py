"""Typed desired-state records and the explicit per-resource state value."""
from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


def _strings(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class ApplicationClient:
    """User-declared attributes of a remote client application."""
    name: str
    description: str = ""
    is_first_party: bool = False
    is_token_endpoint_ip_header_trusted: bool = False
    cross_origin_auth: bool = False
    sso: bool = False
    token_endpoint_auth_method: str = ""
    grant_types: Tuple[str, ...] = ()
    app_type: str = ""
    custom_login_page_on: bool = False
    callbacks: Tuple[str, ...] = ()

    def to_payload(self) -> Dict[str, Any]:
        """Build the create/update body. Server-assigned fields are never included."""
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "is_first_party": self.is_first_party,
            "is_token_endpoint_ip_header_trusted": self.is_token_endpoint_ip_header_trusted,
            "cross_origin_auth": self.cross_origin_auth,
            "sso": self.sso,
            "grant_types": list(self.grant_types),
            "custom_login_page_on": self.custom_login_page_on,
            "callbacks": list(self.callbacks),
        }
        # omitted when unset so the server applies its own defaults
        if self.token_endpoint_auth_method:
            payload["token_endpoint_auth_method"] = self.token_endpoint_auth_method
        if self.app_type:
            payload["app_type"] = self.app_type
        return payload

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ApplicationClient":
        return cls(
            name=data.get("name") or "",
            description=data.get("description") or "",
            is_first_party=bool(data.get("is_first_party", False)),
            is_token_endpoint_ip_header_trusted=bool(data.get("is_token_endpoint_ip_header_trusted", False)),
            cross_origin_auth=bool(data.get("cross_origin_auth", False)),
            sso=bool(data.get("sso", False)),
            token_endpoint_auth_method=data.get("token_endpoint_auth_method") or "",
            grant_types=_strings(data.get("grant_types")),
            app_type=data.get("app_type") or "",
            custom_login_page_on=bool(data.get("custom_login_page_on", False)),
            callbacks=_strings(data.get("callbacks")),
        )


@dataclass(frozen=True)
class AccessGrant:
    """Grant of a scope set to a client for one audience."""
    client_id: str
    audience: str
    scope: Tuple[str, ...] = ()

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"scope": list(self.scope)}
        if self.client_id:
            payload["client_id"] = self.client_id
        if self.audience:
            payload["audience"] = self.audience
        return payload

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AccessGrant":
        return cls(
            client_id=data.get("client_id") or "",
            audience=data.get("audience") or "",
            scope=_strings(data.get("scope")),
        )


@dataclass(frozen=True)
class ResourceState(Generic[T]):
    """Reconciliation state of one resource instance.

    An empty identity means unmanaged: the resource has no remote counterpart
    from this engine's point of view.
    """
    identity: str = ""
    attributes: Optional[T] = None
    secret: str = field(default="", repr=False)

    @property
    def managed(self) -> bool:
        return bool(self.identity)

    def to_dict(self, include_secret: bool = False) -> Dict[str, Any]:
        """Plain representation for CLI output. The secret is opt-in."""
        data: Dict[str, Any] = {
            "id": self.identity,
            "managed": self.managed,
            "attributes": _attributes_dict(self.attributes),
        }
        if include_secret and self.secret:
            data["client_secret"] = self.secret
        return data


def _attributes_dict(attributes: Any) -> Optional[Dict[str, Any]]:
    if attributes is None:
        return None
    result = {}
    for item in fields(attributes):
        value = getattr(attributes, item.name)
        result[item.name] = list(value) if isinstance(value, tuple) else value
    return result

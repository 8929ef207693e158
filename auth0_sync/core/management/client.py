"""Low-level HTTP client for the management API.

Handles authentication, the per-invocation session, and JSON request/response
exchanges. Nothing here retries: every call performs exactly one round trip
and surfaces the first failure.
"""
from __future__ import annotations
import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .exceptions import AuthRejected, ConfigurationError, DecodeError, TransportError

REQUEST_TIMEOUT = 5

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenResponse:
    """Decoded body of the token endpoint. Carried through, never interpreted."""
    access_token: str = field(repr=False)
    expires_in: Optional[int] = None
    scope: str = ""
    token_type: str = ""


@dataclass(frozen=True)
class Session:
    """Authenticated context (domain + bearer token) for one invocation."""
    domain: str
    access_token: str = field(repr=False)
    token: Optional[TokenResponse] = field(default=None, repr=False, compare=False)

    def url(self, path: str) -> str:
        return f"https://{self.domain}{path}"


@dataclass(frozen=True)
class CredentialInput:
    """Either a pre-issued token, or a client id and secret pair."""
    access_token: str = field(default="", repr=False)
    client_id: str = ""
    client_secret: str = field(default="", repr=False)

    @property
    def has_token(self) -> bool:
        return bool(self.access_token)

    @property
    def usable(self) -> bool:
        return self.has_token or bool(self.client_id and self.client_secret)


class Outcome(enum.Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ExchangeResult:
    """Outcome of one request/response cycle, body read in full."""
    status_code: int
    body: str
    endpoint: str

    @property
    def outcome(self) -> Outcome:
        if 200 <= self.status_code < 300:
            return Outcome.SUCCESS
        if self.status_code == 404:
            return Outcome.NOT_FOUND
        return Outcome.ERROR

    def decode(self) -> Any:
        """Parse the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON from {self.endpoint}: {exc}", self.body) from exc


def _send(
    transport: requests.Session,
    method: str,
    url: str,
    headers: Dict[str, str],
    body: Optional[Any] = None,
    params: Optional[Dict[str, str]] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> ExchangeResult:
    """Perform a single request and read the whole response body."""
    try:
        resp = transport.request(
            method,
            url,
            data=json.dumps(body) if body is not None else None,
            params=params,
            headers=headers,
            timeout=timeout,
        )
        text = resp.text
    except requests.RequestException as exc:
        logger.error("Failed to contact management API (%s %s): %s", method, url, exc)
        raise TransportError(f"{method} {url} failed: {exc}", cause=exc) from exc
    return ExchangeResult(status_code=resp.status_code, body=text, endpoint=url)


def exchange(
    transport: requests.Session,
    method: str,
    path: str,
    session: Session,
    body: Optional[Any] = None,
    params: Optional[Dict[str, str]] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> ExchangeResult:
    """Execute one authenticated JSON request against the management API.

    The status is classified, never raised on: callers decide what a 404 or a
    409 means for their operation.

    Args:
        transport: HTTP session used for the round trip
        method: HTTP method
        path: API path (e.g., "/api/v2/clients")
        session: Authenticated session
        body: JSON-serializable payload, omitted when None
        params: Query parameters
        timeout: Transport timeout in seconds

    Returns:
        ExchangeResult with status, raw body and outcome

    Raises:
        TransportError: On any network or I/O failure
    """
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {session.access_token}",
    }
    result = _send(transport, method, session.url(path), headers, body, params, timeout)
    logger.debug("%s %s -> %s", method, path, result.status_code)
    return result


def _decode_token(result: ExchangeResult) -> TokenResponse:
    decoded = result.decode()
    if not isinstance(decoded, dict):
        raise DecodeError(f"Token response from {result.endpoint} is not a JSON object", result.body)
    access_token = decoded.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise DecodeError(f"Token response from {result.endpoint} has no access_token", result.body)
    expires_in = decoded.get("expires_in")
    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in if isinstance(expires_in, int) else None,
        scope=decoded.get("scope") or "",
        token_type=decoded.get("token_type") or "",
    )


def authenticate(
    domain: str,
    credentials: CredentialInput,
    transport: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> Session:
    """Resolve a bearer token for the management API.

    A pre-issued token is trusted as-is and no request is made. Otherwise a
    client credentials exchange is performed against ``https://{domain}/oauth/token``.

    Args:
        domain: Management API host (e.g., "tenant.auth0.com")
        credentials: Token, or client id and secret
        transport: HTTP session (a private one is used when omitted)
        timeout: Transport timeout in seconds

    Returns:
        Session with a non-empty access token

    Raises:
        ConfigurationError: No domain, or neither a token nor a full id/secret pair
        TransportError: Token endpoint unreachable
        AuthRejected: Token endpoint answered non-2xx
        DecodeError: 2xx answer without a usable access_token
    """
    if not domain:
        raise ConfigurationError("must supply the management API domain")
    if not credentials.usable:
        raise ConfigurationError("must supply a token, or both a client id and client secret")

    if credentials.has_token:
        logger.info("Skipping token request, token already present")
        return Session(domain=domain, access_token=credentials.access_token)

    url = f"https://{domain}/oauth/token"
    payload = {
        "grant_type": "client_credentials",
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
        "audience": f"https://{domain}/api/v2/",
    }
    headers = {"Content-Type": "application/json"}

    logger.info("Requesting management API token for client %s", credentials.client_id)
    if transport is None:
        with requests.Session() as own:
            result = _send(own, "POST", url, headers, payload, timeout=timeout)
    else:
        result = _send(transport, "POST", url, headers, payload, timeout=timeout)

    if result.outcome is not Outcome.SUCCESS:
        logger.error("Received HTTP %d from %s: %s", result.status_code, url, result.body)
        raise AuthRejected(result.status_code, result.body, url)

    token = _decode_token(result)
    return Session(domain=domain, access_token=token.access_token, token=token)


class ManagementClient:
    """Binds an authenticated session to an HTTP transport.

    Usage:
        session = authenticate("tenant.auth0.com", CredentialInput(client_id="id", client_secret="s"))
        with ManagementClient(session) as client:
            result = client.exchange("GET", "/api/v2/clients/abc")
    """

    def __init__(
        self,
        session: Session,
        transport: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """Initialize management client.

        Args:
            session: Authenticated session
            transport: HTTP session (a private one is created and owned when omitted)
            timeout: Transport timeout in seconds
        """
        self.session = session
        self.timeout = timeout
        self._owns_transport = transport is None
        self.transport = transport if transport is not None else requests.Session()

    def exchange(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> ExchangeResult:
        return exchange(self.transport, method, path, self.session, body, params, self.timeout)

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> "ManagementClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from auth0_sync.core.management.client import REQUEST_TIMEOUT, CredentialInput

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return float(REQUEST_TIMEOUT)
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"MANAGEMENT_API_TIMEOUT must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise RuntimeError("MANAGEMENT_API_TIMEOUT must be positive")
    return value


@dataclass
class ManagementSettings:
    """Management API configuration container."""
    domain: str = ""
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    access_token: str = field(default="", repr=False)
    request_timeout: float = float(REQUEST_TIMEOUT)
    log_level: str = "INFO"

    @property
    def credentials(self) -> CredentialInput:
        """Credential input for authenticate(); validated there, not here."""
        return CredentialInput(
            access_token=self.access_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
        )


def load_settings() -> ManagementSettings:
    """Load management API settings from environment and /run/secrets.

    Never performs network I/O. Missing domain or credentials are reported
    by authenticate() as ConfigurationError.
    """
    client_secret = _load_secret_from_file(
        "management_api_client_secret",
        "MANAGEMENT_API_CLIENT_SECRET",
    )
    access_token = _load_secret_from_file(
        "management_access_token",
        "MANAGEMENT_ACCESS_TOKEN",
    )

    settings = ManagementSettings(
        domain=os.environ.get("MANAGEMENT_API_DOMAIN", "").strip(),
        client_id=os.environ.get("MANAGEMENT_API_CLIENT_ID", "").strip(),
        client_secret=client_secret or "",
        access_token=access_token or "",
        request_timeout=_parse_timeout(os.environ.get("MANAGEMENT_API_TIMEOUT")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )

    auth_mode = "token" if settings.access_token else "client_credentials"
    logger.info("Settings loaded: domain=%s; auth=%s", settings.domain or "<unset>", auth_mode)
    return settings

"""Shared-secret authentication for inbound webhook deliveries."""

import hmac
import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_SECRET_HEADER = "x-webhook-secret"


def _header_value(headers: Mapping[str, str], name: str) -> str | None:
    # http.client.HTTPMessage is already case-insensitive; plain dicts are not
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


class SharedSecretAuthenticator:
    """Decides whether a request carries the configured shared secret.

    With ``enabled=False`` every request is accepted. That is an explicit
    insecure mode and must be opted into.
    """

    def __init__(
        self,
        secret: str | None,
        header_name: str = DEFAULT_SECRET_HEADER,
        enabled: bool = True,
    ):
        self.secret = secret or None
        self.header_name = header_name
        self.enabled = enabled

    def is_authorized(self, headers: Mapping[str, str]) -> bool:
        """Check the secret header against the configured secret.

        Both values must be non-empty and exactly equal.
        """
        if not self.enabled:
            return True

        if not self.secret:
            logger.debug("Rejecting request: no webhook secret configured")
            return False

        provided = _header_value(headers, self.header_name)
        if not provided:
            logger.debug(f"Rejecting request: missing {self.header_name} header")
            return False

        return hmac.compare_digest(provided.encode(), self.secret.encode())

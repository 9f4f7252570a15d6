"""Application service: admin sessions.

Every privileged request carries a server-issued token that expires; the
server never trusts a client-side "is admin" flag.
"""

from __future__ import annotations

import hmac
import logging
import secrets

from shopledger.domain.exceptions import UnauthorizedError
from shopledger.domain.repository.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 8 * 60 * 60


def _key(token: str) -> str:
    return f"admin-session:{token}"


class AdminSessionService:

    def __init__(
        self,
        store: KeyValueStore,
        admin_secret: str | None,
        ttl: float = DEFAULT_SESSION_TTL,
    ) -> None:
        self._store = store
        self._admin_secret = admin_secret
        self._ttl = ttl

    def issue(self, secret: str) -> str:
        """Exchange the configured admin secret for a session token."""
        if not self._admin_secret:
            raise UnauthorizedError("Admin access is not configured")
        if not secret or not hmac.compare_digest(secret.encode(), self._admin_secret.encode()):
            logger.warning("Rejected admin sign-in attempt")
            raise UnauthorizedError("Invalid admin credentials")
        token = secrets.token_urlsafe(32)
        self._store.put(_key(token), {"role": "admin"}, self._ttl)
        return token

    def validate(self, token: str | None) -> None:
        if not token or self._store.get(_key(token)) is None:
            raise UnauthorizedError("Admin session missing or expired")

    def revoke(self, token: str) -> None:
        self._store.delete(_key(token))

"""Application services: sign-in verification codes (2FA).

Codes live in an injected KeyValueStore. With the in-memory store a
restart forgets every pending code; "no code found" is reported exactly
like "expired" and the user requests a new one.
"""

from __future__ import annotations

import hmac
import logging
import secrets

from shopledger.domain.exceptions import ValidationError
from shopledger.domain.repository.key_value_store import KeyValueStore
from shopledger.domain.service.notification_dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

# No 0/O or 1/I, they are easy to misread.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 12
CODE_TTL_SECONDS = 10 * 60
EXPIRED = "Verification code has expired or was not found. Please request a new code."


def _key(user_id: str) -> str:
    return f"2fa:{user_id}"


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def format_code(code: str) -> str:
    """'ABCDEFGHJKLM' -> 'ABC-DEF-GHJ-KLM'."""
    return "-".join(code[i:i + 3] for i in range(0, len(code), 3))


class SendVerificationCodeHandler:

    def __init__(self, store: KeyValueStore, notifier: NotificationDispatcher) -> None:
        self._store = store
        self._notifier = notifier

    def handle(self, user_id: str, email: str) -> None:
        """Issue a fresh code (replacing any pending one) and email it.

        A failed send raises DependencyError; the code stays stored so a
        retry of the email alone is possible, but it is useless until sent.
        """
        if not user_id or not email:
            raise ValidationError("Email and userId are required")
        code = generate_code()
        self._store.put(_key(user_id), {"code": code, "email": email}, CODE_TTL_SECONDS)
        self._notifier.verification_code(email, format_code(code))
        logger.info("Verification code issued for user %s", user_id)


class VerifyCodeHandler:

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def handle(self, user_id: str, code: str) -> None:
        """Accept the code once; raises ValidationError otherwise."""
        if not user_id or not code:
            raise ValidationError("User ID and code are required")

        stored = self._store.get(_key(user_id))
        if stored is None:
            raise ValidationError(EXPIRED)

        submitted = code.replace("-", "").strip().upper()
        if not hmac.compare_digest(submitted.encode(), stored["code"].upper().encode()):
            raise ValidationError("Invalid verification code. Please try again.")

        self._store.delete(_key(user_id))

"""Sign-in client that resolves a console identity."""

from __future__ import annotations

import hmac
import logging
import uuid
from collections.abc import Callable

from govconsole.config import get_settings
from govconsole.domain.entities import Identity
from govconsole.infrastructure.security import create_session_token, verify_custom_token

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], None]


class AuthenticationError(RuntimeError):
    """Raised when a sign-in attempt is rejected."""


class AuthService:
    """Resolve an identity anonymously or from a pre-issued custom token.

    Each instance tracks a single signed-in identity, like a browser auth
    client, and notifies listeners whenever it changes.
    """

    def __init__(self, *, api_key: str | None = None) -> None:
        self._api_key = api_key
        self._identity: Identity | None = None
        self._session_token: str | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def current_identity(self) -> Identity | None:
        return self._identity

    @property
    def session_token(self) -> str | None:
        return self._session_token

    async def sign_in_anonymously(self) -> Identity:
        self._ensure_api_key()
        identity = Identity(user_id=uuid.uuid4().hex, is_anonymous=True)
        self._set_identity(identity)
        return identity

    async def sign_in_with_custom_token(self, token: str) -> Identity:
        self._ensure_api_key()
        try:
            user_id = verify_custom_token(token)
        except ValueError as exc:
            logger.warning("Rejected custom token sign-in: %s", exc)
            raise AuthenticationError("Invalid or expired custom token.") from exc
        identity = Identity(user_id=user_id, is_anonymous=False)
        self._set_identity(identity)
        return identity

    async def sign_out(self) -> None:
        self._set_identity(None)

    def on_identity_change(self, listener: IdentityListener) -> Callable[[], None]:
        """Register ``listener`` and return a function that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _ensure_api_key(self) -> None:
        expected = get_settings().project_api_key
        if not expected:
            return
        if not self._api_key or not hmac.compare_digest(self._api_key, expected):
            raise AuthenticationError("Invalid API key.")

    def _set_identity(self, identity: Identity | None) -> None:
        self._identity = identity
        self._session_token = create_session_token(identity) if identity else None
        for listener in list(self._listeners):
            listener(identity)


__all__ = ["AuthService", "AuthenticationError", "IdentityListener"]

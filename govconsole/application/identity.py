"""Resolve the console identity at startup and publish its changes."""

from __future__ import annotations

import logging
from collections.abc import Callable

from govconsole.domain.entities import Identity
from govconsole.infrastructure.auth_service import AuthenticationError, AuthService

logger = logging.getLogger(__name__)

UserIdListener = Callable[[str | None], None]

INITIALIZATION_ERROR_MESSAGE = "Failed to authenticate."


class InitializationError(RuntimeError):
    """Raised when the console cannot establish an identity."""


class IdentityBootstrap:
    """Sign in once and expose the resulting opaque user id.

    Until the first identity event arrives the identity is unresolved and
    dependents must not touch the store. A failed sign-in is terminal.
    """

    def __init__(self, auth: AuthService, *, initial_token: str | None = None) -> None:
        self._auth = auth
        self._initial_token = initial_token
        self._listeners: list[UserIdListener] = []
        self._unsubscribe_auth: Callable[[], None] | None = None
        self._identity: Identity | None = None
        self.resolved = False
        self.error: str | None = None

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def user_id(self) -> str | None:
        return self._identity.user_id if self._identity else None

    @property
    def session_token(self) -> str | None:
        return self._auth.session_token

    def subscribe(self, listener: UserIdListener) -> Callable[[], None]:
        """Register ``listener`` for user id changes and return its remover."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        if self._unsubscribe_auth is not None:
            return
        self._unsubscribe_auth = self._auth.on_identity_change(self._handle_identity_change)

        try:
            if self._initial_token:
                await self._auth.sign_in_with_custom_token(self._initial_token)
            else:
                await self._auth.sign_in_anonymously()
        except AuthenticationError as exc:
            logger.error("Console sign-in failed: %s", exc)
            self.error = INITIALIZATION_ERROR_MESSAGE
            self.resolved = True
            raise InitializationError(INITIALIZATION_ERROR_MESSAGE) from exc

    async def sign_out(self) -> None:
        await self._auth.sign_out()

    def close(self) -> None:
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None

    def _handle_identity_change(self, identity: Identity | None) -> None:
        self._identity = identity
        self.resolved = True
        user_id = self.user_id
        logger.debug("Console identity changed to %s", user_id)
        for listener in list(self._listeners):
            listener(user_id)


__all__ = [
    "INITIALIZATION_ERROR_MESSAGE",
    "IdentityBootstrap",
    "InitializationError",
    "UserIdListener",
]

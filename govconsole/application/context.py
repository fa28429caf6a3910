"""Shared connection state handed to the console components."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from govconsole.application.binding import rules_collection, violations_collection
from govconsole.application.identity import IdentityBootstrap
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore
from govconsole.infrastructure.gemini_client import RuleSuggestionService

NOT_READY_MESSAGE = "Store not initialized or user not authenticated."


@dataclass
class ConsoleContext:
    """Store, deployment and identity of one console session.

    Created once when the session starts; collection handles are re-derived
    from the current identity on every access.
    """

    store: DocumentStore
    deployment_id: str
    identity: IdentityBootstrap
    suggestion_service_factory: Callable[[], RuleSuggestionService] = RuleSuggestionService

    @property
    def user_id(self) -> str | None:
        return self.identity.user_id

    def rules_handle(self) -> CollectionHandle | None:
        return rules_collection(self.store, self.deployment_id, self.user_id)

    def violations_handle(self) -> CollectionHandle | None:
        return violations_collection(self.store, self.deployment_id, self.user_id)

    def suggestion_service(self) -> RuleSuggestionService:
        return self.suggestion_service_factory()


__all__ = ["ConsoleContext", "NOT_READY_MESSAGE"]

"""FastAPI dependency utilities."""

from collections.abc import Callable
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from govconsole.application.binding import rules_collection, violations_collection
from govconsole.config import get_settings
from govconsole.domain.entities import Identity
from govconsole.infrastructure.database import SessionLocal
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore
from govconsole.infrastructure.gemini_client import (
    RuleSuggestionService,
    SuggestionConfigurationError,
)
from govconsole.infrastructure.security import decode_session_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/anonymous")


@lru_cache
def get_document_store() -> DocumentStore:
    """Return the process wide document store."""

    return DocumentStore(SessionLocal)


def get_deployment_id() -> str:
    return get_settings().deployment_id


def get_api_key(x_api_key: str | None = Header(default=None)) -> str | None:
    return x_api_key


def resolve_identity(token: str) -> Identity:
    """Resolve the signed-in identity for the provided session token."""

    try:
        return decode_session_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_identity(token: str = Depends(oauth2_scheme)) -> Identity:
    return resolve_identity(token)


def get_rules_handle(
    identity: Identity = Depends(get_current_identity),
    store: DocumentStore = Depends(get_document_store),
    deployment_id: str = Depends(get_deployment_id),
) -> CollectionHandle:
    handle = rules_collection(store, deployment_id, identity.user_id)
    if handle is None:  # pragma: no cover - identity is always resolved here
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return handle


def get_violations_handle(
    identity: Identity = Depends(get_current_identity),
    store: DocumentStore = Depends(get_document_store),
    deployment_id: str = Depends(get_deployment_id),
) -> CollectionHandle:
    handle = violations_collection(store, deployment_id, identity.user_id)
    if handle is None:  # pragma: no cover - identity is always resolved here
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return handle


def get_suggestion_service_factory() -> Callable[[], RuleSuggestionService]:
    """Return the factory console sessions use to reach the suggestion endpoint."""

    return RuleSuggestionService


def get_suggestion_service(
    factory: Callable[[], RuleSuggestionService] = Depends(get_suggestion_service_factory),
) -> RuleSuggestionService:
    """Return a configured instance of :class:`RuleSuggestionService`."""

    try:
        return factory()
    except SuggestionConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

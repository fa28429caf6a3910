"""Rutas para consultar y registrar infracciones de reglas."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from govconsole.application.use_cases.violations import (
    delete_violation as delete_violation_uc,
    list_violations as list_violations_uc,
    record_violation as record_violation_uc,
    simulate_violation as simulate_violation_uc,
)
from govconsole.application.violation_view import ALL_PLATFORMS, derive_violation_rows
from govconsole.domain.entities import PLATFORMS, Identity, Violation
from govconsole.infrastructure.document_store import (
    CollectionHandle,
    DocumentStore,
    DocumentStoreError,
)
from govconsole.interfaces.api.dependencies import (
    get_current_identity,
    get_document_store,
    get_violations_handle,
)
from govconsole.interfaces.api.routes.rules import CONFIRMATION_REQUIRED
from govconsole.interfaces.api.schemas import ViolationCreate, ViolationRead

router = APIRouter(prefix="/violations", tags=["violations"])


def _to_read_model(violation: Violation) -> ViolationRead:
    return ViolationRead.model_validate(violation.to_document())


def _find_violation(
    store: DocumentStore, handle: CollectionHandle, violation_id: str
) -> Violation:
    for violation in list_violations_uc(store, handle):
        if violation.id == violation_id:
            return violation
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Violation not found")


@router.get("", response_model=list[ViolationRead])
def list_violations(
    platform: str = Query(default=ALL_PLATFORMS),
    user: str = Query(default=""),
    search: str = Query(default=""),
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_violations_handle),
) -> list[ViolationRead]:
    """Devuelve las infracciones filtradas, de la más reciente a la más antigua."""

    if platform != ALL_PLATFORMS and platform not in PLATFORMS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported platform '{platform}'",
        )
    try:
        violations = list_violations_uc(store, handle)
    except DocumentStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    rows = derive_violation_rows(violations, platform=platform, user=user, search=search)
    return [_to_read_model(violation) for violation in rows]


@router.post("", response_model=ViolationRead, status_code=status.HTTP_201_CREATED)
def record_violation(
    violation_in: ViolationCreate,
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_violations_handle),
) -> ViolationRead:
    """Registra una infracción informada por un detector externo."""

    try:
        violation_id = record_violation_uc(store, handle, violation_in.to_document())
        violation = _find_violation(store, handle, violation_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DocumentStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return _to_read_model(violation)


@router.post("/simulate", response_model=ViolationRead, status_code=status.HTTP_201_CREATED)
def simulate_violation(
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_violations_handle),
    identity: Identity = Depends(get_current_identity),
) -> ViolationRead:
    """Agrega una infracción de demostración para el usuario actual."""

    try:
        violation_id = simulate_violation_uc(store, handle, user_id=identity.user_id)
        violation = _find_violation(store, handle, violation_id)
    except DocumentStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return _to_read_model(violation)


@router.delete("/{violation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_violation(
    violation_id: str,
    confirm: bool = Query(default=False),
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_violations_handle),
) -> Response:
    """Elimina un registro de infracción."""

    if not confirm:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=CONFIRMATION_REQUIRED)
    try:
        delete_violation_uc(store, handle, violation_id)
    except DocumentStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)

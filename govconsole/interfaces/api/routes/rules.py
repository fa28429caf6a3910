"""Rutas para administrar reglas de gobierno de campañas."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from govconsole.application.use_cases.rules import (
    create_rule as create_rule_uc,
    delete_rule as delete_rule_uc,
    get_rule as get_rule_uc,
    list_rules as list_rules_uc,
    update_rule as update_rule_uc,
)
from govconsole.domain.entities import Identity, Rule
from govconsole.infrastructure.document_store import (
    CollectionHandle,
    DocumentStore,
    DocumentStoreError,
)
from govconsole.infrastructure.gemini_client import (
    RuleSuggestionService,
    SuggestionServiceError,
)
from govconsole.interfaces.api.dependencies import (
    get_current_identity,
    get_document_store,
    get_rules_handle,
    get_suggestion_service,
)
from govconsole.interfaces.api.schemas import (
    RuleRead,
    RuleSuggestionRequest,
    RuleSuggestionResponse,
    RuleWrite,
)

router = APIRouter(prefix="/rules", tags=["rules"])

CONFIRMATION_REQUIRED = "Deletion must be confirmed with confirm=true"


def _to_read_model(rule: Rule) -> RuleRead:
    return RuleRead.model_validate(rule.to_document())


def _store_unavailable(exc: DocumentStoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("", response_model=list[RuleRead])
def list_rules(
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_rules_handle),
) -> list[RuleRead]:
    """Devuelve las reglas del usuario en el orden del almacén."""

    try:
        rules = list_rules_uc(store, handle)
    except DocumentStoreError as exc:
        raise _store_unavailable(exc) from exc
    return [_to_read_model(rule) for rule in rules]


@router.post("", response_model=RuleRead, status_code=status.HTTP_201_CREATED)
def register_rule(
    rule_in: RuleWrite,
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_rules_handle),
    identity: Identity = Depends(get_current_identity),
) -> RuleRead:
    """Crea una nueva regla de gobierno."""

    try:
        rule_id = create_rule_uc(
            store, handle, rule_in.to_draft(), created_by=identity.user_id
        )
        rule = get_rule_uc(store, handle, rule_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DocumentStoreError as exc:
        raise _store_unavailable(exc) from exc
    return _to_read_model(rule)


@router.put("/{rule_id}", response_model=RuleRead)
def update_rule(
    rule_id: str,
    rule_in: RuleWrite,
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_rules_handle),
) -> RuleRead:
    """Actualiza una regla existente conservando sus datos de creación."""

    try:
        update_rule_uc(store, handle, rule_id, rule_in.to_draft())
        rule = get_rule_uc(store, handle, rule_id)
    except ValueError as exc:
        status_code = status.HTTP_400_BAD_REQUEST
        if str(exc) == "Rule not found":
            status_code = status.HTTP_404_NOT_FOUND
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    except DocumentStoreError as exc:
        raise _store_unavailable(exc) from exc
    return _to_read_model(rule)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(
    rule_id: str,
    confirm: bool = Query(default=False),
    store: DocumentStore = Depends(get_document_store),
    handle: CollectionHandle = Depends(get_rules_handle),
) -> Response:
    """Elimina una regla; la operación no se puede deshacer."""

    if not confirm:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=CONFIRMATION_REQUIRED)
    try:
        delete_rule_uc(store, handle, rule_id)
    except DocumentStoreError as exc:
        raise _store_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/suggestions", response_model=RuleSuggestionResponse)
async def suggest_rule_details(
    payload: RuleSuggestionRequest,
    service: RuleSuggestionService = Depends(get_suggestion_service),
    _: Identity = Depends(get_current_identity),
) -> RuleSuggestionResponse:
    """Solicita al modelo de lenguaje una condición y un mensaje para la regla."""

    try:
        suggestion = await service.suggest_rule_details(payload.name, payload.type)
    except SuggestionServiceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if not suggestion:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not get suggestions from LLM. Please try again.",
        )
    return RuleSuggestionResponse(**suggestion)

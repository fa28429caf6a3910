"""Use case for creating governance rules."""

from govconsole.domain.entities import RuleDraft
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore
from govconsole.utils import utc_now_iso
from .validators import ensure_well_formed_rule


def create_rule(
    store: DocumentStore,
    handle: CollectionHandle,
    draft: RuleDraft,
    *,
    created_by: str,
) -> str:
    """Store a new rule and return the id assigned by the store."""

    ensure_well_formed_rule(draft)
    return store.insert(
        handle,
        {
            **draft.to_document(),
            "createdAt": utc_now_iso(),
            "createdBy": created_by,
        },
    )

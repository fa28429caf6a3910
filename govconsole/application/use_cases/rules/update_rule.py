"""Use case for updating governance rules."""

from govconsole.domain.entities import RuleDraft
from govconsole.infrastructure.document_store import (
    CollectionHandle,
    DocumentNotFoundError,
    DocumentStore,
)
from govconsole.utils import utc_now_iso
from .validators import ensure_well_formed_rule


def update_rule(
    store: DocumentStore,
    handle: CollectionHandle,
    rule_id: str,
    draft: RuleDraft,
) -> None:
    """Apply ``draft`` as a partial update and refresh ``lastModifiedAt``.

    The id and the creation audit fields are never part of the update.
    """

    ensure_well_formed_rule(draft)
    try:
        store.update(
            handle,
            rule_id,
            {**draft.to_document(), "lastModifiedAt": utc_now_iso()},
        )
    except DocumentNotFoundError as exc:
        raise ValueError("Rule not found") from exc

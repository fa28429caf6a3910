"""Use case for retrieving a single governance rule."""

from govconsole.domain.entities import Rule
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore


def get_rule(store: DocumentStore, handle: CollectionHandle, rule_id: str) -> Rule:
    """Return the rule identified by ``rule_id`` or raise an error."""

    for document in store.snapshot(handle):
        if document["id"] == rule_id:
            return Rule.from_document(document)
    raise ValueError("Rule not found")

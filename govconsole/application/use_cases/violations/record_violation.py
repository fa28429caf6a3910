"""Use case for recording a detected violation."""

from collections.abc import Mapping
from typing import Any

from govconsole.domain.entities import VIOLATION_STATUS_DETECTED
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore
from govconsole.utils import parse_timestamp, utc_now_iso


def record_violation(
    store: DocumentStore,
    handle: CollectionHandle,
    violation: Mapping[str, Any],
) -> str:
    """Store ``violation`` and return its id.

    ``timestamp`` defaults to now and ``status`` to ``Detected``; a supplied
    timestamp must be an ISO instant.
    """

    document = {key: value for key, value in violation.items() if value is not None}
    timestamp = document.get("timestamp")
    if timestamp is None:
        document["timestamp"] = utc_now_iso()
    elif parse_timestamp(timestamp) is None:
        raise ValueError("Violation timestamp must be an ISO-8601 instant")
    document.setdefault("status", VIOLATION_STATUS_DETECTED)
    return store.insert(handle, document)

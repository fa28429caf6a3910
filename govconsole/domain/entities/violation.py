"""Domain entity representing a recorded rule breach."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

VIOLATION_STATUS_DETECTED = "Detected"
VIOLATION_STATUS_RESOLVED = "Resolved"

_FIELD_KEYS: dict[str, str] = {
    "timestamp": "timestamp",
    "rule_name": "ruleName",
    "user_id": "userId",
    "campaign_id": "campaignId",
    "platform": "platform",
    "field_name": "fieldName",
    "original_value": "originalValue",
    "suggested_correction": "suggestedCorrection",
    "status": "status",
}


@dataclass
class Violation:
    """A detected or simulated instance of a campaign attribute breaching a rule.

    Every attribute except ``id`` may be absent on stored documents; absent
    values are kept as ``None``. Unknown document keys are preserved in
    ``extra``.
    """

    id: str
    timestamp: str | None = None
    rule_name: str | None = None
    user_id: str | None = None
    campaign_id: str | None = None
    platform: str | None = None
    field_name: str | None = None
    original_value: Any = None
    suggested_correction: Any = None
    status: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Violation":
        known = {"id", *_FIELD_KEYS.values()}
        values = {attr: document.get(key) for attr, key in _FIELD_KEYS.items()}
        return cls(
            id=str(document["id"]),
            extra={key: value for key, value in document.items() if key not in known},
            **values,
        )

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {"id": self.id}
        for attr, key in _FIELD_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                document[key] = value
        document.update(self.extra)
        return document

    def iter_values(self) -> Iterator[Any]:
        """Yield every value present on the record, including ``id``."""

        return iter(self.to_document().values())


__all__ = [
    "VIOLATION_STATUS_DETECTED",
    "VIOLATION_STATUS_RESOLVED",
    "Violation",
]

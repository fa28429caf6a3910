"""Domain entity representing a campaign governance rule."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

RULE_TYPE_NAMING_CONVENTION = "Naming Convention"
RULE_TYPE_BUDGET_LIMIT = "Budget Limit"
RULE_TYPE_TARGETING_PARAMETER = "Targeting Parameter"
RULE_TYPE_CREATIVE_ASSET_REQUIREMENT = "Creative Asset Requirement"
RULE_TYPE_SCHEDULING_CONSTRAINT = "Scheduling Constraint"

RULE_TYPES: tuple[str, ...] = (
    RULE_TYPE_NAMING_CONVENTION,
    RULE_TYPE_BUDGET_LIMIT,
    RULE_TYPE_TARGETING_PARAMETER,
    RULE_TYPE_CREATIVE_ASSET_REQUIREMENT,
    RULE_TYPE_SCHEDULING_CONSTRAINT,
)

PLATFORMS: tuple[str, ...] = (
    "Facebook Ads",
    "Google Ads",
    "LinkedIn Ads",
    "YouTube Ads",
    "Instagram Ads",
    "Reddit Ads",
)

# Document keys written only by the editor; never taken from user input.
AUDIT_FIELDS: frozenset[str] = frozenset({"createdAt", "createdBy", "lastModifiedAt"})


@dataclass
class RuleDraft:
    """Editable form state for a single rule."""

    name: str = ""
    type: str = RULE_TYPE_NAMING_CONVENTION
    platform: str = PLATFORMS[0]
    condition: str = ""
    message: str = ""
    is_active: bool = True

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "platform": self.platform,
            "condition": self.condition,
            "message": self.message,
            "isActive": self.is_active,
        }

    def missing_required_fields(self) -> list[str]:
        """Return the labels of required inputs left blank."""

        missing: list[str] = []
        if not self.name.strip():
            missing.append("name")
        if not self.condition.strip():
            missing.append("condition")
        if not self.message.strip():
            missing.append("message")
        return missing


@dataclass
class Rule:
    """A governance constraint applied to advertising campaign metadata."""

    id: str
    name: str
    type: str
    platform: str
    condition: str
    message: str
    is_active: bool
    created_at: str | None = None
    created_by: str | None = None
    last_modified_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Rule":
        known = {
            "id",
            "name",
            "type",
            "platform",
            "condition",
            "message",
            "isActive",
            *AUDIT_FIELDS,
        }
        return cls(
            id=str(document["id"]),
            name=str(document.get("name") or ""),
            type=str(document.get("type") or ""),
            platform=str(document.get("platform") or ""),
            condition=str(document.get("condition") or ""),
            message=str(document.get("message") or ""),
            is_active=bool(document.get("isActive", False)),
            created_at=document.get("createdAt"),
            created_by=document.get("createdBy"),
            last_modified_at=document.get("lastModifiedAt"),
            extra={key: value for key, value in document.items() if key not in known},
        )

    def to_draft(self) -> RuleDraft:
        return RuleDraft(
            name=self.name,
            type=self.type,
            platform=self.platform,
            condition=self.condition,
            message=self.message,
            is_active=self.is_active,
        )

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {"id": self.id, **self.to_draft().to_document()}
        if self.created_at is not None:
            document["createdAt"] = self.created_at
        if self.created_by is not None:
            document["createdBy"] = self.created_by
        if self.last_modified_at is not None:
            document["lastModifiedAt"] = self.last_modified_at
        document.update(self.extra)
        return document


__all__ = [
    "AUDIT_FIELDS",
    "PLATFORMS",
    "RULE_TYPES",
    "RULE_TYPE_BUDGET_LIMIT",
    "RULE_TYPE_CREATIVE_ASSET_REQUIREMENT",
    "RULE_TYPE_NAMING_CONVENTION",
    "RULE_TYPE_SCHEDULING_CONSTRAINT",
    "RULE_TYPE_TARGETING_PARAMETER",
    "Rule",
    "RuleDraft",
]

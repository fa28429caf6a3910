"""Domain entities exposed by the application."""

from .identity import Identity
from .rule import (
    AUDIT_FIELDS,
    PLATFORMS,
    RULE_TYPES,
    RULE_TYPE_BUDGET_LIMIT,
    RULE_TYPE_CREATIVE_ASSET_REQUIREMENT,
    RULE_TYPE_NAMING_CONVENTION,
    RULE_TYPE_SCHEDULING_CONSTRAINT,
    RULE_TYPE_TARGETING_PARAMETER,
    Rule,
    RuleDraft,
)
from .violation import (
    VIOLATION_STATUS_DETECTED,
    VIOLATION_STATUS_RESOLVED,
    Violation,
)

__all__ = [
    "AUDIT_FIELDS",
    "Identity",
    "PLATFORMS",
    "RULE_TYPES",
    "RULE_TYPE_BUDGET_LIMIT",
    "RULE_TYPE_CREATIVE_ASSET_REQUIREMENT",
    "RULE_TYPE_NAMING_CONVENTION",
    "RULE_TYPE_SCHEDULING_CONSTRAINT",
    "RULE_TYPE_TARGETING_PARAMETER",
    "Rule",
    "RuleDraft",
    "VIOLATION_STATUS_DETECTED",
    "VIOLATION_STATUS_RESOLVED",
    "Violation",
]

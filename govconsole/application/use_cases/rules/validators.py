"""Validation helpers for rule use cases."""

from govconsole.domain.entities import PLATFORMS, RULE_TYPES, RuleDraft


def ensure_well_formed_rule(draft: RuleDraft) -> None:
    """Validate the user input of ``draft``; conditions are not parsed."""

    if not draft.name.strip():
        raise ValueError("Rule name is required")
    if not draft.condition.strip():
        raise ValueError("Rule condition is required")
    if draft.type not in RULE_TYPES:
        raise ValueError(f"Unsupported rule type '{draft.type}'")
    if draft.platform not in PLATFORMS:
        raise ValueError(f"Unsupported platform '{draft.platform}'")


__all__ = ["ensure_well_formed_rule"]

"""Use case for adding demonstration violations."""

from __future__ import annotations

import random
import string
from typing import Any

from govconsole.domain.entities import VIOLATION_STATUS_DETECTED
from govconsole.infrastructure.document_store import CollectionHandle, DocumentStore
from govconsole.utils import utc_now_iso
from .record_violation import record_violation

SIMULATED_PLATFORMS: tuple[str, ...] = ("Facebook Ads", "Google Ads", "LinkedIn Ads")
SIMULATED_FIELDS: tuple[str, ...] = ("Campaign Name", "Budget", "Targeting Age")

_CAMPAIGN_ALPHABET = string.ascii_uppercase + string.digits


def build_simulated_violation(user_id: str, rng: random.Random | None = None) -> dict[str, Any]:
    """Return a randomized ``Detected`` violation attributed to ``user_id``."""

    rng = rng or random.Random()
    campaign_suffix = "".join(rng.choice(_CAMPAIGN_ALPHABET) for _ in range(6))
    return {
        "timestamp": utc_now_iso(),
        "ruleName": f"Simulated Rule {rng.randrange(100)}",
        "userId": user_id,
        "campaignId": f"CMP-{campaign_suffix}",
        "platform": rng.choice(SIMULATED_PLATFORMS),
        "fieldName": rng.choice(SIMULATED_FIELDS),
        "originalValue": "Invalid Value",
        "suggestedCorrection": "Please correct the value.",
        "status": VIOLATION_STATUS_DETECTED,
    }


def simulate_violation(
    store: DocumentStore,
    handle: CollectionHandle,
    *,
    user_id: str,
    rng: random.Random | None = None,
) -> str:
    """Write a simulated violation through the regular recording path."""

    return record_violation(store, handle, build_simulated_violation(user_id, rng))


__all__ = [
    "SIMULATED_FIELDS",
    "SIMULATED_PLATFORMS",
    "build_simulated_violation",
    "simulate_violation",
]

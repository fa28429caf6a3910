"""Filtered, reverse-chronological view over the synced violation list."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from datetime import datetime, timezone
from functools import partial
from typing import Any

from anyio import to_thread

from govconsole.application.context import NOT_READY_MESSAGE, ConsoleContext
from govconsole.application.live_sync import LiveCollection
from govconsole.application.use_cases.violations import simulate_violation
from govconsole.domain.entities import PLATFORMS, Violation
from govconsole.infrastructure.document_store import DocumentStoreError
from govconsole.utils import parse_timestamp

logger = logging.getLogger(__name__)

ALL_PLATFORMS = "All"
NO_VIOLATIONS_TEXT = "No violations found."
FETCH_ERROR_MESSAGE = "Error fetching violations."

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def matches_platform(violation: Violation, platform: str) -> bool:
    return platform == ALL_PLATFORMS or violation.platform == platform


def matches_user(violation: Violation, user_filter: str) -> bool:
    """Case-insensitive substring match against ``userId``.

    Records without a ``userId`` never match a non-empty filter.
    """

    if not user_filter:
        return True
    if not isinstance(violation.user_id, str):
        return False
    return user_filter.lower() in violation.user_id.lower()


def matches_search(violation: Violation, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return any(needle in _stringify(value).lower() for value in violation.iter_values())


def filter_violations(
    violations: Iterable[Violation],
    *,
    platform: str = ALL_PLATFORMS,
    user: str = "",
    search: str = "",
) -> list[Violation]:
    return [
        violation
        for violation in violations
        if matches_platform(violation, platform)
        and matches_user(violation, user)
        and matches_search(violation, search)
    ]


def _timestamp_key(violation: Violation) -> tuple[bool, datetime]:
    parsed = parse_timestamp(violation.timestamp)
    if parsed is None:
        return (False, _OLDEST)
    return (True, parsed)


def sort_violations(violations: Iterable[Violation]) -> list[Violation]:
    """Most recent first; ties keep their relative order.

    Records whose timestamp is missing or unparseable go last.
    """

    return sorted(violations, key=_timestamp_key, reverse=True)


def derive_violation_rows(
    violations: Iterable[Violation],
    *,
    platform: str = ALL_PLATFORMS,
    user: str = "",
    search: str = "",
) -> list[Violation]:
    return sort_violations(
        filter_violations(violations, platform=platform, user=user, search=search)
    )


class ViolationView:
    """Filter inputs plus the synced violation list of one console session."""

    def __init__(self, context: ConsoleContext, violations: LiveCollection[Violation]) -> None:
        self._context = context
        self._violations = violations
        self.platform_filter = ALL_PLATFORMS
        self.user_filter = ""
        self.search_term = ""
        self.message = ""
        violations.add_listener(self._on_collection_change)

    def set_filters(
        self,
        *,
        platform: str | None = None,
        user: str | None = None,
        search: str | None = None,
    ) -> None:
        if platform is not None:
            if platform != ALL_PLATFORMS and platform not in PLATFORMS:
                raise ValueError(f"Unsupported platform '{platform}'")
            self.platform_filter = platform
        if user is not None:
            self.user_filter = user
        if search is not None:
            self.search_term = search

    def rows(self) -> list[Violation]:
        return derive_violation_rows(
            self._violations.items,
            platform=self.platform_filter,
            user=self.user_filter,
            search=self.search_term,
        )

    async def add_simulated_violation(self, rng: random.Random | None = None) -> str | None:
        """Write a randomized ``Detected`` violation for the current user."""

        handle = self._context.violations_handle()
        user_id = self._context.user_id
        if handle is None or user_id is None:
            self.message = NOT_READY_MESSAGE
            return None

        try:
            violation_id = await to_thread.run_sync(
                partial(
                    simulate_violation,
                    self._context.store,
                    handle,
                    user_id=user_id,
                    rng=rng,
                )
            )
        except (ValueError, DocumentStoreError) as exc:
            logger.error("Error adding simulated violation: %s", exc)
            self.message = f"Error: {exc}"
            return None

        self.message = "Simulated violation added!"
        return violation_id

    def render(self) -> dict[str, Any]:
        rows = self.rows()
        return {
            "message": self.message,
            "filters": {
                "platform": self.platform_filter,
                "user": self.user_filter,
                "search": self.search_term,
            },
            "platforms": [ALL_PLATFORMS, *PLATFORMS],
            "rows": [violation.to_document() for violation in rows],
            "emptyText": None if rows else NO_VIOLATIONS_TEXT,
        }

    def _on_collection_change(self) -> None:
        if self._violations.error:
            self.message = self._violations.error


__all__ = [
    "ALL_PLATFORMS",
    "FETCH_ERROR_MESSAGE",
    "NO_VIOLATIONS_TEXT",
    "ViolationView",
    "derive_violation_rows",
    "filter_violations",
    "matches_platform",
    "matches_search",
    "matches_user",
    "sort_violations",
]

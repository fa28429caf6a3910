"""Tests for violation filtering, ordering and the violations tab."""

from __future__ import annotations

import asyncio
import random
from datetime import timedelta

import pytest

from govconsole.application.context import NOT_READY_MESSAGE, ConsoleContext
from govconsole.application.identity import IdentityBootstrap
from govconsole.application.shell import ConsoleShell
from govconsole.application.use_cases.violations import build_simulated_violation
from govconsole.application.violation_view import (
    NO_VIOLATIONS_TEXT,
    derive_violation_rows,
    filter_violations,
    sort_violations,
)
from govconsole.domain.entities import Violation
from govconsole.infrastructure.auth_service import AuthService
from govconsole.utils import isoformat_utc, utc_now

NOW = utc_now()


def _minutes_ago(minutes: int) -> str:
    return isoformat_utc(NOW - timedelta(minutes=minutes))


def _violation(violation_id: str, **values) -> Violation:
    return Violation.from_document({"id": violation_id, **values})


@pytest.fixture()
def violations() -> list[Violation]:
    return [
        _violation(
            "v1",
            timestamp=_minutes_ago(2),
            ruleName="Budget Limit",
            userId="alice-01",
            campaignId="CMP-ABC123",
            platform="Google Ads",
            fieldName="Budget",
            originalValue=5000,
            status="Detected",
        ),
        _violation(
            "v2",
            timestamp=_minutes_ago(5),
            ruleName="Naming",
            userId="bob-02",
            campaignId="CMP-XYZ789",
            platform="Facebook Ads",
            fieldName="Campaign Name",
            originalValue="bad name",
            status="Detected",
        ),
        _violation(
            "v3",
            timestamp=_minutes_ago(1),
            ruleName="Targeting",
            userId="ALICE-03",
            campaignId="LEGACY-1",
            platform="Google Ads",
            fieldName="Targeting Age",
            originalValue=False,
            status="Resolved",
        ),
    ]


def test_rows_are_sorted_most_recent_first(violations) -> None:
    assert [v.id for v in sort_violations(violations)] == ["v3", "v1", "v2"]


def test_missing_or_invalid_timestamps_sort_last(violations) -> None:
    undated = _violation("v4", ruleName="Undated")
    broken = _violation("v5", ruleName="Broken", timestamp="yesterday")

    rows = sort_violations([undated, *violations, broken])

    assert [v.id for v in rows] == ["v3", "v1", "v2", "v4", "v5"]


def test_equal_timestamps_keep_their_input_order(violations) -> None:
    moment = _minutes_ago(4)
    first = _violation("t1", timestamp=moment, platform="Google Ads", campaignId="CMP-1")
    second = _violation("t2", timestamp=moment, platform="Google Ads", campaignId="CMP-2")

    assert [v.id for v in sort_violations([first, second])] == ["t1", "t2"]
    assert [v.id for v in sort_violations([second, first])] == ["t2", "t1"]

    rows = derive_violation_rows([second, *violations, first], platform="Google Ads")
    assert [v.id for v in rows] == ["v3", "v1", "t2", "t1"]


def test_platform_and_search_filters_combine(violations) -> None:
    rows = derive_violation_rows(violations, platform="Google Ads", search="CMP-")

    assert [v.id for v in rows] == ["v1"]


def test_user_filter_is_a_case_insensitive_substring(violations) -> None:
    rows = derive_violation_rows(violations, user="alice")

    assert [v.id for v in rows] == ["v3", "v1"]


def test_records_without_user_never_match_a_user_filter(violations) -> None:
    anonymous = _violation("v4", timestamp=_minutes_ago(3), ruleName="No owner")

    assert [v.id for v in filter_violations([anonymous, *violations], user="a")] == [
        "v1",
        "v3",
    ]
    assert len(filter_violations([anonymous, *violations])) == 4


def test_search_matches_any_rendered_value(violations) -> None:
    assert [v.id for v in filter_violations(violations, search="5000")] == ["v1"]
    assert [v.id for v in filter_violations(violations, search="FALSE")] == ["v3"]
    assert [v.id for v in filter_violations(violations, search="v2")] == ["v2"]


def test_filtering_is_idempotent(violations) -> None:
    options = {"platform": "Google Ads", "user": "alice", "search": "detected"}
    once = filter_violations(violations, **options)

    assert filter_violations(once, **options) == once


def test_simulated_violation_shape() -> None:
    document = build_simulated_violation("user-1", random.Random(7))

    assert document["userId"] == "user-1"
    assert document["status"] == "Detected"
    assert document["campaignId"].startswith("CMP-")
    assert len(document["campaignId"]) == len("CMP-") + 6
    assert document["ruleName"].startswith("Simulated Rule ")
    assert document["platform"] in ("Facebook Ads", "Google Ads", "LinkedIn Ads")
    assert document["fieldName"] in ("Campaign Name", "Budget", "Targeting Age")
    assert document["originalValue"] == "Invalid Value"
    assert document["suggestedCorrection"] == "Please correct the value."


def _build_shell(store) -> ConsoleShell:
    return ConsoleShell(
        ConsoleContext(store=store, deployment_id="test-app", identity=IdentityBootstrap(AuthService()))
    )


@pytest.mark.anyio
async def test_simulating_adds_a_row_for_the_current_user(store) -> None:
    shell = _build_shell(store)
    await shell.start()
    shell.select_tab("violations")
    view = shell.violation_view
    assert shell.render()["view"]["emptyText"] == NO_VIOLATIONS_TEXT

    violation_id = await view.add_simulated_violation(random.Random(3))
    for _ in range(5):
        await asyncio.sleep(0)

    assert view.message == "Simulated violation added!"
    [row] = shell.render()["view"]["rows"]
    assert row["id"] == violation_id
    assert row["userId"] == shell.context.user_id
    await shell.close()


@pytest.mark.anyio
async def test_simulating_before_sign_in_reports_not_ready(store) -> None:
    view = _build_shell(store).violation_view

    assert await view.add_simulated_violation() is None
    assert view.message == NOT_READY_MESSAGE


def test_unknown_platform_filter_is_rejected(store) -> None:
    view = _build_shell(store).violation_view

    with pytest.raises(ValueError):
        view.set_filters(platform="MySpace Ads")
    view.set_filters(platform="Reddit Ads", user="bob")
    assert view.render()["filters"] == {"platform": "Reddit Ads", "user": "bob", "search": ""}

"""Tests for environment driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from govconsole.config import DEFAULT_DEPLOYMENT_ID, get_settings, reset_settings_cache


def test_deployment_id_defaults_when_unset(monkeypatch) -> None:
    monkeypatch.delenv("DEPLOYMENT_ID", raising=False)
    reset_settings_cache()
    try:
        assert get_settings().deployment_id == DEFAULT_DEPLOYMENT_ID
    finally:
        reset_settings_cache()


def test_deployment_id_must_be_a_single_path_segment(override_settings) -> None:
    override_settings(deployment_id="tenant/app")

    with pytest.raises(ValidationError):
        get_settings()


def test_token_scope_requires_both_issuer_and_audience(override_settings) -> None:
    override_settings(project_auth_domain="console.example.com")

    with pytest.raises(ValidationError):
        get_settings()

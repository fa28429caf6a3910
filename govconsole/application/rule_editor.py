"""Form-state controller for creating, updating and deleting rules."""

from __future__ import annotations

import enum
import logging
from dataclasses import replace
from functools import partial
from typing import Any

from anyio import to_thread

from govconsole.application.context import NOT_READY_MESSAGE, ConsoleContext
from govconsole.application.live_sync import LiveCollection
from govconsole.application.use_cases.rules import create_rule, delete_rule, update_rule
from govconsole.domain.entities import PLATFORMS, RULE_TYPES, Rule, RuleDraft
from govconsole.infrastructure.document_store import DocumentStoreError
from govconsole.infrastructure.gemini_client import (
    MalformedSuggestionError,
    SuggestionConfigurationError,
    SuggestionServiceError,
)

logger = logging.getLogger(__name__)

NO_RULES_TEXT = "No rules defined yet."
FETCH_ERROR_MESSAGE = "Error fetching rules."
DELETE_PROMPT = "Are you sure you want to delete this rule?"

# Form input name -> draft attribute.
_FORM_FIELDS: dict[str, str] = {
    "name": "name",
    "type": "type",
    "platform": "platform",
    "condition": "condition",
    "message": "message",
    "isActive": "is_active",
}


class EditorState(str, enum.Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUGGESTING_DETAILS = "suggesting_details"


class RuleEditor:
    """Edit surface and rule list of one console session.

    ``Idle -> Editing -> Submitting -> Idle``; while editing, a details
    suggestion may run and always returns to ``Editing``.
    """

    def __init__(self, context: ConsoleContext, rules: LiveCollection[Rule]) -> None:
        self._context = context
        self._rules = rules
        self.state = EditorState.IDLE
        self.draft = RuleDraft()
        self.editing_rule_id: str | None = None
        self.pending_delete_id: str | None = None
        self.message = ""
        # Bumped whenever the edit surface is opened or closed so late
        # suggestion results for a previous form are dropped.
        self._session = 0
        rules.add_listener(self._on_collection_change)

    @property
    def is_open(self) -> bool:
        return self.state is not EditorState.IDLE

    @property
    def llm_loading(self) -> bool:
        return self.state is EditorState.SUGGESTING_DETAILS

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules.items)

    def open_new(self) -> None:
        self._session += 1
        self.editing_rule_id = None
        self.draft = RuleDraft()
        self.state = EditorState.EDITING

    def open_existing(self, rule: Rule | str) -> None:
        if isinstance(rule, str):
            rule = self._find_rule(rule)
        self._session += 1
        self.editing_rule_id = rule.id
        self.draft = rule.to_draft()
        self.state = EditorState.EDITING

    def close(self) -> None:
        self._session += 1
        self.state = EditorState.IDLE

    def change(self, field: str, value: Any) -> None:
        """Apply a single form input change to the draft."""

        if self.state not in (EditorState.EDITING, EditorState.SUGGESTING_DETAILS):
            raise ValueError("No rule is being edited")
        attribute = _FORM_FIELDS.get(field)
        if attribute is None:
            raise ValueError(f"Unknown rule field '{field}'")
        if attribute == "is_active":
            value = bool(value)
        elif not isinstance(value, str):
            raise ValueError(f"Rule field '{field}' expects text")
        self.draft = replace(self.draft, **{attribute: value})

    async def submit(self) -> bool:
        """Create or update the rule described by the draft."""

        if self.state is not EditorState.EDITING:
            return False

        handle = self._context.rules_handle()
        user_id = self._context.user_id
        if handle is None or user_id is None:
            self.message = NOT_READY_MESSAGE
            return False

        missing = self.draft.missing_required_fields()
        if missing:
            self.message = f"Please fill in the required fields: {', '.join(missing)}."
            return False

        self.state = EditorState.SUBMITTING
        draft = self.draft
        try:
            if self.editing_rule_id is not None:
                await to_thread.run_sync(
                    update_rule, self._context.store, handle, self.editing_rule_id, draft
                )
                success_message = "Rule updated successfully!"
            else:
                await to_thread.run_sync(
                    partial(create_rule, self._context.store, handle, draft, created_by=user_id)
                )
                success_message = "Rule added successfully!"
        except (ValueError, DocumentStoreError) as exc:
            logger.error("Error adding/updating rule: %s", exc)
            self.message = f"Error: {exc}"
            self.state = EditorState.EDITING
            return False

        self.message = success_message
        self.editing_rule_id = None
        self.draft = RuleDraft()
        self.close()
        return True

    def request_delete(self, rule_id: str) -> None:
        self._find_rule(rule_id)
        self.pending_delete_id = rule_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        rule_id = self.pending_delete_id
        self.pending_delete_id = None
        if rule_id is None:
            return False

        handle = self._context.rules_handle()
        if handle is None:
            self.message = NOT_READY_MESSAGE
            return False

        try:
            await to_thread.run_sync(delete_rule, self._context.store, handle, rule_id)
        except DocumentStoreError as exc:
            logger.error("Error deleting rule: %s", exc)
            self.message = f"Error: {exc}"
            return False

        self.message = "Rule deleted successfully!"
        return True

    async def suggest_details(self) -> bool:
        """Ask the suggestion endpoint for a condition and violation message."""

        if self.state is not EditorState.EDITING:
            return False
        if not self.draft.name or not self.draft.type:
            self.message = "Please provide a Rule Name and Type to get suggestions."
            return False

        session = self._session
        self.state = EditorState.SUGGESTING_DETAILS
        self.message = ""
        try:
            service = self._context.suggestion_service()
            suggestion = await service.suggest_rule_details(self.draft.name, self.draft.type)
        except MalformedSuggestionError as exc:
            logger.error("LLM response structure unexpected: %s", exc)
            return self._finish_suggestion(
                session, "Could not get suggestions from LLM. Please try again."
            )
        except (SuggestionConfigurationError, SuggestionServiceError) as exc:
            logger.error("Error calling LLM: %s", exc)
            return self._finish_suggestion(session, f"Error generating suggestions: {exc}")

        if not suggestion:
            return self._finish_suggestion(
                session, "Could not get suggestions from LLM. Please try again."
            )
        if session == self._session:
            self.draft = replace(self.draft, **suggestion)
        return self._finish_suggestion(session, "Suggestions applied!", applied=True)

    def render(self) -> dict[str, Any]:
        rules = self.rules
        editing = self.editing_rule_id is not None
        return {
            "message": self.message,
            "state": self.state.value,
            "open": self.is_open,
            "title": "Edit Rule" if editing else "Create New Rule",
            "submitLabel": "Update Rule" if editing else "Add Rule",
            "editingRuleId": self.editing_rule_id,
            "draft": self.draft.to_document(),
            "llmLoading": self.llm_loading,
            "pendingDelete": (
                {"id": self.pending_delete_id, "prompt": DELETE_PROMPT}
                if self.pending_delete_id
                else None
            ),
            "ruleTypes": list(RULE_TYPES),
            "platforms": list(PLATFORMS),
            "rules": [rule.to_document() for rule in rules],
            "emptyText": None if rules else NO_RULES_TEXT,
        }

    def _finish_suggestion(self, session: int, message: str, *, applied: bool = False) -> bool:
        if session != self._session:
            # The form was closed or reopened meanwhile.
            return False
        self.message = message
        self.state = EditorState.EDITING
        return applied

    def _find_rule(self, rule_id: str) -> Rule:
        for rule in self._rules.items:
            if rule.id == rule_id:
                return rule
        raise ValueError("Rule not found")

    def _on_collection_change(self) -> None:
        if self._rules.error:
            self.message = self._rules.error


__all__ = [
    "DELETE_PROMPT",
    "EditorState",
    "FETCH_ERROR_MESSAGE",
    "NO_RULES_TEXT",
    "RuleEditor",
]

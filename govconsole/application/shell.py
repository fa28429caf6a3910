"""Console shell: identity, live collections and tab navigation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from govconsole.application import rule_editor, violation_view
from govconsole.application.context import ConsoleContext
from govconsole.application.identity import InitializationError
from govconsole.application.live_sync import LiveCollection
from govconsole.application.rule_editor import RuleEditor
from govconsole.application.violation_view import ViolationView
from govconsole.domain.entities import Rule, Violation

logger = logging.getLogger(__name__)

TAB_RULES = "rules"
TAB_VIOLATIONS = "violations"
TABS: tuple[str, ...] = (TAB_RULES, TAB_VIOLATIONS)

STATUS_LOADING = "loading"
STATUS_ERROR = "error"
STATUS_READY = "ready"


class ConsoleShell:
    """Wire a console session together and render its current view model."""

    def __init__(self, context: ConsoleContext) -> None:
        self.context = context
        self.rules: LiveCollection[Rule] = LiveCollection(
            context.store,
            Rule.from_document,
            error_message=rule_editor.FETCH_ERROR_MESSAGE,
        )
        self.violations: LiveCollection[Violation] = LiveCollection(
            context.store,
            Violation.from_document,
            error_message=violation_view.FETCH_ERROR_MESSAGE,
        )
        self.editor = RuleEditor(context, self.rules)
        self.violation_view = ViolationView(context, self.violations)
        self.active_tab = TAB_RULES
        self._binding_task: asyncio.Task[None] | None = None
        self._unsubscribe_identity: Callable[[], None] | None = None

    @property
    def status(self) -> str:
        if self.context.identity.error:
            return STATUS_ERROR
        if not self.context.identity.resolved:
            return STATUS_LOADING
        return STATUS_READY

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` whenever either synced collection changes."""

        removers = [self.rules.add_listener(listener), self.violations.add_listener(listener)]

        def remove() -> None:
            for remover in removers:
                remover()

        return remove

    async def start(self) -> None:
        self._unsubscribe_identity = self.context.identity.subscribe(self._on_identity_change)
        try:
            await self.context.identity.start()
        except InitializationError:
            logger.error("Console session could not be initialized")
            return
        await self._wait_for_bindings()

    async def sign_out(self) -> None:
        await self.context.identity.sign_out()
        await self._wait_for_bindings()

    def select_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab '{tab}'")
        self.active_tab = tab

    async def close(self) -> None:
        if self._unsubscribe_identity is not None:
            self._unsubscribe_identity()
            self._unsubscribe_identity = None
        if self._binding_task is not None and not self._binding_task.done():
            self._binding_task.cancel()
        self.rules.close()
        self.violations.close()
        self.context.identity.close()

    def render(self) -> dict[str, Any]:
        status = self.status
        model: dict[str, Any] = {
            "status": status,
            "userId": self.context.user_id,
            "activeTab": self.active_tab,
            "tabs": list(TABS),
        }
        if status == STATUS_ERROR:
            model["error"] = (
                f"Error: {self.context.identity.error} Please check your configuration."
            )
            return model
        if status == STATUS_LOADING:
            return model

        if self.active_tab == TAB_RULES:
            model["view"] = self.editor.render()
        else:
            model["view"] = self.violation_view.render()
        return model

    def _on_identity_change(self, user_id: str | None) -> None:
        self._binding_task = asyncio.get_running_loop().create_task(self._sync_bindings())

    async def _sync_bindings(self) -> None:
        # A changed user id means a different path; stale subscriptions are dropped.
        await self.rules.bind(self.context.rules_handle())
        await self.violations.bind(self.context.violations_handle())

    async def _wait_for_bindings(self) -> None:
        if self._binding_task is not None:
            await self._binding_task


__all__ = [
    "ConsoleShell",
    "STATUS_ERROR",
    "STATUS_LOADING",
    "STATUS_READY",
    "TABS",
    "TAB_RULES",
    "TAB_VIOLATIONS",
]

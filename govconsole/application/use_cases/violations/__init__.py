"""Use cases for recording and reviewing rule violations."""

from .delete_violation import delete_violation
from .list_violations import list_violations
from .record_violation import record_violation
from .simulate_violation import build_simulated_violation, simulate_violation

__all__ = [
    "build_simulated_violation",
    "delete_violation",
    "list_violations",
    "record_violation",
    "simulate_violation",
]

"""Domain entity describing a signed-in console identity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Opaque user identifier resolved by the auth service."""

    user_id: str
    is_anonymous: bool


__all__ = ["Identity"]

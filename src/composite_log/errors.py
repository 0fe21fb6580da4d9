from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .registry import RegistrationState


class CompositeLogError(Exception):
    """Base exception for composite logger errors."""


class AlreadyInitializedError(CompositeLogError):
    """Raised when a logger is registered after the global slot was set."""

    def __init__(self, *, state: RegistrationState) -> None:
        super().__init__(
            "a global logger is already registered; "
            f"registration state={state.value}"
        )
        self.state = state

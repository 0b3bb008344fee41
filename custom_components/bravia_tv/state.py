"""Centralized observable state for a Bravia TV."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

_LOGGER = logging.getLogger(__name__)

StateListener = Callable[[str, Any], None]


@dataclass
class BraviaState:
    """Observable device state.

    Only meaningful state changes notify listeners (edge-triggered), so
    repeated polls reporting the same value are silent.
    """

    power: bool = False
    authenticated: bool = False

    _listeners: list[StateListener] = field(default_factory=list, init=False, repr=False)

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for ``(key, value)`` changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def apply_diff(self, changes: dict[str, Any]) -> bool:
        """Apply state changes and return True if meaningful change occurred.

        Args:
            changes: Dict of state changes to apply

        Returns:
            True if state meaningfully changed, False otherwise
        """
        changed: list[tuple[str, Any]] = []

        for key, value in changes.items():
            old_value = getattr(self, key)
            if old_value != value:
                setattr(self, key, value)
                changed.append((key, value))
                _LOGGER.debug(
                    "State change: %s: %s -> %s",
                    key,
                    old_value,
                    value,
                )

        for key, value in changed:
            for listener in list(self._listeners):
                try:
                    listener(key, value)
                except Exception:
                    _LOGGER.exception("State listener failed for %s", key)

        return bool(changed)

    def to_dict(self) -> dict[str, Any]:
        """Convert state to dictionary."""
        return {
            "power": self.power,
            "authenticated": self.authenticated,
        }

    def __repr__(self) -> str:
        """String representation."""
        state_str = ", ".join(f"{k}={v}" for k, v in self.to_dict().items())
        return f"BraviaState({state_str})"

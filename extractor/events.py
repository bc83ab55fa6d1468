"""
Structured event emission for extraction runs.

Callbacks are purely observational: a failing callback is printed and
never reaches the algorithm.
"""

from typing import Callable

# Event types
SEED = "seed"
STAGE = "stage"
PROMOTION = "promotion"
COMPARISON = "comparison"
ROUND_FAILURES = "round_failures"
ASSIGNMENT = "assignment"
RECOMMENDATIONS = "recommendations"
ABORT = "abort"

EventCallback = Callable[[str, dict], None]


class EventEmitter:
    """Fan events out to registered callbacks."""

    def __init__(self, name: str = "EXTRACTOR"):
        self.name = name
        self._callbacks: list[EventCallback] = []

    def add_callback(self, callback: EventCallback) -> None:
        """Add callback for notifications."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: EventCallback) -> None:
        """Remove callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def notify(self, event_type: str, data: dict) -> None:
        """Notify all registered callbacks."""
        for cb in self._callbacks:
            try:
                cb(event_type, data)
            except Exception as e:
                print(f"[{self.name}] Callback error: {e}")

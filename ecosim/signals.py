"""In-memory pub/sub bus with per-tick flush semantics.

Signals published while a tick runs are queued and delivered by ``flush``
once the tick's state is final, so subscribers only ever observe completed
ticks.
"""
from __future__ import annotations

from typing import Any, Callable, TypedDict

TICK = "tick"
MESSAGE = "message"
CONDITION = "condition"


class TickSummary(TypedDict):
    """Payload of the ``tick`` signal, published once per completed tick."""

    tick: int
    predator_count: int
    prey_count: int
    plant_count: int
    temperature: float


class MessagePayload(TypedDict):
    text: str
    tick: int


class ConditionPayload(TypedDict):
    """Payload of the ``condition`` signal: a refused control call."""

    code: str
    text: str


_Handler = Callable[[str, dict[str, Any]], None]


class SignalBus:

    def __init__(self) -> None:
        self._subscribers: dict[str, list[_Handler]] = {}
        self._queue: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, signal_name: str, handler: _Handler) -> None:
        self._subscribers.setdefault(signal_name, []).append(handler)

    def unsubscribe(self, signal_name: str, handler: _Handler) -> None:
        handlers = self._subscribers.get(signal_name)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def publish(self, signal_name: str, **data: Any) -> None:
        self._queue.append((signal_name, data))

    def flush(self) -> None:
        snapshot = self._queue
        self._queue = []
        for signal_name, data in snapshot:
            for handler in list(self._subscribers.get(signal_name, [])):
                handler(signal_name, data)

    def pending(self) -> int:
        return len(self._queue)

    def clear(self) -> None:
        self._queue.clear()

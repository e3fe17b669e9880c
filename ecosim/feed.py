from __future__ import annotations

from collections import deque
from dataclasses import dataclass


@dataclass
class Message:
    tick: int
    text: str


class MessageFeed:
    """Recent narrative messages, newest last.

    A message identical to the one just before it is dropped, and only the
    last *max_entries* are kept.
    """

    def __init__(self, max_entries: int = 3) -> None:
        self._max = max_entries
        maxlen = max_entries if max_entries > 0 else None
        self._messages: deque[Message] = deque(maxlen=maxlen)
        self._last_text: str | None = None

    def post(self, tick: int, text: str) -> bool:
        """Record *text*; returns False when it repeats the previous message."""
        if text == self._last_text:
            return False
        self._last_text = text
        self._messages.append(Message(tick=tick, text=text))
        return True

    def texts(self) -> list[str]:
        return [m.text for m in self._messages]

    def last(self) -> Message | None:
        if not self._messages:
            return None
        return self._messages[-1]

    def clear(self) -> None:
        self._messages.clear()
        self._last_text = None

    def snapshot(self) -> list[dict]:
        return [{"tick": m.tick, "text": m.text} for m in self._messages]

    def restore(self, data: list[dict]) -> None:
        self.clear()
        for d in data:
            self._messages.append(Message(tick=d["tick"], text=d["text"]))
        if self._messages:
            self._last_text = self._messages[-1].text

    def __len__(self) -> int:
        return len(self._messages)

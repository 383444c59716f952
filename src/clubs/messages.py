from __future__ import annotations

import pendulum

from dataclasses import dataclass
from typing import Callable, Optional

SUCCESS = "success"
ERROR = "error"

DEFAULT_HIDE_AFTER = 5.0


@dataclass(frozen=True)
class Message:
    text: str
    kind: str  # SUCCESS or ERROR
    expires_at: pendulum.DateTime


class MessageRegion:
    """
    The outcome banner shown after signup and unregister.

    States are hidden, showing-success and showing-error. Each show replaces
    whatever was there and restarts the hide timer, so the last message wins.
    """

    def __init__(self,
                 hide_after: float = DEFAULT_HIDE_AFTER,
                 clock: Callable[[], pendulum.DateTime] = pendulum.now):
        self.hide_after = hide_after
        self.clock = clock
        self._message: Optional[Message] = None

    def show(self, text: str, kind: str) -> Message:
        if kind not in (SUCCESS, ERROR):
            raise ValueError(f"Invalid message kind: {kind}")
        self._message = Message(
            text=text,
            kind=kind,
            expires_at=self.clock() + pendulum.Duration(seconds=self.hide_after),
        )
        return self._message

    def success(self, text: str) -> Message:
        return self.show(text, SUCCESS)

    def error(self, text: str) -> Message:
        return self.show(text, ERROR)

    @property
    def last(self) -> Optional[Message]:
        """The most recent message, visible or not."""
        return self._message

    @property
    def current(self) -> Optional[Message]:
        """The visible message, or None once the hide timer has run out."""
        if self._message is None:
            return None
        if self.clock() >= self._message.expires_at:
            return None
        return self._message

    @property
    def state(self) -> str:
        message = self.current
        if message is None:
            return "hidden"
        return f"showing-{message.kind}"

"""Decoded input events fed to the mode controller.

Byte-level terminal decoding lives in ``rpcscope.terminal``; by the time
an event reaches the core it is one of the kinds below.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventKind(Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    HISTORY = "history"
    QUIT = "quit"


@dataclass(slots=True, frozen=True)
class InputEvent:
    """One discrete input event.

    ``char`` is only meaningful for ``CHAR``; ``ctrl`` marks a character
    typed with the control modifier held, which the core never treats as
    text.
    """

    kind: EventKind
    char: str = ""
    ctrl: bool = False

    @property
    def is_text(self) -> bool:
        return (
            self.kind is EventKind.CHAR
            and not self.ctrl
            and len(self.char) == 1
            and self.char.isprintable()
        )

    # -- Constructors --------------------------------------------------
    @classmethod
    def key(cls, ch: str, ctrl: bool = False) -> "InputEvent":
        return cls(EventKind.CHAR, char=ch, ctrl=ctrl)

    @classmethod
    def of(cls, kind: EventKind) -> "InputEvent":
        return cls(kind)


def text(s: str) -> list[InputEvent]:
    """Expand a string into one ``CHAR`` event per character."""
    return [InputEvent.key(ch) for ch in s]

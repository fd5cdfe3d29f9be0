"""Keyboard event as seen by the transcript and effects controllers."""
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyEvent:
    key: str
    repeat: bool = False
    meta: bool = False
    ctrl: bool = False
    alt: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.meta or self.ctrl or self.alt

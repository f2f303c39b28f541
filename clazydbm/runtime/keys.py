"""Normalized key events."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyPress:
    """A key event reduced to what components match on.

    ``key`` is the Textual key name ("enter", "ctrl+a", "j"); ``character``
    is the printable character, if any.
    """

    key: str
    character: str | None = None

    @classmethod
    def of(cls, name: str) -> KeyPress:
        """Build a KeyPress from a single character or a key name."""
        if len(name) == 1:
            return cls(key=name, character=name)
        return cls(key=name)

    @property
    def is_printable(self) -> bool:
        return self.character is not None and len(self.character) == 1 and self.character.isprintable()

    @property
    def name(self) -> str:
        """The character when printable, otherwise the key name."""
        if self.is_printable:
            return self.character  # type: ignore[return-value]
        return self.key

"""Text filters: case-insensitive substring, or fuzzy with a leading ``~``."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

FUZZY_PREFIX = "~"


def fuzzy_match(pattern: str, text: str) -> tuple[bool, list[int]]:
    """Check if pattern fuzzy matches text and return matched indices.

    Args:
        pattern: The search pattern (e.g., "usrtbl" to match "users_table")
        text: The text to search in

    Returns:
        Tuple of (matches, indices) where indices are positions in text that matched.
    """
    if not pattern:
        return True, []

    pattern = pattern.lower()
    text_lower = text.lower()

    pattern_idx = 0
    indices = []

    for i, char in enumerate(text_lower):
        if pattern_idx < len(pattern) and char == pattern[pattern_idx]:
            indices.append(i)
            pattern_idx += 1

    return pattern_idx == len(pattern), indices


def match_text(query: str, text: str) -> tuple[bool, list[int]]:
    if query.startswith(FUZZY_PREFIX):
        return fuzzy_match(query[len(FUZZY_PREFIX) :], text)
    if not query:
        return True, []
    start = text.lower().find(query.lower())
    if start < 0:
        return False, []
    return True, list(range(start, start + len(query)))


def highlight(text: str, indices: list[int], style: str = "bold yellow") -> Text:
    rendered = Text(text)
    for index in indices:
        rendered.stylize(style, index, index + 1)
    return rendered


@dataclass
class LineEdit:
    """A single line of text edited one key at a time."""

    text: str = ""

    def push(self, char: str) -> None:
        self.text += char

    def pop(self) -> None:
        self.text = self.text[:-1]

    def clear(self) -> None:
        self.text = ""


__all__ = ["FUZZY_PREFIX", "LineEdit", "fuzzy_match", "highlight", "match_text"]

"""Bounded-length word container used as the key type of the frequency tables."""

from __future__ import annotations

MAX_WORD_SIZE = 31
"""Size of the storage for one word, terminator included."""

MAX_WORD_LENGTH = MAX_WORD_SIZE - 1
"""Longest text a word keeps; anything longer is truncated."""


class Word:
    """A word whose text is truncated to at most ``MAX_WORD_LENGTH`` characters."""

    __slots__ = ("_text",)

    def __init__(self, text: str = "") -> None:
        self._text = text[:MAX_WORD_LENGTH]

    @property
    def text(self) -> str:
        """The stored (possibly truncated) text."""
        return self._text

    def modify(self, text: str) -> None:
        """Replace the stored text, truncating it if needed."""
        self._text = text[:MAX_WORD_LENGTH]

    def clear(self) -> None:
        """Reset the word to the empty string."""
        self._text = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        return len(self._text) == len(other._text) and self._text == other._text

    def __hash__(self) -> int:
        return hash(self._text)

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Word({self._text!r})"
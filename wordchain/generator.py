"""Pseudo-random text generation from a word-successor frequency table."""

from __future__ import annotations

import random
from typing import IO, Any, Optional

from .analyzer import SuccessorContext
from .rbtree import RBTree
from .word import Word

STRONG_PUNCTUATION = (".", "?", "!")
"""Tokens that end a sentence; the token after one is capitalised."""


def _is_strong_punctuation(text: str) -> bool:
    return text in STRONG_PUNCTUATION


def _formatted(text: str, capitalize: bool) -> str:
    if capitalize and text and text[0].islower():
        return text[0].upper() + text[1:]
    return text


def pick_next_word(context: Optional[SuccessorContext], rng: Any = None) -> Optional[Word]:
    """Choose a successor at random, weighted by its count; ``None`` if there is none."""
    if context is None or context.total_entries == 0:
        return None
    rng = rng if rng is not None else random
    r = rng.randrange(context.total_entries)
    cumulative = 0
    for node in context.tree:
        cumulative += node.value
        if r < cumulative:
            return node.key
    return None


def generate_text(
    out: IO[str],
    table: RBTree,
    start_word: Optional[str],
    num_words: int,
    rng: Any = None,
) -> list[str]:
    """Write up to ``num_words`` generated tokens to ``out`` and return them.

    Generation starts from ``start_word`` when the table knows it, otherwise
    from a randomly chosen sentence-ending punctuation mark. Nothing is
    written when no starting point exists or ``num_words`` is not positive.
    """
    if num_words <= 0:
        return []
    rng = rng if rng is not None else random

    current: Optional[Word] = None
    if start_word is not None:
        node = table.get(start_word)
        if node is not None:
            current = node.key

    if current is None:
        offset = rng.randrange(len(STRONG_PUNCTUATION))
        for i in range(len(STRONG_PUNCTUATION)):
            mark = STRONG_PUNCTUATION[(offset + i) % len(STRONG_PUNCTUATION)]
            node = table.get(mark)
            if node is not None:
                current = node.key
                break

    if current is None:
        return []

    capitalize = _is_strong_punctuation(current.text)
    emitted: list[str] = []
    for _ in range(num_words):
        node = table.get(current.text)
        if node is None:
            break
        following = pick_next_word(node.value, rng)
        if following is None:
            break
        current = following
        text = _formatted(current.text, capitalize)
        if emitted:
            out.write(" ")
        out.write(text)
        emitted.append(text)
        capitalize = _is_strong_punctuation(current.text)
    out.write("\n")
    return emitted
"""Building the word-successor frequency table from a token stream."""

from __future__ import annotations

import threading
from typing import IO, Iterable, Union

from .parser import iter_words
from .rbtree import Node, RBTree, create_int_tree
from .word import Word


class SuccessorContext:
    """Successors seen after one word, with their counts and the grand total."""

    def __init__(self) -> None:
        self.tree: RBTree = create_int_tree()
        self.total_entries = 0
        self._lock = threading.Lock()

    def add(self, successor: str, count: int = 1) -> None:
        """Record ``count`` more occurrences of ``successor``."""
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")

        def bump(node: Node, was_inserted: bool) -> None:
            node.value = count if was_inserted else node.value + count

        self.tree.get_or_insert_execute(successor, bump)
        with self._lock:
            self.total_entries += count

    def __repr__(self) -> str:
        return f"SuccessorContext({dict(self.tree.items())!r})"


def ensure_successor_context(node: Node, was_inserted: bool) -> None:
    """Give a freshly inserted node an empty successor context."""
    if was_inserted:
        node.value = SuccessorContext()


def increment_count(node: Node, was_inserted: bool) -> None:
    """Start a counter at 1 on a new node, or increment an existing one."""
    if was_inserted:
        node.value = 1
    elif node.value is not None:
        node.value += 1


def update_frequency(table: RBTree, current: str, following: str) -> None:
    """Count one occurrence of ``following`` right after ``current``."""
    table.get_or_insert_execute(current, ensure_successor_context)
    context: SuccessorContext = table.get(current).value
    context.add(following)


def process_words(words: Iterable[Union[str, Word]], table: RBTree) -> None:
    """Count every adjacent pair of ``words``; the last word is followed by the first."""
    tokens = iter(words)
    first = next(tokens, None)
    if first is None:
        return
    first_text = str(first)
    current = first_text
    for token in tokens:
        following = str(token)
        update_frequency(table, current, following)
        current = following
    update_frequency(table, current, first_text)


def process_text(stream: IO[str], table: RBTree) -> None:
    """Tokenise ``stream`` and add its word pairs to ``table``."""
    process_words(iter_words(stream), table)
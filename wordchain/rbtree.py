"""Thread-safe red-black tree mapping words to arbitrary values."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Optional

from .word import Word


class Color(Enum):
    """Node colour used by the balancing rules."""

    RED = "RED"
    BLACK = "BLACK"


@dataclass(eq=False)
class Node:
    """A single tree node holding a unique key and its value."""

    key: Word
    value: Any = None
    color: Color = Color.RED
    left: Optional["Node"] = field(default=None, repr=False)
    right: Optional["Node"] = field(default=None, repr=False)
    parent: Optional["Node"] = field(default=None, repr=False)


class RBTree:
    """Self-balancing ordered map keyed by words, with unique-key insertion.

    Lookups and modifications take the tree lock; iteration does not, so the
    caller must guard it if the tree can change concurrently.
    """

    def __init__(self, value_as_string: Optional[Callable[[Any], str]] = None) -> None:
        self.value_as_string = value_as_string
        self.root: Optional[Node] = None
        self._size = 0
        self._lock = threading.RLock()

    # -- public interface -------------------------------------------------

    def insert(self, key: str, value: Any) -> None:
        """Insert ``key`` with ``value`` unless the key is already present."""
        with self._lock:
            if self._search(key) is None:
                self._create_and_insert(key, value)

    def get(self, key: str) -> Optional[Node]:
        """Return the node for ``key`` or ``None`` if absent."""
        with self._lock:
            return self._search(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.get(key) is not None

    def get_or_insert(self, key: str, value: Any) -> Node:
        """Return the node for ``key``, inserting it with ``value`` if missing."""
        with self._lock:
            node = self._search(key)
            if node is None:
                node = self._create_and_insert(key, value)
            return node

    def get_or_insert_execute(self, key: str, action: Callable[[Node, bool], Any]) -> None:
        """Find or create the node for ``key`` and run ``action`` on it under the lock.

        A newly created node starts with a ``None`` value; ``action`` receives
        the node and whether it was just inserted.
        """
        with self._lock:
            node = self._search(key)
            if node is None:
                node = self._create_and_insert(key, None)
                action(node, True)
            else:
                action(node, False)

    def __iter__(self) -> Iterator[Node]:
        """Yield nodes in ascending key order."""
        stack: list[Node] = []
        current = self.root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = current.left
            current = stack.pop()
            yield current
            current = current.right

    def __len__(self) -> int:
        return self._size

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(key, value)`` pairs in ascending key order."""
        for node in self:
            yield node.key.text, node.value

    def render(self) -> str:
        """Return an in-order listing, one ``key => value (COLOR)`` line per node."""
        with self._lock:
            lines = []
            for node in self:
                shown = self.value_as_string(node.value) if self.value_as_string else ""
                lines.append(f"{node.key.text} => {shown} ({node.color.value})\n")
            return "".join(lines)

    # -- internals --------------------------------------------------------

    def _search(self, key: str) -> Optional[Node]:
        target = Word(key).text
        node = self.root
        while node is not None:
            if target == node.key.text:
                return node
            node = node.left if target < node.key.text else node.right
        return None

    def _create_and_insert(self, key: str, value: Any) -> Node:
        z = Node(Word(key), value)
        parent: Optional[Node] = None
        x = self.root
        while x is not None:
            parent = x
            x = x.left if z.key.text < x.key.text else x.right
        z.parent = parent
        if parent is None:
            self.root = z
        elif z.key.text < parent.key.text:
            parent.left = z
        else:
            parent.right = z
        self._insert_fixup(z)
        self._size += 1
        return z

    @staticmethod
    def _is_red(node: Optional[Node]) -> bool:
        return node is not None and node.color is Color.RED

    def _insert_fixup(self, z: Node) -> None:
        while z.parent is not None and z.parent.color is Color.RED:
            parent = z.parent
            grand = parent.parent
            assert grand is not None  # a red node is never the root
            if parent is grand.left:
                uncle = grand.right
                if self._is_red(uncle):
                    parent.color = Color.BLACK
                    uncle.color = Color.BLACK
                    grand.color = Color.RED
                    z = grand
                    continue
                if z is parent.right:
                    z = parent
                    self._rotate_left(z)
                    parent = z.parent
                parent.color = Color.BLACK
                grand.color = Color.RED
                self._rotate_right(grand)
            else:
                uncle = grand.left
                if self._is_red(uncle):
                    parent.color = Color.BLACK
                    uncle.color = Color.BLACK
                    grand.color = Color.RED
                    z = grand
                    continue
                if z is parent.left:
                    z = parent
                    self._rotate_right(z)
                    parent = z.parent
                parent.color = Color.BLACK
                grand.color = Color.RED
                self._rotate_left(grand)
        if self.root is not None:
            self.root.color = Color.BLACK

    def _replace_child(self, old: Node, new: Node) -> None:
        parent = old.parent
        new.parent = parent
        if parent is None:
            self.root = new
        elif old is parent.left:
            parent.left = new
        else:
            parent.right = new

    def _rotate_left(self, x: Node) -> None:
        y = x.right
        assert y is not None
        x.right = y.left
        if y.left is not None:
            y.left.parent = x
        self._replace_child(x, y)
        y.left = x
        x.parent = y

    def _rotate_right(self, x: Node) -> None:
        y = x.left
        assert y is not None
        x.left = y.right
        if y.right is not None:
            y.right.parent = x
        self._replace_child(x, y)
        y.right = x
        x.parent = y


def create_int_tree() -> RBTree:
    """Create a tree meant to hold integer values, rendered with ``str``."""
    return RBTree(value_as_string=str)


def int_get_or_insert(tree: RBTree, key: str, value: int) -> Node:
    """Insert an integer value for ``key`` unless present; return the key's node."""
    return tree.get_or_insert(key, int(value))
from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from .trie import Trie, TrieNode

# (owner node, slot in owner.labels / owner.children)
Position = Tuple[TrieNode, int]


class TraversalCursor:
    """
    Bidirectional depth-first pre-order cursor over a Trie.

    The cursor is a stack of positions, one per depth level below the root:
      - empty stack: before-begin, dereferences to the root (empty key)
      - [(root, len(root.children))]: the end sentinel
      - otherwise: the node at `owner.children[slot]` of the top position

    No parent links are needed; backtracking pops the stack. Any structural
    change to the trie invalidates outstanding cursors.
    """

    __slots__ = ("trie", "_path")

    def __init__(self, trie: Trie) -> None:
        self.trie = trie
        self._path: List[Position] = []

    @classmethod
    def at_end_of(cls, trie: Trie) -> "TraversalCursor":
        cursor = cls(trie)
        cursor.to_end()
        return cursor

    @classmethod
    def at_key(cls, trie: Trie, key: Sequence[Any]) -> "TraversalCursor":
        """Cursor at `key`; the end sentinel if any element has no edge."""
        cursor = cls(trie)
        node = trie.root
        for elem in key:
            i = node.slot(elem)
            if i is None:
                cursor.to_end()
                break
            cursor._path.append((node, i))
            node = node.children[i]
        return cursor

    # --- state ---
    def to_end(self) -> None:
        root = self.trie.root
        self._path = [(root, len(root.children))]

    @property
    def depth(self) -> int:
        return len(self._path)

    @property
    def at_begin(self) -> bool:
        return not self._path

    @property
    def at_end(self) -> bool:
        if len(self._path) != 1:
            return False
        owner, slot = self._path[0]
        return owner is self.trie.root and slot == len(owner.children)

    def _node(self) -> TrieNode:
        if self.at_begin:
            return self.trie.root
        if self.at_end:
            raise IndexError("cannot dereference the end of a trie")
        owner, slot = self._path[-1]
        return owner.children[slot]

    # --- dereference ---
    @property
    def key(self) -> Any:
        if self.at_end:
            raise IndexError("cannot dereference the end of a trie")
        return self.trie.key_factory([owner.labels[slot] for owner, slot in self._path])

    @property
    def data(self) -> Any:
        return self._node().data

    @data.setter
    def data(self, value: Any) -> None:
        self._node().data = value

    @property
    def item(self) -> Tuple[Any, Any]:
        return (self.key, self.data)

    # --- movement ---
    def advance(self) -> "TraversalCursor":
        """Move to the pre-order successor."""
        if self.at_begin:
            self._path.append((self.trie.root, 0))
            return self
        if self.at_end:
            raise IndexError("cannot advance past the end of a trie")

        node = self._node()
        if not node.is_leaf():
            self._path.append((node, 0))
            return self

        owner, slot = self._path.pop()
        slot += 1
        while self._path and slot == len(owner.children):
            owner, slot = self._path.pop()
            slot += 1
        self._path.append((owner, slot))
        return self

    def retreat(self) -> "TraversalCursor":
        """Move to the pre-order predecessor."""
        if self.at_begin:
            raise IndexError("cannot retreat before the beginning of a trie")

        owner, slot = self._path.pop()
        # first child: its predecessor is the parent, already on top of the stack
        if slot == 0:
            return self

        slot -= 1
        self._path.append((owner, slot))
        node = owner.children[slot]
        while not node.is_leaf():
            last = len(node.children) - 1
            self._path.append((node, last))
            node = node.children[last]
        return self

    # --- comparison ---
    def _signature(self) -> List[Tuple[int, int]]:
        return [(id(owner), slot) for owner, slot in self._path]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TraversalCursor):
            return NotImplemented
        return self.trie is other.trie and self._signature() == other._signature()

    __hash__ = None  # mutable

    def copy(self) -> "TraversalCursor":
        twin = TraversalCursor(self.trie)
        twin._path = list(self._path)
        return twin

    def __repr__(self) -> str:
        if self.at_begin:
            where = "begin"
        elif self.at_end:
            where = "end"
        else:
            where = repr(self.key)
        return f"TraversalCursor({where})"

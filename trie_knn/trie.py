from __future__ import annotations

import copy
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

if TYPE_CHECKING:
    from .cursor import TraversalCursor

D = TypeVar("D")

Key = Sequence[Any]
ElemVisitor = Callable[[Any, Any], bool]
EdgeVisitor = Callable[[int, Any, Any], bool]
KeyVisitor = Callable[[Any, Any], bool]


@dataclass
class TrieNode:
    """Trie node with sorted, unique edge labels.

    `labels[i]` selects `children[i]`; both lists are kept in ascending label
    order so lookups can bisect.
    """

    data: Any = None
    labels: List[Any] = field(default_factory=list)
    children: List["TrieNode"] = field(default_factory=list)

    def is_leaf(self) -> bool:
        return not self.children

    def lower_bound(self, label: Any) -> int:
        """Slot of the first edge whose label is not less than `label`."""
        return bisect_left(self.labels, label)

    def slot(self, label: Any) -> Optional[int]:
        """Slot of the edge labelled `label`, or None if absent."""
        i = self.lower_bound(label)
        if i < len(self.labels) and self.labels[i] == label:
            return i
        return None

    def child(self, label: Any) -> Optional["TrieNode"]:
        i = self.slot(label)
        return None if i is None else self.children[i]

    def insert_node(self, label: Any, default_factory: Callable[[], Any]) -> "TrieNode":
        """Return the child for `label`, creating it with default data if missing."""
        i = self.lower_bound(label)
        if i < len(self.labels) and self.labels[i] == label:
            return self.children[i]
        node = TrieNode(data=default_factory())
        self.labels.insert(i, label)
        self.children.insert(i, node)
        return node

    def iter_children(self):
        """Iterator over (label, child_node) pairs in ascending label order."""
        return zip(self.labels, self.children)

    def copy_tree(self) -> "TrieNode":
        # iterative so deep keys do not hit the recursion limit
        root = TrieNode(data=copy.deepcopy(self.data))
        stack = [(self, root)]
        while stack:
            src, dst = stack.pop()
            for label, child in src.iter_children():
                twin = TrieNode(data=copy.deepcopy(child.data))
                dst.labels.append(label)
                dst.children.append(twin)
                stack.append((child, twin))
        return root


class Trie(Generic[D]):
    """Key/value store for keys that are sequences of orderable elements.

    Every prefix of a stored key owns a data value of its own: there is no
    distinction between keys that were inserted and keys that are merely
    prefixes of inserted ones. Insertion may invalidate cursors.
    """

    def __init__(
        self,
        default_factory: Callable[[], D] = int,
        key_factory: Callable[[List[Any]], Any] = tuple,
    ) -> None:
        self.default_factory = default_factory
        self.key_factory = key_factory
        self.root = TrieNode(data=default_factory())

    # --- core ops ---
    def _node_for(self, key: Key) -> TrieNode:
        node = self.root
        for elem in key:
            node = node.insert_node(elem, self.default_factory)
        return node

    def insert(self, key: Key, data: D) -> None:
        """Store `data` at `key`; new nodes on the path get default data."""
        self._node_for(key).data = data

    def insert_with(self, key: Key, combiner: Callable[[D], D]) -> None:
        """Replace the data of every prefix of `key`, root included, by combiner(data)."""
        node = self.root
        node.data = combiner(node.data)
        for elem in key:
            node = node.insert_node(elem, self.default_factory)
            node.data = combiner(node.data)

    def at(self, key: Key) -> D:
        """Data for `key`; missing nodes are created with default data."""
        return self._node_for(key).data

    def __getitem__(self, key: Key) -> D:
        return self._node_for(key).data

    def __setitem__(self, key: Key, data: D) -> None:
        self._node_for(key).data = data

    def match(self, key: Key) -> Tuple[bool, D]:
        """
        Walk existing edges only.

        Returns (True, data) if the entire key could be matched, otherwise
        (False, data) where data belongs to the longest matched prefix (which
        might be the empty key, i.e. the root).
        """
        node = self.root
        for elem in key:
            nxt = node.child(elem)
            if nxt is None:
                return (False, node.data)
            node = nxt
        return (True, node.data)

    def is_leaf(self) -> bool:
        return self.root.is_leaf()

    def clear(self) -> None:
        self.root = TrieNode(data=self.default_factory())

    def __len__(self) -> int:
        """Number of nodes below the root."""
        total = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            total += len(node.children)
            stack.extend(node.children)
        return total

    # --- traversal ---
    def each_edge(self, visitor: EdgeVisitor) -> None:
        """
        Depth-first pre-order walk over all edges, in ascending label order.

        `visitor(depth, label, data)` gets the depth of the node the edge leads
        to (1 for children of the root) and that node's data. A falsy return
        skips the node's subtree; the walk then resumes with the next node at
        the same or a lower depth.
        """
        stack = [self.root.iter_children()]
        while stack:
            try:
                label, node = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue
            if visitor(len(stack), label, node.data) and node.children:
                stack.append(node.iter_children())

    def each_elem(self, visitor: ElemVisitor) -> None:
        """Like `each_edge`, with `visitor(label, data)`. Root data is not visited."""
        self.each_edge(lambda _depth, label, data: visitor(label, data))

    def each(self, visitor: KeyVisitor) -> None:
        """
        Visit all (key, data) pairs in sorted order, root (empty key) first.

        `visitor(key, data)` returns whether keys extending `key` should be
        visited too.
        """
        buf: List[Any] = []
        if not visitor(self.key_factory(buf), self.root.data):
            return
        stack = [(self.root.iter_children(), 0)]
        while stack:
            it, depth = stack[-1]
            try:
                label, node = next(it)
            except StopIteration:
                stack.pop()
                continue
            buf[depth:] = []
            buf.append(label)
            if visitor(self.key_factory(buf), node.data) and node.children:
                stack.append((node.iter_children(), depth + 1))

    # --- cursors ---
    def begin(self) -> "TraversalCursor":
        from .cursor import TraversalCursor

        return TraversalCursor(self)

    def end(self) -> "TraversalCursor":
        from .cursor import TraversalCursor

        return TraversalCursor.at_end_of(self)

    def find(self, key: Key) -> "TraversalCursor":
        """Cursor positioned at `key`, or `end()` if the key path does not exist."""
        from .cursor import TraversalCursor

        return TraversalCursor.at_key(self, key)

    def items(self) -> Iterator[Tuple[Any, D]]:
        """(key, data) pairs in pre-order, root first."""
        cursor = self.begin()
        while not cursor.at_end:
            yield cursor.item
            cursor.advance()

    # --- ownership ---
    def copy(self) -> "Trie[D]":
        """Deep copy: the node tree and every data value are duplicated."""
        twin = Trie.__new__(Trie)
        twin.default_factory = self.default_factory
        twin.key_factory = self.key_factory
        twin.root = self.root.copy_tree()
        return twin

    def __deepcopy__(self, memo) -> "Trie[D]":
        return self.copy()

    def take(self) -> "Trie[D]":
        """Move the tree into a new Trie and leave this one empty."""
        moved = Trie.__new__(Trie)
        moved.default_factory = self.default_factory
        moved.key_factory = self.key_factory
        moved.root = self.root
        self.clear()
        return moved


# --- construction helpers ---


def build_trie(paths: Iterable[Key], *, reverse: bool = False) -> Trie[int]:
    """Build a counting trie: each node holds how many paths pass through it.

    If reverse=True, builds a suffix trie.
    """
    trie: Trie[int] = Trie(default_factory=int)
    for p in paths:
        toks = list(reversed(p)) if reverse else list(p)
        trie.insert_with(toks, lambda count: count + 1)
    return trie


# --- pretty-print (ASCII) ---


def ascii_lines(
    trie: Trie, prefix: str = "", fmt: Callable[[Any], str] = str
) -> List[str]:
    """Return lines for an ASCII tree, one per non-root node, in pre-order."""
    rows: List[Tuple[int, Any, Any]] = []

    def _collect(depth: int, label: Any, data: Any) -> bool:
        rows.append((depth, label, data))
        return True

    trie.each_edge(_collect)

    # scanning backwards, a row is a last child unless a sibling was seen
    # at its depth since the walk last climbed above it
    is_last = [False] * len(rows)
    seen: List[bool] = []
    for i in range(len(rows) - 1, -1, -1):
        depth = rows[i][0]
        del seen[depth:]
        seen.extend([False] * (depth - len(seen)))
        is_last[i] = not seen[depth - 1]
        seen[depth - 1] = True

    lines: List[str] = []
    open_levels: List[bool] = []
    for (depth, label, data), last in zip(rows, is_last):
        del open_levels[depth - 1 :]
        indent = "".join("    " if done else "|   " for done in open_levels)
        conn = "`-- " if last else "|-- "
        lines.append(f"{prefix}{indent}{conn}{label} ({fmt(data)})")
        open_levels.append(last)
    return lines

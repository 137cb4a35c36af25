from __future__ import annotations

from typing import Any, Callable, List, Protocol, Sequence

from .trie import Trie


class ScoreFunction(Protocol):
    """Incremental scorer: an initial value and a one-element step."""

    def initial(self) -> Any:
        ...

    def step(self, score: Any, query: Any, candidate: Any) -> Any:
        ...


class OverlapScore:
    """Counts the positions where query and candidate elements are equal."""

    def initial(self) -> int:
        return 0

    def step(self, score: int, query: Any, candidate: Any) -> int:
        return score + (1 if query == candidate else 0)


def compare(
    trie: Trie,
    pattern: Sequence[Any],
    score_function: ScoreFunction,
    result: Callable[[Any, Any], None],
) -> None:
    """
    Score `pattern` against every key in the trie of the same length.

    A single pruning pre-order walk consumes one pattern element per level of
    depth. `result(score, data)` is called once for each key whose length
    equals len(pattern); the walk never descends below that depth.
    """
    pattern = list(pattern)
    n = len(pattern)
    if n == 0:
        result(score_function.initial(), trie.root.data)
        return

    # scores[d] is the score of the current path down to depth d
    scores: List[Any] = [score_function.initial()]

    def _visit(depth: int, label: Any, data: Any) -> bool:
        del scores[depth:]
        scores.append(score_function.step(scores[depth - 1], pattern[depth - 1], label))
        if depth == n:
            result(scores[depth], data)
            return False
        return True

    trie.each_edge(_visit)

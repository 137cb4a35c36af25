from __future__ import annotations

from bisect import insort
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .scoring import OverlapScore, ScoreFunction, compare
from .trace_utils import Trace
from .trie import Trie, ascii_lines

LabelFrequencies = Dict[Any, int]


def majority_vote(labels: LabelFrequencies, default: Any = 0) -> Any:
    """Label with the strictly highest count; ties go to the smallest label.

    An empty tally yields `default`.
    """
    best_label = default
    best_count = None
    for label in sorted(labels):
        count = labels[label]
        if best_count is None or count > best_count:
            best_label, best_count = label, count
    return best_label


def format_tally(labels: LabelFrequencies) -> str:
    return "[" + "".join(f"{{ {k} : {v} }}" for k, v in sorted(labels.items())) + "]"


@dataclass
class Params:
    k: Optional[int] = None  # None: single best match
    score_function: ScoreFunction = field(default_factory=OverlapScore)


@dataclass
class _Vote:
    label: Any
    tally: LabelFrequencies
    candidates: int
    best_score: Any


class KNNTrie:
    """Nearest-neighbour classifier over a trie of feature sequences.

    Each node stores how often every label was learned for that exact feature
    sequence. Classification only compares against stored sequences of the
    same length as the query.
    """

    def __init__(self, label_factory: Callable[[], Any] = int, *, reverse: bool = False) -> None:
        self.label_factory = label_factory
        self.reverse = reverse
        self.trie: Trie[LabelFrequencies] = Trie(default_factory=dict)

    def _key(self, features: Iterable[Any]) -> List[Any]:
        key = list(features)
        return key[::-1] if self.reverse else key

    def learn(self, features: Iterable[Any], label: Any) -> None:
        labels = self.trie.at(self._key(features))
        labels[label] = labels.get(label, 0) + 1

    def classify(
        self,
        features: Iterable[Any],
        k: Optional[int] = None,
        *,
        score_function: Optional[ScoreFunction] = None,
        trace: Optional[Trace] = None,
    ) -> Any:
        """Majority label of the best (k=None) or k best scoring neighbours."""
        return self._vote(features, k, score_function or OverlapScore(), trace).label

    def _vote(
        self,
        features: Iterable[Any],
        k: Optional[int],
        score_function: ScoreFunction,
        trace: Optional[Trace],
    ) -> _Vote:
        if k is not None and k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        # iterators can only be read once
        features = list(features)
        key = self._key(features)
        if trace is not None:
            trace.set_features(features)

        seen = 0

        if k is None:
            held: Optional[Tuple[Any, int, LabelFrequencies]] = None

            def _best(score: Any, labels: LabelFrequencies) -> None:
                nonlocal seen, held
                idx = seen
                seen += 1
                if trace is not None:
                    trace.add({"action": "CANDIDATE", "index": idx, "score": score, "tally": dict(labels)})
                # ties keep the earlier candidate
                if held is None or score > held[0]:
                    if trace is not None:
                        if held is not None:
                            trace.add({"action": "REPLACED", "index": held[1], "by_index": idx})
                        trace.add({"action": "KEEP", "index": idx, "mode": "best"})
                    held = (score, idx, labels)
                elif trace is not None:
                    trace.add({"action": "SKIP", "index": idx, "held_score": held[0]})

            compare(self.trie, key, score_function, _best)
            tally: LabelFrequencies = dict(held[2]) if held is not None else {}
            best_score = held[0] if held is not None else None
        else:
            # ascending by score; equal scores stay in arrival order
            best: List[Tuple[Any, int, LabelFrequencies]] = []

            def _store_if_better(score: Any, labels: LabelFrequencies) -> None:
                nonlocal seen
                idx = seen
                seen += 1
                if trace is not None:
                    trace.add({"action": "CANDIDATE", "index": idx, "score": score, "tally": dict(labels)})
                if len(best) < k or score > best[0][0]:
                    insort(best, (score, idx, labels), key=lambda entry: entry[0])
                    if trace is not None:
                        trace.add({"action": "KEEP", "index": idx, "mode": "k-best"})
                    if len(best) > k:
                        evicted = best.pop(0)
                        if trace is not None:
                            trace.add({"action": "EVICT", "index": evicted[1], "by_index": idx})
                elif trace is not None:
                    trace.add({"action": "SKIP", "index": idx, "held_score": best[0][0]})

            compare(self.trie, key, score_function, _store_if_better)
            tally = {}
            for _, _, labels in best:
                for label, count in labels.items():
                    tally[label] = tally.get(label, 0) + count
            best_score = best[-1][0] if best else None

        label = majority_vote(tally, self.label_factory())
        if trace is not None:
            trace.add({"action": "VOTE", "tally": dict(tally), "label": label})
        return _Vote(label=label, tally=tally, candidates=seen, best_score=best_score)

    def ascii_lines(self) -> List[str]:
        return ascii_lines(self.trie, fmt=format_tally)

    def __str__(self) -> str:
        lines: List[str] = []

        def _line(key: Any, labels: LabelFrequencies) -> bool:
            elems = " ".join(str(e) for e in key)
            lines.append(f"{{ {elems} }} : {format_tally(labels)}")
            return True

        self.trie.each(_line)
        return "\n".join(lines)


# --- construction helpers ---


def build_classifier(
    rows: Iterable[Tuple[Sequence[Any], Any]],
    *,
    reverse: bool = False,
    label_factory: Callable[[], Any] = int,
) -> KNNTrie:
    """Train a KNNTrie from (features, label) rows."""
    knn = KNNTrie(label_factory, reverse=reverse)
    for features, label in rows:
        knn.learn(features, label)
    return knn


# --- High-level API ---


def classify_features(
    features: Iterable[Any],
    knn: KNNTrie,
    params: Params = Params(),
    trace: Optional[Trace] = None,
) -> Dict[str, Any]:
    """
    Classify and report how the vote was reached.

    Returns a structured result dict with `label`, `k`, the number of
    same-length `candidates` scored, the `best_score` retained and the
    aggregated `tally` the majority vote ran on.
    """
    vote = knn._vote(features, params.k, params.score_function, trace)
    return {
        "label": vote.label,
        "k": params.k,
        "candidates": vote.candidates,
        "best_score": vote.best_score,
        "tally": vote.tally,
    }

import pytest
from trie_knn.trie import Trie
from trie_knn.scoring import OverlapScore, compare


def _collect(trie, pattern, score_function=None):
    hits = []
    compare(trie, pattern, score_function or OverlapScore(), lambda s, d: hits.append((s, d)))
    return hits


@pytest.fixture
def mixed_length_trie():
    trie = Trie(default_factory=str, key_factory="".join)
    for word in ["test", "tent", "tost", "te", "toasts", "x", "abcd"]:
        trie.insert(word, word)
    return trie


def test_overlap_score_function():
    score = OverlapScore()
    assert score.initial() == 0
    assert score.step(0, "a", "a") == 1
    assert score.step(2, "a", "b") == 2


def test_compare_scores_only_same_length_keys(mixed_length_trie):
    hits = _collect(mixed_length_trie, "tast")
    # ascending pre-order: abcd, tent, test, toas (prefix of toasts), tost
    assert hits == [(0, "abcd"), (2, "tent"), (3, "test"), (1, ""), (3, "tost")]


@pytest.mark.parametrize(
    "pattern, expected",
    [
        ("x", [(0, ""), (0, ""), (1, "x")]),
        ("zz", [(0, ""), (0, "te"), (0, "")]),
        ("toasts", [(6, "toasts")]),
        ("toastsx", []),
    ],
)
def test_compare_result_count_per_length(mixed_length_trie, pattern, expected):
    assert _collect(mixed_length_trie, pattern) == expected


def test_compare_empty_pattern_scores_root():
    trie = Trie(default_factory=str)
    trie.insert([], "root")
    trie.insert("ab", "ab")
    assert _collect(trie, "") == [(0, "root")]


def test_compare_accepts_any_sequence():
    trie = Trie()
    trie.insert((1, 2, 3), 7)
    trie.insert((1, 5, 3), 8)
    hits = _collect(trie, iter([1, 2, 3]))
    assert hits == [(3, 7), (2, 8)]


class _PositionWeighted:
    """Earlier positions count more."""

    def __init__(self, n):
        self.n = n

    def initial(self):
        return (0, 0)

    def step(self, score, query, candidate):
        total, depth = score
        weight = self.n - depth
        return (total + (weight if query == candidate else 0), depth + 1)


def test_compare_with_custom_score_function():
    trie = Trie(default_factory=str, key_factory="".join)
    for word in ["abc", "xbc", "abz"]:
        trie.insert(word, word)
    hits = _collect(trie, "abc", _PositionWeighted(3))
    assert [(s[0], d) for s, d in hits] == [(6, "abc"), (5, "abz"), (3, "xbc")]


def test_compare_does_not_mutate_trie(mixed_length_trie):
    before = list(mixed_length_trie.items())
    _collect(mixed_length_trie, "tast")
    assert list(mixed_length_trie.items()) == before

from .trie import (
    TrieNode,
    Trie,
    build_trie,
    ascii_lines,
)

from .cursor import TraversalCursor

from .scoring import (
    ScoreFunction,
    OverlapScore,
    compare,
)

from .classifier import (
    KNNTrie,
    Params,
    build_classifier,
    classify_features,
    format_tally,
    majority_vote,
)

"""
Pytest configuration and shared fixtures.

- Adds project root to sys.path so tests can import the local package.
- Provides shared tries used across tests to avoid duplication.
"""
import os
import sys
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


from trie_knn.trie import Trie
from trie_knn.classifier import build_classifier


@pytest.fixture
def word_trie():
    trie = Trie(default_factory=int, key_factory="".join)
    trie.insert("test", 42)
    trie.insert("trie", 1)
    trie.insert("abc", 7)
    return trie


@pytest.fixture
def number_trie():
    trie = Trie(default_factory=int)
    trie.insert([1, 2, 3, 4], 1)
    trie.insert([5, 6, 7, 8, 9], 2)
    trie.insert([1, 2, 3, 5, 8, 13, 21], 3)
    return trie


@pytest.fixture(scope="session")
def tast_rows():
    return [
        ("test", 1),
        ("tent", 2),
        ("tost", 1),
    ]


@pytest.fixture
def tast_knn(tast_rows):
    return build_classifier(tast_rows)

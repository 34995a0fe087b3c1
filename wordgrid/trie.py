from __future__ import annotations

import logging
from typing import Iterable, Iterator

logger = logging.getLogger("wordgrid")

MIN_WORD_LENGTH = 2


class TrieNode:
    __slots__ = ("character", "word", "children")

    def __init__(self, character: str):
        self.character = character
        self.word: str | None = None
        self.children: dict[str, TrieNode] = {}

    def __repr__(self):
        return f"{self.character!r}: {sorted(self.children)!r}"


class Trie:
    """Prefix tree over dictionary words.

    ``roots`` holds the depth-1 entries; there is no sentinel root node, so
    "no current node" (``None``) stands for the root level when stepping.
    """

    def __init__(self):
        self.roots: dict[str, TrieNode] = {}
        self._size = 0

    def insert(self, word: str):
        word = word.strip().lower()
        if len(word) < MIN_WORD_LENGTH:
            return

        level = self.roots
        node = None
        for ch in word:
            node = level.get(ch)
            if node is None:
                node = TrieNode(ch)
                level[ch] = node
            level = node.children

        if node.word is None:
            self._size += 1
        node.word = word

    def step(self, node: TrieNode | None, ch: str) -> TrieNode | None:
        """Advance one character from ``node`` (or from the root level if None)."""
        if node is None:
            return self.roots.get(ch)
        return node.children.get(ch)

    def find(self, prefix: str) -> TrieNode | None:
        node = None
        for ch in prefix.lower():
            node = self.step(node, ch)
            if node is None:
                return None
        return node

    def words(self) -> Iterator[str]:
        stack = [self.roots[ch] for ch in sorted(self.roots, reverse=True)]
        while stack:
            node = stack.pop()
            if node.word is not None:
                yield node.word
            stack.extend(node.children[ch] for ch in sorted(node.children, reverse=True))

    def __contains__(self, word: str) -> bool:
        node = self.find(word) if word else None
        return node is not None and node.word is not None

    def __len__(self) -> int:
        return self._size


def build_trie(words: Iterable[str]) -> Trie:
    trie = Trie()
    for word in words:
        trie.insert(word)
    return trie


def load_trie(path: str) -> Trie:
    """Load a word list (one word per line) into a Trie.

    Raises OSError if the file can't be read; callers decide whether that is
    fatal or whether an empty Trie will do.
    """
    with open(path, "r", encoding="utf-8") as f:
        trie = build_trie(f)
    logger.info("Loaded %d words from %s", len(trie), path)
    return trie

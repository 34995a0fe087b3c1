from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, NamedTuple

import numpy as np

from wordgrid.grid import Grid
from wordgrid.trie import Trie, TrieNode

logger = logging.getLogger("wordgrid")

Coord = tuple[int, int]

# Neighbour scan order: row above left-to-right, then left and right, then row below.
NEIGHBOR_OFFSETS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


class Result(NamedTuple):
    word: str
    path: tuple[Coord, ...]

    def __str__(self):
        return f"{self.word}: {list(self.path)}"


class SearchEngine:
    """Trie-guided backtracking search for words on a letter grid.

    Every starting cell gets its own traversal with the trie position reset
    to the root level. Within a traversal the visited grid and the path are
    shared and restored on the way back out of each cell, so a cell is only
    marked while it is on the active path.
    """

    def __init__(self, trie: Trie):
        self.trie = trie
        self.walks = 0
        self.visited: np.ndarray | None = None

    def find_words(
        self,
        grid: Grid,
        workers: int = 1,
        cancel: threading.Event | None = None,
    ) -> list[Result]:
        """Return every (word, path) on the grid, in row-major starting-cell order.

        With ``workers > 1`` starting cells are searched on a thread pool, each
        with its own visited grid; results are merged back in starting-cell order.
        Setting ``cancel`` stops the search early and returns what was found so far.

        ``self.visited`` is the visited grid of the last sequential search; it is
        None after a parallel one, where each task owns a private grid.
        """
        starts = [(x, y) for y in range(grid.height) for x in range(grid.width)]
        self.walks = 0

        if workers > 1 and len(starts) > 1:
            def run(start: Coord):
                visited = np.zeros((grid.height, grid.width), dtype=bool)
                return self._search_from(grid, start, visited, cancel)

            with ThreadPoolExecutor(max_workers=workers) as pool:
                per_cell = list(pool.map(run, starts))
            self.visited = None
        else:
            self.visited = np.zeros((grid.height, grid.width), dtype=bool)
            per_cell = []
            for start in starts:
                if cancel is not None and cancel.is_set():
                    logger.info("Search cancelled before starting cell %s", start)
                    break
                per_cell.append(self._search_from(grid, start, self.visited, cancel))

        results: list[Result] = []
        for found, walks in per_cell:
            results.extend(found)
            self.walks += walks

        logger.debug("%d walks found %d results on %dx%d grid", self.walks, len(results), grid.width, grid.height)
        return results

    def _search_from(
        self,
        grid: Grid,
        start: Coord,
        visited: np.ndarray,
        cancel: threading.Event | None,
    ) -> tuple[list[Result], int]:
        trie = self.trie
        found: list[Result] = []
        path: list[Coord] = []
        walks = 0

        def walk(x: int, y: int, node: TrieNode | None):
            nonlocal walks
            if cancel is not None and cancel.is_set():
                return
            walks += 1

            if visited[y, x]:
                return
            visited[y, x] = True
            try:
                ch = grid.rows[y][x]
                nxt = trie.step(node, ch)
                if nxt is None:
                    if node is None:
                        logger.debug("%r not found in root of trie", ch)
                    return

                path.append((x, y))
                try:
                    if nxt.word is not None:
                        found.append(Result(nxt.word, tuple(path)))

                    for dx, dy in NEIGHBOR_OFFSETS:
                        nx, ny = x + dx, y + dy
                        if 0 <= nx < grid.width and 0 <= ny < grid.height:
                            walk(nx, ny, nxt)
                finally:
                    path.pop()
            finally:
                visited[y, x] = False

        walk(start[0], start[1], None)
        return found, walks


def find_words(
    grid: Grid,
    trie: Trie,
    workers: int = 1,
    cancel: threading.Event | None = None,
) -> list[Result]:
    return SearchEngine(trie).find_words(grid, workers=workers, cancel=cancel)


def unique_words(results: Iterable[Result]) -> list[str]:
    """Distinct words from a result sequence, longest first, then alphabetical."""
    return sorted({r.word for r in results}, key=lambda w: (-len(w), w))

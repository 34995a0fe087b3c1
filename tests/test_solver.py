import threading
import time
from collections import Counter

import pytest

from wordgrid.grid import Grid, make_rng
from wordgrid.solver import NEIGHBOR_OFFSETS, Result, SearchEngine, find_words, unique_words
from wordgrid.trie import Trie, build_trie


BOARD_4X4 = Grid([
    ["c", "a", "t", "s"],
    ["r", "e", "p", "o"],
    ["b", "o", "n", "e"],
    ["d", "i", "g", "s"],
])

WORDS = ["cat", "cats", "car", "care", "bone", "bones", "rep", "pen", "pone",
         "dig", "digs", "one", "ones", "ape", "nod", "nog", "son", "repo",
         "open", "nope", "peon", "sing", "sign", "at", "to"]


def _make_trie(words: list[str]) -> Trie:
    trie = Trie()
    for w in words:
        trie.insert(w)
    return trie


def _assert_valid(results: list[Result], grid: Grid, trie: Trie):
    for word, path in results:
        assert len(path) == len(word)
        assert len(set(path)) == len(path), f"{word} reuses a cell: {path}"
        for (x1, y1), (x2, y2) in zip(path, path[1:]):
            assert max(abs(x1 - x2), abs(y1 - y2)) == 1
        for x, y in path:
            assert grid.in_bounds(x, y)
        spelled = "".join(grid.cell(x, y) for x, y in path)
        assert spelled == word
        node = trie.find(spelled)
        assert node is not None and node.word == word


def test_cat_scenario():
    grid = Grid([["c", "a"], ["t", "s"]])
    trie = _make_trie(["cat", "cats", "at"])
    results = find_words(grid, trie)

    assert Result("cat", ((0, 0), (1, 0), (0, 1))) in results
    assert Result("cats", ((0, 0), (1, 0), (0, 1), (1, 1))) in results
    assert Result("at", ((1, 0), (0, 1))) in results
    assert {r.word for r in results} == {"cat", "cats", "at"}
    _assert_valid(results, grid, trie)


def test_cat_scenario_exact_order():
    grid = Grid([["c", "a"], ["t", "s"]])
    trie = _make_trie(["cat", "cats", "at"])
    results = find_words(grid, trie)
    # Row-major starting cells; "cat" is reported before its extension.
    assert results == [
        Result("cat", ((0, 0), (1, 0), (0, 1))),
        Result("cats", ((0, 0), (1, 0), (0, 1), (1, 1))),
        Result("at", ((1, 0), (0, 1))),
    ]


def test_basic_solve():
    trie = _make_trie(WORDS)
    results = find_words(BOARD_4X4, trie)
    words = {r.word for r in results}
    assert {"cat", "cats", "bone", "rep", "repo"} <= words
    _assert_valid(results, BOARD_4X4, trie)


def test_no_revisit():
    """A word requiring revisiting a cell should not be found."""
    grid = Grid([["a", "b"], ["c", "d"]])
    trie = _make_trie(["aba", "ab", "abc"])
    words = {r.word for r in find_words(grid, trie)}
    assert "aba" not in words
    assert "ab" in words
    assert "abc" in words


def test_no_wraparound():
    grid = Grid([["a", "x", "b"]])
    trie = _make_trie(["ab", "ba"])
    assert find_words(grid, trie) == []


def test_diagonal_adjacency():
    grid = Grid([["a", "x"], ["y", "b"]])
    trie = _make_trie(["ab", "xy"])
    results = find_words(grid, trie)
    assert Result("ab", ((0, 0), (1, 1))) in results
    assert Result("xy", ((1, 0), (0, 1))) in results


def test_duplicate_paths_are_reported():
    grid = Grid([["a", "b"], ["b", "a"]])
    trie = _make_trie(["ab"])
    results = find_words(grid, trie)
    assert Counter(r.word for r in results)["ab"] == 4
    assert len(set(results)) == 4


def test_empty_results_for_no_matches():
    grid = Grid([["z", "z"], ["z", "z"]])
    trie = _make_trie(["cat", "dog"])
    assert find_words(grid, trie) == []


def test_empty_trie_yields_nothing():
    assert find_words(BOARD_4X4, Trie()) == []
    assert find_words(BOARD_4X4, build_trie([])) == []


def test_single_cell_grid_yields_nothing():
    grid = Grid([["a"]])
    trie = _make_trie(["a", "aa", "ab"])
    assert find_words(grid, trie) == []


def test_visited_grid_is_clean_after_search():
    trie = _make_trie(WORDS)
    engine = SearchEngine(trie)
    engine.find_words(BOARD_4X4)
    assert engine.visited.shape == (4, 4)
    assert not engine.visited.any()


def test_walks_are_counted():
    trie = _make_trie(["cat"])
    engine = SearchEngine(trie)
    engine.find_words(Grid([["c", "a"], ["t", "s"]]))
    # One walk per starting cell, plus neighbours explored from "c" and "ca".
    assert engine.walks > 4


def test_idempotent():
    trie = _make_trie(WORDS)
    engine = SearchEngine(trie)
    first = engine.find_words(BOARD_4X4)
    second = engine.find_words(BOARD_4X4)
    assert first == second


def test_parallel_matches_sequential():
    grid = Grid.random(5, 5, "aeinorst", make_rng(7))
    trie = _make_trie(WORDS + ["tie", "tin", "ten", "rat", "art", "star", "rose", "nose", "note", "tone"])
    sequential = SearchEngine(trie)
    parallel = SearchEngine(trie)
    expected = sequential.find_words(grid)
    assert parallel.find_words(grid, workers=4) == expected
    assert parallel.walks == sequential.walks
    _assert_valid(expected, grid, trie)


def test_cancel_before_start_returns_nothing():
    trie = _make_trie(WORDS)
    engine = SearchEngine(trie)
    cancel = threading.Event()
    cancel.set()
    assert engine.find_words(BOARD_4X4, cancel=cancel) == []
    assert not engine.visited.any()
    assert engine.find_words(BOARD_4X4, workers=2, cancel=cancel) == []
    assert engine.visited is None


def _cancel_after_steps(trie: Trie, cancel: threading.Event, steps: int):
    """Make the trie set ``cancel`` on its ``steps``-th lookup."""
    step = trie.step
    calls = 0

    def counting_step(node, ch):
        nonlocal calls
        calls += 1
        if calls == steps:
            cancel.set()
        return step(node, ch)

    trie.step = counting_step


def test_cancel_mid_search_keeps_results_found_so_far():
    grid = Grid([["c", "a"], ["t", "s"]])
    trie = _make_trie(["cat", "cats", "at"])
    cancel = threading.Event()
    # Lookups: "c", "ca", "cat"; the search stops right after reporting "cat".
    _cancel_after_steps(trie, cancel, 3)
    engine = SearchEngine(trie)

    results = engine.find_words(grid, cancel=cancel)

    assert results == [Result("cat", ((0, 0), (1, 0), (0, 1)))]
    assert cancel.is_set()
    assert not engine.visited.any()


@pytest.mark.parametrize("steps", [1, 2, 5, 12, 40, 100])
def test_cancel_mid_search_returns_prefix(steps):
    expected = find_words(BOARD_4X4, _make_trie(WORDS))

    trie = _make_trie(WORDS)
    cancel = threading.Event()
    _cancel_after_steps(trie, cancel, steps)
    engine = SearchEngine(trie)
    results = engine.find_words(BOARD_4X4, cancel=cancel)

    assert results == expected[:len(results)]
    assert not engine.visited.any()

    # Nothing leaks into the next search on the same engine.
    cancel.clear()
    assert engine.find_words(BOARD_4X4, cancel=cancel) == expected


def test_neighbor_order():
    assert NEIGHBOR_OFFSETS[:3] == ((-1, -1), (0, -1), (1, -1))
    assert NEIGHBOR_OFFSETS[3:5] == ((-1, 0), (1, 0))
    assert NEIGHBOR_OFFSETS[5:] == ((-1, 1), (0, 1), (1, 1))


def test_result_str():
    assert str(Result("at", ((1, 0), (0, 1)))) == "at: [(1, 0), (0, 1)]"


def test_unique_words_sort_order():
    results = [
        Result("at", ((1, 0), (0, 1))),
        Result("cats", ((0, 0), (1, 0), (0, 1), (1, 1))),
        Result("cat", ((0, 0), (1, 0), (0, 1))),
        Result("at", ((1, 1), (0, 0))),
        Result("as", ((1, 0), (1, 1))),
    ]
    assert unique_words(results) == ["cats", "cat", "as", "at"]


def test_performance_with_generated_dictionary(tmp_path):
    """Solve a 4x4 board with a few thousand words in well under a second."""
    import itertools
    from wordgrid.trie import load_trie

    dict_file = tmp_path / "dict.txt"
    words = []
    letters = "abcdefghijklmnoprstue"
    for length in range(3, 5):
        for combo in itertools.combinations(letters, length):
            words.append("".join(combo))
            if len(words) > 5000:
                break
        if len(words) > 5000:
            break
    dict_file.write_text("\n".join(words))
    trie = load_trie(str(dict_file))

    grid = Grid([
        ["t", "a", "p", "e"],
        ["i", "n", "s", "o"],
        ["e", "d", "r", "l"],
        ["k", "g", "h", "m"],
    ])

    start = time.perf_counter()
    results = find_words(grid, trie)
    elapsed = time.perf_counter() - start

    assert elapsed < 1.0, f"Search took {elapsed:.3f}s"
    assert len(results) > 0
    _assert_valid(results, grid, trie)

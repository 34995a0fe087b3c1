"""
Find every dictionary word on a letter grid.

Usage:
    wordgrid --size 5
    wordgrid --board "cat/ats/tsa" --dictionary words.txt
    wordgrid --size 6 --seed 42 --workers 4 --unique
"""
import argparse
import logging
import sys

from wordgrid.grid import Grid, make_rng
from wordgrid.metrics import StageTimer
from wordgrid.settings import settings
from wordgrid.solver import SearchEngine, unique_words
from wordgrid.trie import load_trie

logger = logging.getLogger("wordgrid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordgrid", description="Find all dictionary words on a letter grid")
    parser.add_argument("--size", type=int, default=settings.GRID_SIZE,
                        help="Random grid is size x size (ignored with --board)")
    parser.add_argument("--board", type=str, default=None,
                        help="Explicit grid, rows separated by '/' or spaces, e.g. 'ca/ts'")
    parser.add_argument("--dictionary", type=str, default=str(settings.DICTIONARY_PATH),
                        help="Path to a word list with one word per line")
    parser.add_argument("--seed", type=int, default=settings.RANDOM_SEED,
                        help="Random seed for grid population (-1 for unseeded)")
    parser.add_argument("--workers", type=int, default=settings.WORKERS,
                        help="Threads used to search starting cells")
    parser.add_argument("--unique", action="store_true",
                        help="Print each distinct word once instead of every path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.DEBUG else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.size < 1:
        parser.error(f"--size must be positive, got {args.size}")
    if args.workers < 1:
        parser.error(f"--workers must be positive, got {args.workers}")

    if args.board:
        try:
            grid = Grid.parse(args.board)
        except ValueError as e:
            parser.error(f"invalid --board: {e}")
    else:
        grid = Grid.random(args.size, args.size, settings.ALPHABET, make_rng(args.seed))

    timer = StageTimer()
    try:
        with timer.stage("load_trie"):
            trie = load_trie(args.dictionary)
    except OSError as e:
        logger.error("Could not load dictionary %s: %s", args.dictionary, e)
        return 1
    print("loaded trie in", f"{timer.elapsed_ms('load_trie')}ms")

    print(grid)

    engine = SearchEngine(trie)
    with timer.stage("solve"):
        results = engine.find_words(grid, workers=args.workers)
    print(engine.walks, "walks found", len(results), "words in", f"{timer.elapsed_ms('solve')}ms")

    if args.unique:
        for word in unique_words(results):
            print(word)
    else:
        for result in results:
            print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())

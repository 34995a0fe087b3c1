from __future__ import annotations

import re
from typing import Sequence

import numpy as np

FULL_ALPHABET = "abcdefghijklmnopqrstuvwxyz"


def make_rng(seed: int = -1) -> np.random.Generator:
    """Build the random source for grid population. A negative seed means unseeded."""
    return np.random.default_rng(None if seed < 0 else seed)


class Grid:
    """Rectangular, read-only array of single lowercase characters, indexed ``rows[y][x]``."""

    def __init__(self, rows: Sequence[Sequence[str]]):
        if not rows or not rows[0]:
            raise ValueError("Grid must have at least one row and one column")

        width = len(rows[0])
        cleaned = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")
            for x, cell in enumerate(row):
                if not isinstance(cell, str) or len(cell) != 1:
                    raise ValueError(f"Cell ({x}, {y}) must be a single character, got {cell!r}")
            cleaned.append(tuple(cell.lower() for cell in row))

        self.rows: tuple[tuple[str, ...], ...] = tuple(cleaned)
        self.width = width
        self.height = len(cleaned)

    @classmethod
    def parse(cls, text: str) -> Grid:
        """Parse rows separated by '/' or whitespace, e.g. ``"ca/ts"``."""
        rows = [list(row) for row in re.split(r"[/\s]+", text.strip()) if row]
        return cls(rows)

    @classmethod
    def random(cls, width: int, height: int, alphabet: str, rng: np.random.Generator) -> Grid:
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        if not alphabet:
            raise ValueError("Alphabet must not be empty")
        letters = np.array(list(alphabet))
        picks = rng.integers(0, len(letters), size=(height, width))
        return cls(letters[picks].tolist())

    def cell(self, x: int, y: int) -> str:
        return self.rows[y][x]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def to_lists(self) -> list[list[str]]:
        return [list(row) for row in self.rows]

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self):
        return hash(self.rows)

    def __repr__(self):
        return f"Grid({'/'.join(''.join(row) for row in self.rows)!r})"

    def __str__(self):
        border = "+" + "-" * self.width + "+"
        lines = [border]
        lines.extend("|" + "".join(row) + "|" for row in self.rows)
        lines.append(border)
        return "\n".join(lines) + "\n"

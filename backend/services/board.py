"""3x3 tic-tac-toe grid backed by the key-value store."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from models import EMPTY_SQUARE, GRID_SIZE, INSTRUCTION_LABELS, PLAYER_MARKERS, SQUARE_COUNT, PlayerNumber
from services.store import KeyValueStore, StoreError

# A move is a single digit naming one of the squares; "05", " 5" and "5.0" are not moves.
_SQUARE_PATTERN = re.compile(rf"[1-{SQUARE_COUNT}]")


def _as_player(value: Any) -> PlayerNumber | None:
    if isinstance(value, bool):
        return None
    try:
        return PlayerNumber(value)
    except ValueError:
        return None


def _as_square(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 1 <= value <= SQUARE_COUNT else None
    if isinstance(value, str) and _SQUARE_PATTERN.fullmatch(value):
        return int(value)
    return None


def _winning_lines() -> Iterator[tuple[int, ...]]:
    """Row i and column i for each i, then both diagonals. Squares are numbered row-major from 1."""
    for i in range(GRID_SIZE):
        yield tuple(i * GRID_SIZE + j + 1 for j in range(GRID_SIZE))
        yield tuple(j * GRID_SIZE + i + 1 for j in range(GRID_SIZE))
    yield tuple(i * GRID_SIZE + i + 1 for i in range(GRID_SIZE))
    yield tuple((GRID_SIZE - 1 - i) * GRID_SIZE + i + 1 for i in range(GRID_SIZE))


class Board:
    """
    Squares 1-9, row-major:

        1 2 3
        4 5 6
        7 8 9

    The grid is a sparse {square: marker} mapping; a missing square is empty.
    Every successful mark is written back to the store immediately.
    """

    def __init__(self, session_id: str, store: KeyValueStore) -> None:
        self._store = store
        self._key = f"{session_id}:board"
        self._squares: dict[int, str] = self._load()

    def _load(self) -> dict[int, str]:
        raw = self._store.get(self._key, {})
        if not isinstance(raw, dict):
            raise StoreError(f"Board state at {self._key!r} is not a mapping")
        markers = tuple(PLAYER_MARKERS.values())
        squares: dict[int, str] = {}
        for square, marker in raw.items():
            try:
                number = int(square)
            except ValueError as exc:
                raise StoreError(f"Board state at {self._key!r} has a non-numeric square") from exc
            if not 1 <= number <= SQUARE_COUNT:
                raise StoreError(f"Board state at {self._key!r} has square {number} off the grid")
            if marker not in markers:
                raise StoreError(f"Board state at {self._key!r} has unknown marker {marker!r}")
            squares[number] = marker
        return squares

    def _save(self) -> None:
        # JSON object keys are strings; _load turns them back into ints.
        self._store.set(self._key, {str(square): marker for square, marker in self._squares.items()})

    def render(self, show_labels: bool = False) -> str:
        """
        Three newline-terminated rows of symbols.

        With show_labels the fixed help grid is rendered instead of the game:
        numbered squares plus an example marker on square 4.
        """
        rows = []
        for start in range(1, SQUARE_COUNT + 1, GRID_SIZE):
            squares = range(start, start + GRID_SIZE)
            if show_labels:
                rows.append("".join(INSTRUCTION_LABELS[s] for s in squares))
            else:
                rows.append("".join(self._symbol(s) for s in squares))
        return "".join(f"{row}\n" for row in rows)

    def mark_square(self, player: PlayerNumber | int, square: Any) -> bool:
        """
        Claim a square for a player.

        Returns False without touching the board when the player is not 1/2,
        the square is not a single digit 1-9, or the square is already taken.
        """
        player_number = _as_player(player)
        square_number = _as_square(square)
        if player_number is None or square_number is None or self.is_square_marked(square_number):
            return False

        self._squares[square_number] = PLAYER_MARKERS[player_number]
        self._save()
        return True

    def is_square_marked(self, square: Any) -> bool:
        square_number = _as_square(square)
        return square_number is not None and square_number in self._squares

    def is_full(self) -> bool:
        return len(self._squares) == SQUARE_COUNT

    def has_winning_line(self, player: PlayerNumber | int) -> bool:
        player_number = _as_player(player)
        if player_number is None:
            return False
        marker = PLAYER_MARKERS[player_number]
        return any(
            all(self._squares.get(square) == marker for square in line)
            for line in _winning_lines()
        )

    def clear(self) -> None:
        self._squares = {}
        self._store.delete(self._key)

    def marked_squares(self) -> dict[int, str]:
        return dict(self._squares)

    def _symbol(self, square: int) -> str:
        return self._squares.get(square, EMPTY_SQUARE)

from .game import BROADCAST_OUTCOMES, GameResponse, Outcome, PlayerNumber
from .symbols import EMPTY_SQUARE, GRID_SIZE, INSTRUCTION_LABELS, PLAYER_MARKERS, SQUARE_COUNT

__all__ = [
    "PlayerNumber",
    "Outcome",
    "GameResponse",
    "BROADCAST_OUTCOMES",
    "GRID_SIZE",
    "SQUARE_COUNT",
    "PLAYER_MARKERS",
    "EMPTY_SQUARE",
    "INSTRUCTION_LABELS",
]

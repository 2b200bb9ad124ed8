from .game import PlayerNumber

GRID_SIZE = 3
SQUARE_COUNT = GRID_SIZE * GRID_SIZE

PLAYER_MARKERS = {
    PlayerNumber.ONE: ":x:",
    PlayerNumber.TWO: ":o:",
}

EMPTY_SQUARE = ":rooster:"

# Help grid: numbered squares, with square 4 showing an example move.
INSTRUCTION_LABELS = {
    1: ":one:",
    2: ":two:",
    3: ":three:",
    4: PLAYER_MARKERS[PlayerNumber.ONE],
    5: ":five:",
    6: ":six:",
    7: ":seven:",
    8: ":eight:",
    9: ":nine:",
}

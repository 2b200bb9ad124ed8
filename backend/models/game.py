from dataclasses import dataclass
from enum import Enum, IntEnum


class PlayerNumber(IntEnum):
    ONE = 1
    TWO = 2

    def opposite(self) -> "PlayerNumber":
        return PlayerNumber.TWO if self is PlayerNumber.ONE else PlayerNumber.ONE


class Outcome(str, Enum):
    AWAITING_CHALLENGE = "start"
    SHOW_INSTRUCTIONS = "instructions"
    NEW_GAME_STARTED = "new"
    PLAYERS_TURN = "next"
    WRONG_TURN = "wrong"
    INVALID_MOVE = "invalid"
    PLAYER_WINS = "win"
    DRAW_GAME = "draw"


# Outcomes posted to the whole channel; the rest go to the requester only.
BROADCAST_OUTCOMES = frozenset(
    {
        Outcome.NEW_GAME_STARTED,
        Outcome.PLAYERS_TURN,
        Outcome.PLAYER_WINS,
        Outcome.DRAW_GAME,
    }
)


@dataclass(frozen=True)
class GameResponse:
    outcome: Outcome
    text: str                  # title, board and status message
    broadcast: bool            # visible to the whole channel

"""The two participants of a channel's game and whose turn it is."""

from __future__ import annotations

from models import PlayerNumber
from services.store import KeyValueStore, StoreError

NOT_A_PLAYER = 0


class PlayerRegistry:
    """
    Player 1 is whoever issued the challenge, player 2 is the user they named.

    Identities default to None so an unchallenged channel has no players;
    the turn defaults to player 1.
    """

    def __init__(self, session_id: str, store: KeyValueStore) -> None:
        self._store = store
        self._keys = {
            PlayerNumber.ONE: f"{session_id}:p1",
            PlayerNumber.TWO: f"{session_id}:p2",
        }
        self._turn_key = f"{session_id}:playerTurn"

        self._identities: dict[PlayerNumber, str | None] = {
            number: store.get(key, None) for number, key in self._keys.items()
        }
        raw_turn = store.get(self._turn_key, int(PlayerNumber.ONE))
        try:
            self._turn = PlayerNumber(raw_turn)
        except ValueError as exc:
            raise StoreError(f"Turn at {self._turn_key!r} is {raw_turn!r}, expected 1 or 2") from exc

    def start_challenge(self, initiator: str, challenged: str) -> None:
        """Record both players; a leading '@' mention is dropped since users may or may not type it."""
        for number, identity in ((PlayerNumber.ONE, initiator), (PlayerNumber.TWO, challenged)):
            name = identity.lstrip("@")
            self._identities[number] = name
            self._store.set(self._keys[number], name)

    def get_identity(self, player: PlayerNumber | int) -> str | None:
        try:
            return self._identities[PlayerNumber(player)]
        except ValueError:
            return None

    def resolve_player_number(self, identity: str | None) -> int:
        """1 or 2 for a participant, NOT_A_PLAYER (0) for anyone else."""
        if identity is not None:
            for number in PlayerNumber:
                if self._identities[number] == identity:
                    return number
        return NOT_A_PLAYER

    def is_allowed_to_move(self, identity: str | None) -> bool:
        return self.resolve_player_number(identity) == self._turn

    def toggle_turn(self) -> None:
        self._set_turn(self._turn.opposite())

    def reset_turn(self) -> None:
        self._set_turn(PlayerNumber.ONE)

    def current_turn(self) -> PlayerNumber:
        return self._turn

    def current_turn_identity(self) -> str | None:
        return self._identities[self._turn]

    def has_players(self) -> bool:
        return all(identity is not None for identity in self._identities.values())

    def clear(self) -> None:
        """Forget both players. The turn is left alone; callers reset it separately."""
        for number, key in self._keys.items():
            self._identities[number] = None
            self._store.delete(key)

    def _set_turn(self, turn: PlayerNumber) -> None:
        self._turn = turn
        self._store.set(self._turn_key, int(turn))

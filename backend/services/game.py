"""
Slash-command game logic: turns "/ctt <text>" from a user into a state change and a reply.

Commands:
    /ctt                      show the help grid
    /ctt challenge @user      start a new game against @user
    /ctt status               show the board and whose turn it is
    /ctt <1-9>                mark a square
"""

from __future__ import annotations

import logging

from models import BROADCAST_OUTCOMES, GameResponse, Outcome
from services.board import Board
from services.players import PlayerRegistry
from services.store import KeyValueStore

logger = logging.getLogger(__name__)

COMMAND_CHALLENGE = "challenge"
COMMAND_STATUS = "status"

INSTRUCTIONS = (
    "*Help:* _/ctt_\n"
    "*Game Status:* _/ctt status_\n"
    "*New Game:* _/ctt challenge @userName_\n"
    "*Example Move:* _/ctt 4 (Places an :x: in the :four: position)_\n"
    "*Win Condition*: _3 in a row wins!_"
)


class GameController:
    """
    Handles one command for one channel.

    Board and players are rebuilt from the store on construction and write
    every change straight back, so a controller is meant to be thrown away
    after process_command().
    """

    def __init__(self, session_id: str, store: KeyValueStore) -> None:
        self.session_id = session_id
        self.board = Board(session_id, store)
        self.players = PlayerRegistry(session_id, store)

    def process_command(self, identity: str, command_text: str | None = None) -> GameResponse:
        """
        Apply a command and build the reply.

        The reply is composed before a finished game is reset, so the final
        board and the winner's name still reach the channel.
        """
        outcome = self._apply(identity, command_text)
        response = self._compose(outcome)
        if outcome in (Outcome.PLAYER_WINS, Outcome.DRAW_GAME):
            self.reset_game()

        logger.info(
            "[game] session=%s user=%s command=%r outcome=%s",
            self.session_id,
            identity,
            command_text,
            outcome.name,
        )
        return response

    def reset_game(self) -> None:
        self.players.clear()
        self.players.reset_turn()
        self.board.clear()

    def _apply(self, identity: str, command_text: str | None) -> Outcome:
        if not command_text:
            return Outcome.SHOW_INSTRUCTIONS

        tokens = command_text.split(" ")
        if tokens[0] == COMMAND_CHALLENGE and len(tokens) > 1 and tokens[1]:
            self.reset_game()
            self.players.start_challenge(identity, tokens[1])
            return Outcome.NEW_GAME_STARTED

        if not self.players.has_players():
            return Outcome.AWAITING_CHALLENGE

        if tokens[0] == COMMAND_STATUS:
            return Outcome.PLAYERS_TURN

        return self._move(identity, tokens[0])

    def _move(self, identity: str, square: str) -> Outcome:
        if not self.players.is_allowed_to_move(identity):
            return Outcome.WRONG_TURN

        turn = self.players.current_turn()
        if not self.board.mark_square(turn, square):
            return Outcome.INVALID_MOVE

        if self.board.has_winning_line(turn):
            return Outcome.PLAYER_WINS
        if self.board.is_full():
            return Outcome.DRAW_GAME

        self.players.toggle_turn()
        return Outcome.PLAYERS_TURN

    def _compose(self, outcome: Outcome) -> GameResponse:
        show_instructions = outcome is Outcome.SHOW_INSTRUCTIONS
        title = ""
        if self.players.has_players() and not show_instructions:
            title = self._title()

        board = self.board.render(show_labels=show_instructions)
        message = self._message(outcome)
        return GameResponse(
            outcome=outcome,
            text=f"{title}\n{board}\n{message}",
            broadcast=outcome in BROADCAST_OUTCOMES,
        )

    def _title(self) -> str:
        return f"*{self.players.get_identity(1)} vs {self.players.get_identity(2)}*"

    def _message(self, outcome: Outcome) -> str:
        name = self.players.current_turn_identity()
        messages = {
            Outcome.AWAITING_CHALLENGE: (
                "*Challenge someone to begin a game of Chick Tac Toe:*\n_/ctt challenge @userName_"
            ),
            Outcome.SHOW_INSTRUCTIONS: INSTRUCTIONS,
            Outcome.NEW_GAME_STARTED: f"*Starting a new game... 3 in a row wins.*\n_{name}: It's your turn._",
            Outcome.PLAYERS_TURN: f"_{name}: It's your turn._",
            Outcome.WRONG_TURN: "_You are not allowed to take this turn._",
            Outcome.INVALID_MOVE: f"_{name}: Invalid Move! Please try again._",
            Outcome.PLAYER_WINS: f"*{name} wins a chicken dinner!!* :poultry_leg:",
            Outcome.DRAW_GAME: "*This game is a draw! :chicken:*",
        }
        return f"{messages[outcome]}\n"

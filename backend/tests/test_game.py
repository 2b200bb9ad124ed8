"""End-to-end command handling against an in-memory store."""

from __future__ import annotations

import pytest

from models import EMPTY_SQUARE, INSTRUCTION_LABELS, PLAYER_MARKERS, Outcome, PlayerNumber
from services.board import Board
from services.game import GameController
from services.players import PlayerRegistry
from services.store import MemoryStore

SESSION = "C123"
X = PLAYER_MARKERS[PlayerNumber.ONE]
O = PLAYER_MARKERS[PlayerNumber.TWO]
EMPTY_BOARD = (EMPTY_SQUARE * 3 + "\n") * 3


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


def _run(store: MemoryStore, user: str, text: str | None):
    return GameController(SESSION, store).process_command(user, text)


def _challenge(store: MemoryStore, initiator: str = "alice", challenged: str = "bob") -> None:
    _run(store, initiator, f"challenge {challenged}")


def _play(store: MemoryStore, moves: list[tuple[str, str]]):
    response = None
    for user, square in moves:
        response = _run(store, user, square)
    return response


@pytest.mark.parametrize("text", [None, ""])
def test_empty_command_shows_instructions(store: MemoryStore, text: str | None) -> None:
    response = _run(store, "alice", text)

    assert response.outcome is Outcome.SHOW_INSTRUCTIONS
    assert response.broadcast is False
    title, row1, row2, row3, blank, message = response.text.split("\n", 5)
    assert title == ""
    assert row1 == INSTRUCTION_LABELS[1] + INSTRUCTION_LABELS[2] + INSTRUCTION_LABELS[3]
    assert row2 == X + INSTRUCTION_LABELS[5] + INSTRUCTION_LABELS[6]
    assert row3 == INSTRUCTION_LABELS[7] + INSTRUCTION_LABELS[8] + INSTRUCTION_LABELS[9]
    assert blank == ""
    assert "/ctt challenge @userName" in message


def test_instructions_have_no_title_even_mid_game(store: MemoryStore) -> None:
    _challenge(store)
    response = _run(store, "alice", "")
    assert response.text.startswith("\n")
    assert "alice vs bob" not in response.text


def test_challenge_starts_new_game(store: MemoryStore) -> None:
    response = _run(store, "alice", "challenge @bob")

    assert response.outcome is Outcome.NEW_GAME_STARTED
    assert response.broadcast is True
    assert response.text == (
        "*alice vs bob*\n"
        f"{EMPTY_BOARD}\n"
        "*Starting a new game... 3 in a row wins.*\n_alice: It's your turn._\n"
    )

    players = PlayerRegistry(SESSION, store)
    assert players.get_identity(1) == "alice"
    assert players.get_identity(2) == "bob"
    assert players.current_turn() is PlayerNumber.ONE
    assert Board(SESSION, store).marked_squares() == {}


def test_challenge_resets_game_in_progress(store: MemoryStore) -> None:
    _challenge(store)
    _play(store, [("alice", "1"), ("bob", "5")])

    response = _run(store, "carol", "challenge dave")

    assert response.outcome is Outcome.NEW_GAME_STARTED
    assert "*carol vs dave*" in response.text
    assert Board(SESSION, store).marked_squares() == {}
    players = PlayerRegistry(SESSION, store)
    assert players.current_turn() is PlayerNumber.ONE
    assert players.resolve_player_number("alice") == 0


@pytest.mark.parametrize("text", ["challenge", "challenge ", "5", "status"])
def test_without_players_a_challenge_is_required(store: MemoryStore, text: str) -> None:
    response = _run(store, "alice", text)

    assert response.outcome is Outcome.AWAITING_CHALLENGE
    assert response.broadcast is False
    assert response.text.startswith(f"\n{EMPTY_BOARD}\n")
    assert "Challenge someone" in response.text
    assert not PlayerRegistry(SESSION, store).has_players()


def test_status_redisplays_without_mutation(store: MemoryStore) -> None:
    _challenge(store)
    _run(store, "alice", "5")
    before = Board(SESSION, store).marked_squares()

    response = _run(store, "carol", "status")

    assert response.outcome is Outcome.PLAYERS_TURN
    assert response.broadcast is True
    assert "*alice vs bob*" in response.text
    assert "_bob: It's your turn._" in response.text
    assert Board(SESSION, store).marked_squares() == before
    assert PlayerRegistry(SESSION, store).current_turn() is PlayerNumber.TWO


def test_move_marks_square_and_passes_turn(store: MemoryStore) -> None:
    _challenge(store)

    response = _run(store, "alice", "5")

    assert response.outcome is Outcome.PLAYERS_TURN
    assert response.broadcast is True
    e = EMPTY_SQUARE
    assert response.text == f"*alice vs bob*\n{e}{e}{e}\n{e}{X}{e}\n{e}{e}{e}\n\n_bob: It's your turn._\n"
    assert Board(SESSION, store).marked_squares() == {5: X}
    assert PlayerRegistry(SESSION, store).current_turn() is PlayerNumber.TWO


def test_move_uses_only_first_token(store: MemoryStore) -> None:
    _challenge(store)
    response = _run(store, "alice", "3 please")
    assert response.outcome is Outcome.PLAYERS_TURN
    assert Board(SESSION, store).marked_squares() == {3: X}


@pytest.mark.parametrize("user", ["bob", "carol"])
def test_out_of_turn_move_is_rejected(store: MemoryStore, user: str) -> None:
    _challenge(store)

    response = _run(store, user, "5")

    assert response.outcome is Outcome.WRONG_TURN
    assert response.broadcast is False
    assert "*alice vs bob*" in response.text
    assert "not allowed to take this turn" in response.text
    assert Board(SESSION, store).marked_squares() == {}
    assert PlayerRegistry(SESSION, store).current_turn() is PlayerNumber.ONE


@pytest.mark.parametrize("square", ["0", "10", "x", "05", "-1"])
def test_invalid_square_keeps_turn(store: MemoryStore, square: str) -> None:
    _challenge(store)

    response = _run(store, "alice", square)

    assert response.outcome is Outcome.INVALID_MOVE
    assert response.broadcast is False
    assert "_alice: Invalid Move! Please try again._" in response.text
    assert PlayerRegistry(SESSION, store).current_turn() is PlayerNumber.ONE


def test_taken_square_is_invalid(store: MemoryStore) -> None:
    _challenge(store)
    _run(store, "alice", "5")

    response = _run(store, "bob", "5")

    assert response.outcome is Outcome.INVALID_MOVE
    assert "_bob: Invalid Move!" in response.text
    assert Board(SESSION, store).marked_squares() == {5: X}
    assert PlayerRegistry(SESSION, store).current_turn() is PlayerNumber.TWO


def test_winning_move_shows_final_board_then_resets(store: MemoryStore) -> None:
    _challenge(store)

    response = _play(store, [("alice", "1"), ("bob", "4"), ("alice", "2"), ("bob", "5"), ("alice", "3")])

    assert response.outcome is Outcome.PLAYER_WINS
    assert response.broadcast is True
    assert response.text.startswith(f"*alice vs bob*\n{X}{X}{X}\n{O}{O}{EMPTY_SQUARE}\n")
    assert "*alice wins a chicken dinner!!*" in response.text

    players = PlayerRegistry(SESSION, store)
    assert not players.has_players()
    assert players.current_turn() is PlayerNumber.ONE
    assert Board(SESSION, store).marked_squares() == {}
    assert _run(store, "alice", "5").outcome is Outcome.AWAITING_CHALLENGE


def test_second_player_can_win(store: MemoryStore) -> None:
    _challenge(store)

    response = _play(
        store,
        [("alice", "1"), ("bob", "3"), ("alice", "2"), ("bob", "5"), ("alice", "9"), ("bob", "7")],
    )

    assert response.outcome is Outcome.PLAYER_WINS
    assert "*bob wins a chicken dinner!!*" in response.text
    assert PlayerRegistry(SESSION, store).current_turn() is PlayerNumber.ONE


def test_full_board_without_line_is_a_draw(store: MemoryStore) -> None:
    _challenge(store)
    # Ends as X O X / X O O / O X X
    moves = [
        ("alice", "1"),
        ("bob", "2"),
        ("alice", "3"),
        ("bob", "5"),
        ("alice", "4"),
        ("bob", "6"),
        ("alice", "8"),
        ("bob", "7"),
        ("alice", "9"),
    ]

    response = _play(store, moves)

    assert response.outcome is Outcome.DRAW_GAME
    assert response.broadcast is True
    assert f"{X}{O}{X}\n{X}{O}{O}\n{O}{X}{X}\n" in response.text
    assert "*This game is a draw! :chicken:*" in response.text
    assert "*alice vs bob*" in response.text
    assert not PlayerRegistry(SESSION, store).has_players()
    assert Board(SESSION, store).marked_squares() == {}


def test_every_outcome_has_distinct_message(store: MemoryStore) -> None:
    script = [
        ("alice", ""),
        ("alice", "5"),
        ("alice", "challenge bob"),
        ("bob", "5"),
        ("alice", "x"),
        ("alice", "1"),
        ("bob", "4"),
        ("alice", "2"),
        ("bob", "5"),
        ("alice", "3"),
        ("alice", "challenge bob"),
        ("alice", "1"),
        ("bob", "2"),
        ("alice", "3"),
        ("bob", "5"),
        ("alice", "4"),
        ("bob", "6"),
        ("alice", "8"),
        ("bob", "7"),
        ("alice", "9"),
    ]
    messages: dict[Outcome, str] = {}
    for user, text in script:
        response = _run(store, user, text)
        messages[response.outcome] = response.text.split("\n", 5)[5]

    assert set(messages) == set(Outcome)
    assert all(message.strip() for message in messages.values())
    assert len(set(messages.values())) == len(Outcome)


def test_sessions_are_independent(store: MemoryStore) -> None:
    GameController("C1", store).process_command("alice", "challenge bob")
    response = GameController("C2", store).process_command("alice", "5")
    assert response.outcome is Outcome.AWAITING_CHALLENGE

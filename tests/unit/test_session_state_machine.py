"""Join/move/disconnect transitions of the connection session state machine."""

from __future__ import annotations

import pytest

from connectfour.engine.board import COLUMNS
from connectfour.engine.board import ROWS
from connectfour.engine.board import create_board
from connectfour.ws.session import OPPONENT_DISCONNECTED
from connectfour.ws.session import Seat
from connectfour.ws.session import handle_disconnect
from connectfour.ws.session import handle_frame

from session_testkit import frames_for
from session_testkit import join
from session_testkit import move
from session_testkit import new_session
from session_testkit import pair
from session_testkit import play_columns

# Column fill order that ends in a full board with no line of four.
DRAW_SEQUENCE = (
    [0, 2, 2, 0, 0, 2, 2, 0, 0, 2, 2, 0]
    + [1, 3, 3, 1, 1, 3, 3, 1, 1, 3, 3, 1]
    + [4, 6, 6, 4, 4, 6, 6, 4, 4, 6, 6, 4]
    + [5] * 6
)


def _error(message: str) -> dict[str, str]:
    return {"type": "error", "message": message}


def test_first_join_creates_room_and_waits(registry) -> None:
    session = new_session("p0")

    dispatch = join(registry, session, "r1")

    assert frames_for(dispatch, session) == [{"type": "joined", "room": "r1"}]
    assert session.seat == Seat(room_key="r1", slot=0)
    room = registry.get_room("r1")
    assert room is not None
    assert room.players == [session.connection]
    assert room.is_active is False


def test_second_join_sends_start_then_update_to_both_players(registry) -> None:
    first = new_session("p0")
    second = new_session("p1")
    join(registry, first, "r1")

    dispatch = join(registry, second, "r1")

    empty = create_board()
    assert frames_for(dispatch, first) == [
        {"type": "start", "playerIndex": 0},
        {"type": "update", "board": empty, "current": 0},
    ]
    assert frames_for(dispatch, second) == [
        {"type": "joined", "room": "r1"},
        {"type": "start", "playerIndex": 1},
        {"type": "update", "board": empty, "current": 0},
    ]
    assert second.seat == Seat(room_key="r1", slot=1)


def test_third_join_is_rejected_and_existing_players_unaffected(registry) -> None:
    first, second = pair(registry)
    intruder = new_session("p2")

    dispatch = join(registry, intruder, "r1")

    assert frames_for(dispatch, intruder) == [_error("room full")]
    assert frames_for(dispatch, first) == []
    assert frames_for(dispatch, second) == []
    assert intruder.seat is None
    assert registry.get_room("r1").players == [first.connection, second.connection]


def test_join_while_seated_is_rejected(registry) -> None:
    session = new_session("p0")
    join(registry, session, "r1")

    dispatch = join(registry, session, "r2")

    assert frames_for(dispatch, session) == [_error("already in a room")]
    assert "r2" not in registry
    assert session.seat == Seat(room_key="r1", slot=0)


def test_missing_room_key_joins_the_empty_key(registry) -> None:
    session = new_session("p0")

    dispatch = handle_frame(registry, session, '{"type": "join"}')

    assert frames_for(dispatch, session) == [{"type": "joined", "room": ""}]
    assert "" in registry


def test_reference_scenario_two_moves_in_column_three(registry) -> None:
    first, second = pair(registry)

    dispatch = move(registry, first, 3)

    for session in (first, second):
        frames = frames_for(dispatch, session)
        assert len(frames) == 1
        assert frames[0]["type"] == "moved"
        assert frames[0]["current"] == 1
        assert frames[0]["board"][5][3] == 0

    dispatch = move(registry, second, 3)

    for session in (first, second):
        (frame,) = frames_for(dispatch, session)
        assert frame["type"] == "moved"
        assert frame["current"] == 0
        assert frame["board"][5][3] == 0
        assert frame["board"][4][3] == 1


def test_current_always_flips_to_the_slot_that_did_not_move(registry) -> None:
    players = pair(registry)
    columns = [0, 1, 2, 3, 4, 5, 6, 0, 1, 2]

    for index, column in enumerate(columns):
        mover = index % 2
        dispatch = move(registry, players[mover], column)
        (frame,) = frames_for(dispatch, players[0])
        assert frame["type"] == "moved"
        assert frame["current"] == 1 - mover


def test_out_of_turn_move_is_rejected_and_board_unchanged(registry) -> None:
    first, second = pair(registry)
    before = [row[:] for row in registry.get_room("r1").board]

    dispatch = move(registry, second, 3)

    assert frames_for(dispatch, second) == [_error("not your turn")]
    assert frames_for(dispatch, first) == []
    room = registry.get_room("r1")
    assert room.board == before
    assert room.current == 0


def test_move_without_join_is_rejected(registry) -> None:
    session = new_session("loner")

    dispatch = move(registry, session, 0)

    assert frames_for(dispatch, session) == [_error("not in a room")]
    assert len(registry) == 0


def test_move_before_opponent_joins_is_rejected(registry) -> None:
    session = new_session("p0")
    join(registry, session, "r1")

    dispatch = move(registry, session, 0)

    assert frames_for(dispatch, session) == [_error("waiting for opponent")]
    assert all(cell is None for row in registry.get_room("r1").board for cell in row)


def test_inconsistent_session_slot_is_reported_as_invalid_player(registry) -> None:
    first, _ = pair(registry)
    first.seat = Seat(room_key="r1", slot=1)

    dispatch = move(registry, first, 0)

    assert frames_for(dispatch, first) == [_error("invalid player")]


@pytest.mark.parametrize("col", [-1, COLUMNS, 99, "abc", "", None, True, 2.5, [1], {"c": 1}])
def test_invalid_column_is_rejected(registry, col) -> None:
    first, _ = pair(registry)

    dispatch = move(registry, first, col)

    assert frames_for(dispatch, first) == [_error("invalid column")]
    room = registry.get_room("r1")
    assert room.current == 0
    assert room.board == create_board()


@pytest.mark.parametrize("col", ["3", " 3 ", 3.0, "3.0"])
def test_numeric_column_strings_and_integral_floats_are_accepted(registry, col) -> None:
    first, _ = pair(registry)

    dispatch = move(registry, first, col)

    (frame,) = frames_for(dispatch, first)
    assert frame["type"] == "moved"
    assert frame["board"][5][3] == 0


def test_full_column_is_rejected_without_other_changes(registry) -> None:
    players = pair(registry)
    play_columns(registry, players, [2] * ROWS)
    room = registry.get_room("r1")
    before = [row[:] for row in room.board]

    dispatch = move(registry, players[0], 2)

    assert frames_for(dispatch, players[0]) == [_error("column full")]
    assert frames_for(dispatch, players[1]) == []
    assert room.board == before
    assert room.current == 0


def test_vertical_win_broadcasts_identical_game_over_and_removes_room(registry) -> None:
    players = pair(registry)

    dispatch = play_columns(registry, players, [0, 1, 0, 1, 0, 1, 0])

    first_frames = frames_for(dispatch, players[0])
    second_frames = frames_for(dispatch, players[1])
    assert first_frames == second_frames
    (frame,) = first_frames
    assert frame["type"] == "game_over"
    assert frame["winner"] == 0
    assert [frame["board"][row][0] for row in range(2, ROWS)] == [0, 0, 0, 0]
    assert "r1" not in registry


def test_second_player_can_win(registry) -> None:
    players = pair(registry)

    dispatch = play_columns(registry, players, [0, 1, 0, 1, 0, 1, 6, 1])

    (frame,) = frames_for(dispatch, players[0])
    assert frame == frames_for(dispatch, players[1])[0]
    assert frame["type"] == "game_over"
    assert frame["winner"] == 1
    assert "r1" not in registry


def test_full_board_without_line_is_a_draw(registry) -> None:
    players = pair(registry)

    dispatch = play_columns(registry, players, DRAW_SEQUENCE)

    assert len(DRAW_SEQUENCE) == ROWS * COLUMNS
    (frame,) = frames_for(dispatch, players[0])
    assert frame == frames_for(dispatch, players[1])[0]
    assert frame["type"] == "game_over"
    assert frame["winner"] is None
    assert all(cell is not None for row in frame["board"] for cell in row)
    assert "r1" not in registry


def test_moves_after_game_over_are_rejected_and_rejoin_starts_fresh(registry) -> None:
    players = pair(registry)
    play_columns(registry, players, [0, 1, 0, 1, 0, 1, 0])

    dispatch = move(registry, players[1], 1)
    assert frames_for(dispatch, players[1]) == [_error("not in a room")]

    join(registry, players[1], "r1")
    dispatch = join(registry, players[0], "r1")

    assert frames_for(dispatch, players[1])[0] == {"type": "start", "playerIndex": 0}
    assert frames_for(dispatch, players[0])[1] == {"type": "start", "playerIndex": 1}
    assert registry.get_room("r1").board == create_board()


def test_disconnect_mid_game_notifies_and_closes_opponent(registry) -> None:
    first, second = pair(registry)
    move(registry, first, 3)

    dispatch = handle_disconnect(registry, first)

    assert frames_for(dispatch, second) == [_error(OPPONENT_DISCONNECTED)]
    assert frames_for(dispatch, first) == []
    assert dispatch.closes == [second.connection]
    assert "r1" not in registry


def test_disconnect_while_waiting_removes_room(registry) -> None:
    session = new_session("p0")
    join(registry, session, "r1")

    dispatch = handle_disconnect(registry, session)

    assert dispatch.deliveries == []
    assert dispatch.closes == []
    assert "r1" not in registry


def test_disconnect_of_stale_session_leaves_new_room_alone(registry) -> None:
    old_first, old_second = pair(registry)
    play_columns(registry, (old_first, old_second), [0, 1, 0, 1, 0, 1, 0])
    fresh = new_session("fresh")
    join(registry, fresh, "r1")

    dispatch = handle_disconnect(registry, old_second)

    assert dispatch.deliveries == []
    assert "r1" in registry


def test_disconnect_without_join_is_a_no_op(registry) -> None:
    dispatch = handle_disconnect(registry, new_session("idle"))

    assert dispatch.deliveries == []
    assert dispatch.closes == []


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("not json", "invalid json"),
        ("[1, 2]", "invalid message"),
        ('"join"', "invalid message"),
        ('{"type": "chat", "text": "hi"}', "unknown message type"),
        ('{"room": "r1"}', "unknown message type"),
    ],
)
def test_malformed_frames_get_an_error_and_change_nothing(registry, raw: str, message: str) -> None:
    first, second = pair(registry)

    dispatch = handle_frame(registry, first, raw)

    assert frames_for(dispatch, first) == [_error(message)]
    assert frames_for(dispatch, second) == []
    room = registry.get_room("r1")
    assert room.board == create_board()
    assert room.current == 0

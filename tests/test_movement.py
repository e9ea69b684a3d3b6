import math
from dataclasses import replace

import pytest

from cubecaster.gridmap import Scene, build_world, find_player
from cubecaster.movement import (
    ROT_SPEED,
    Key,
    go_back,
    go_forward,
    handle_key,
    strafe,
    turn,
)


def world(rows):
    return build_world(Scene(width=8, height=6, rows=rows))


def test_turn_north_quarter_right_faces_east():
    player = find_player(["N"])
    east = find_player(["E"])
    turn(player, math.pi / 2)
    assert player.dir_x == pytest.approx(east.dir_x)
    assert player.dir_y == pytest.approx(east.dir_y, abs=1e-12)
    assert player.plane_x == pytest.approx(east.plane_x, abs=1e-12)
    assert player.plane_y == pytest.approx(east.plane_y)


def test_turn_round_trip_keeps_length():
    player = find_player(["W"])
    before = replace(player)
    turn(player, 0.7)
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    turn(player, -0.7)
    assert player.dir_x == pytest.approx(before.dir_x)
    assert player.plane_y == pytest.approx(before.plane_y)


def test_forward_into_open_cell():
    w = world(["111", "101", "101", "1N1", "111"])
    start_y = w.player.y
    assert go_forward(w) is True
    assert w.player.y == pytest.approx(start_y - 0.5)
    assert w.player.x == pytest.approx(1.5)


def test_forward_blocked_by_wall():
    w = world(["111", "1N1", "111"])
    assert go_forward(w) is False
    assert (w.player.x, w.player.y) == (1.5, 1.5)


def test_forward_blocked_by_sprite():
    w = world(["111", "121", "1N1", "111"])
    assert go_forward(w) is False
    assert w.player.y == 2.5


def test_back_into_open_cell():
    w = world(["111", "1N1", "101", "111"])
    assert go_back(w) is True
    assert w.player.y == pytest.approx(2.0)


def test_strafe_left_keeps_direction():
    w = world(["11111", "10N01", "11111"])
    before = replace(w.player)
    assert strafe(w, -math.pi / 2) is True
    assert w.player.x == pytest.approx(before.x - 0.5)
    assert w.player.y == pytest.approx(before.y)
    assert w.player.dir_y == pytest.approx(before.dir_y)


def test_handle_key_turn_left_matches_turn():
    w = world(["111", "1N1", "111"])
    expected = replace(w.player)
    turn(expected, -ROT_SPEED)
    assert handle_key(w, Key.TURN_LEFT) is True
    assert w.player.dir_x == pytest.approx(expected.dir_x)
    assert w.player.dir_y == pytest.approx(expected.dir_y)


def test_handle_key_forward_and_escape():
    w = world(["111", "101", "1N1", "111"])
    assert handle_key(w, Key.FORWARD) is True
    assert w.player.y == pytest.approx(2.0)
    assert handle_key(w, Key.ESCAPE) is False


def test_handle_key_unknown_changes_nothing():
    w = world(["111", "1N1", "111"])
    before = replace(w.player)
    assert handle_key(w, 99) is True
    assert w.player == before
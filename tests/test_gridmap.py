import warnings

import pytest

from cubecaster.gridmap import (
    FLOOR,
    Sprite,
    build_world,
    check_map,
    collect_sprites,
    find_player,
    pad_map,
    sort_sprites,
)
from cubecaster.scene import Scene, SceneError

ROWS = [
    "111111",
    "1N0201",
    "100001",
    "111111",
]


@pytest.mark.parametrize(
    "mark, expected",
    [
        ("N", (0, -1, 0.66, 0)),
        ("W", (-1, 0, 0, -0.66)),
        ("E", (1, 0, 0, 0.66)),
        ("S", (0, 1, -0.66, 0)),
    ],
)
def test_find_player_orientation(mark, expected):
    player = find_player(["111", f"1{mark}1", "111"])
    assert (player.dir_x, player.dir_y, player.plane_x, player.plane_y) == expected
    assert player.look == mark
    assert (int(player.x), int(player.y)) == (1, 1)
    assert player.x - int(player.x) == 0.5
    assert player.y - int(player.y) == 0.5


def test_find_player_errors():
    with pytest.raises(SceneError):
        find_player(["111", "101", "111"])
    with pytest.raises(SceneError):
        find_player(["1111", "1NS1", "1111"])


def test_pad_map_shape():
    rows = ["11", "1N01", "111"]
    padded = pad_map(rows)
    assert len(padded) == len(rows) + 2
    assert {len(line) for line in padded} == {max(map(len, rows)) + 2}
    assert padded[0].strip() == "" and padded[-1].strip() == ""
    for original, line in zip(rows, padded[1:-1]):
        assert line.startswith(" " + original)
        assert line.rstrip() == " " + original


def test_check_map_valid_returns_padded():
    assert check_map(ROWS) == pad_map(ROWS)


def test_check_map_open_border():
    with pytest.raises(SceneError):
        check_map(["111", "10", "111"])


def test_check_map_bad_char():
    with pytest.raises(SceneError):
        check_map(["111", "1X1", "111"])


def test_check_map_corner_warns():
    with pytest.warns(UserWarning):
        check_map(["1111", "1011", "11"])


def test_check_map_closed_map_has_no_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert len(check_map(ROWS)) == len(ROWS) + 2


def test_collect_sprites_row_order():
    sprites = collect_sprites(["1211", "1021"])
    assert [(int(s.x), int(s.y)) for s in sprites] == [(1, 0), (2, 1)]
    assert all(s.x - int(s.x) == 0.5 for s in sprites)


def test_sort_sprites_farthest_first():
    sprites = [Sprite(1.5, 1.5), Sprite(8.5, 1.5), Sprite(4.5, 1.5)]
    ordered = sort_sprites(sprites, 1.0, 1.0)
    distances = [s.distance for s in ordered]
    assert distances == sorted(distances, reverse=True)
    assert [s.x for s in ordered] == [8.5, 4.5, 1.5]
    assert {(s.x, s.y) for s in ordered} == {(s.x, s.y) for s in sprites}


def test_build_world():
    world = build_world(Scene(rows=list(ROWS)))
    assert world.player.look == "N"
    assert world.grid[1][1] == FLOOR
    assert world.is_open(world.player.x, world.player.y)
    assert world.is_open(2.2, 1.7)
    assert not world.is_open(3.5, 1.5)
    assert not world.is_open(0, 0)
    assert not world.is_open(-1, 1)
    assert not world.is_open(100, 100)
    assert [(int(s.x), int(s.y)) for s in world.sprites] == [(3, 1)]


def test_build_world_rejects_open_map():
    with pytest.raises(SceneError):
        build_world(Scene(rows=["111", "1N0", "111"]))
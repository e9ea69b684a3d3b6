"""Map validation, player placement and sprite bookkeeping."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, replace
from typing import Sequence

from cubecaster.scene import Scene, SceneError

FLOOR = "0"
WALL = "1"
SPRITE = "2"
# A cell that held a sprite: rays pass through it but the player cannot enter.
SPRITE_FLOOR = "\0"
PLAYER_MARKS = "NSWE"

_OPEN = "0SWEN2"
_CLOSED = "1 \n"

# Direction and camera plane for each starting orientation.
_ORIENTATIONS = {
    "N": (0.0, -1.0, 0.66, 0.0),
    "W": (-1.0, 0.0, 0.0, -0.66),
    "E": (1.0, 0.0, 0.0, 0.66),
    "S": (0.0, 1.0, -0.66, 0.0),
}


@dataclass
class Player:
    """Position, view direction and camera plane of the player."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float
    look: str


@dataclass(frozen=True)
class Sprite:
    """A sprite centred in its cell, with its squared distance to the player."""

    x: float
    y: float
    distance: float = 0.0


@dataclass
class World:
    """A validated map ready to walk through and render."""

    scene: Scene
    grid: list[list[str]]
    player: Player
    sprites: list[Sprite]

    def is_open(self, x: float, y: float) -> bool:
        """Whether the cell holding point (x, y) is free floor."""
        col, row = int(x), int(y)
        if row < 0 or col < 0 or row >= len(self.grid):
            return False
        cells = self.grid[row]
        return col < len(cells) and cells[col] == FLOOR


def find_player(rows: Sequence[str]) -> Player:
    """Locate the single player mark and set its orientation."""
    found = None
    for y, row in enumerate(rows):
        for x, cell in enumerate(row):
            if cell in PLAYER_MARKS:
                if found is not None:
                    raise SceneError("double player in map")
                found = (x, y, cell)
    if found is None:
        raise SceneError("no player in map")
    x, y, look = found
    dir_x, dir_y, plane_x, plane_y = _ORIENTATIONS[look]
    return Player(x + 0.5, y + 0.5, dir_x, dir_y, plane_x, plane_y, look)


def pad_map(rows: Sequence[str]) -> list[str]:
    """Surround the map with spaces, making every row the same length."""
    longest = max(1, max((len(row) for row in rows), default=0))
    blank = " " * (longest + 2)
    return [blank, *(" " + row.ljust(longest + 1) for row in rows), blank]


def _check_around(padded: Sequence[str], x: int, y: int) -> None:
    for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
        if padded[y + dy][x + dx] == " ":
            raise SceneError(f"bad border in map at row {y - 1}, column {x - 1}")
    for dx, dy in ((1, 1), (-1, -1), (1, -1), (-1, 1)):
        if padded[y + dy][x + dx] == " ":
            warnings.warn("bad border in corner", UserWarning, stacklevel=3)


def check_map(rows: Sequence[str]) -> list[str]:
    """Check that the map is closed and holds only known characters.

    Returns the padded map. Open cells next to the outside raise
    SceneError; open corners only warn.
    """
    padded = pad_map(rows)
    for y, line in enumerate(padded):
        for x, cell in enumerate(line):
            if cell in _OPEN:
                _check_around(padded, x, y)
            elif cell not in _CLOSED:
                raise SceneError(f"bad char {cell!r} in map")
    return padded


def collect_sprites(rows: Sequence[str]) -> list[Sprite]:
    """Return a sprite at the centre of every sprite cell, row by row."""
    return [
        Sprite(x + 0.5, y + 0.5)
        for y, row in enumerate(rows)
        for x, cell in enumerate(row)
        if cell == SPRITE
    ]


def sort_sprites(sprites: Sequence[Sprite], x: float, y: float) -> list[Sprite]:
    """Return the sprites with distances to (x, y), farthest first."""
    measured = [
        replace(s, distance=(x - s.x) * (x - s.x) + (y - s.y) * (y - s.y))
        for s in sprites
    ]
    measured.sort(key=lambda s: s.distance, reverse=True)
    return measured


def build_world(scene: Scene) -> World:
    """Validate the scene's map and set up the player and sprites."""
    player = find_player(scene.rows)
    check_map(scene.rows)
    sprites = sort_sprites(collect_sprites(scene.rows), player.x, player.y)
    grid = [list(row) for row in scene.rows]
    for sprite in sprites:
        grid[int(sprite.y)][int(sprite.x)] = SPRITE_FLOOR
    grid[int(player.y)][int(player.x)] = FLOOR
    return World(scene, grid, player, sprites)
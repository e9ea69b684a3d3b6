"""Player movement and key handling."""

from __future__ import annotations

import math
from enum import IntEnum

from cubecaster.gridmap import Player, World

ROT_SPEED = 0.1
FOOT = 0.5


class Key(IntEnum):
    """Key codes the game reacts to."""

    STRAFE_LEFT = 0
    BACK = 1
    STRAFE_RIGHT = 2
    FORWARD = 13
    ESCAPE = 53
    TURN_LEFT = 123
    TURN_RIGHT = 124


def turn(player: Player, angle: float) -> None:
    """Rotate the view direction and camera plane by angle radians."""
    c, s = math.cos(angle), math.sin(angle)
    dir_x, dir_y = player.dir_x, player.dir_y
    plane_x, plane_y = player.plane_x, player.plane_y
    player.dir_x = dir_x * c - dir_y * s
    player.dir_y = dir_x * s + dir_y * c
    player.plane_x = plane_x * c - plane_y * s
    player.plane_y = plane_x * s + plane_y * c


def go_forward(world: World) -> bool:
    """Step half a cell forward if the cell one unit ahead is free; report whether moved."""
    player = world.player
    if world.is_open(player.x + player.dir_x, player.y + player.dir_y):
        player.x += player.dir_x * FOOT
        player.y += player.dir_y * FOOT
        return True
    return False


def go_back(world: World) -> bool:
    """Step half a cell backward if the cell one unit behind is free; report whether moved."""
    player = world.player
    if world.is_open(player.x - player.dir_x, player.y - player.dir_y):
        player.x -= player.dir_x * FOOT
        player.y -= player.dir_y * FOOT
        return True
    return False


def strafe(world: World, angle: float) -> bool:
    """Move sideways: turn by angle, step forward, turn back."""
    turn(world.player, angle)
    moved = go_forward(world)
    turn(world.player, -angle)
    return moved


def handle_key(world: World, key: int) -> bool:
    """Apply a key press to the world; return False when the key asks to quit."""
    if key == Key.STRAFE_LEFT:
        strafe(world, -math.pi / 2)
    elif key == Key.STRAFE_RIGHT:
        strafe(world, math.pi / 2)
    elif key == Key.FORWARD:
        go_forward(world)
    elif key == Key.BACK:
        go_back(world)
    elif key == Key.TURN_LEFT:
        turn(world.player, -ROT_SPEED)
    elif key == Key.TURN_RIGHT:
        turn(world.player, ROT_SPEED)
    return key != Key.ESCAPE
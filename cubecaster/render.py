"""Textured wall and sprite rendering by ray casting over the map grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from cubecaster.gridmap import FLOOR, World, sort_sprites
from cubecaster.image import Image
from cubecaster.scene import Color, Scene, SceneError
from cubecaster.xpm import XpmError, load_xpm

# Which grid line a ray crossed last: a vertical one (x side) or a horizontal one (y side).
X_SIDE = 0
Y_SIDE = 1

_TEXTURE_FIELDS = ("north", "west", "south", "east", "sprite")


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _texel(texture: Image, x: int, y: int) -> int:
    if 0 <= x < texture.width and 0 <= y < texture.height:
        return texture.pixels[y * texture.width + x]
    return 0


def _color_value(color: Optional[Color]) -> int:
    return color.value if color is not None else 0


@dataclass
class Textures:
    """The four wall textures and the sprite texture."""

    north: Image
    south: Image
    west: Image
    east: Image
    sprite: Image

    def for_side(self, side: int, step_x: int, step_y: int) -> Image:
        """Pick the wall texture for a hit on the given side, seen while stepping this way."""
        if side:
            return self.south if step_y > 0 else self.north
        return self.east if step_x > 0 else self.west


def load_textures(scene: Scene) -> Textures:
    """Load every texture named by the scene."""
    loaded: dict[str, Image] = {}
    for name in _TEXTURE_FIELDS:
        path = getattr(scene, name)
        if path is None:
            raise SceneError(f"no texture path for {name}")
        try:
            loaded[name] = load_xpm(path)
        except (OSError, XpmError) as error:
            raise SceneError(f"can't open texture {path!r}") from error
    return Textures(**loaded)


class Renderer:
    """Draws the world as seen by its player into an image."""

    def __init__(
        self,
        world: World,
        textures: Textures,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        self.world = world
        self.textures = textures
        self.width = world.scene.width if width is None else width
        self.height = world.scene.height if height is None else height
        self.image = Image(self.width, self.height)

    def render(self) -> Image:
        """Draw one frame and return it."""
        image = Image(self.width, self.height)
        depths = [self._cast_column(image, x) for x in range(self.width)]
        self._draw_sprites(image, depths)
        self.image = image
        return image

    def _is_wall(self, col: int, row: int) -> bool:
        grid = self.world.grid
        if row < 0 or col < 0 or row >= len(grid) or col >= len(grid[row]):
            return True
        return grid[row][col] > FLOOR

    def _cast_column(self, image: Image, x: int) -> float:
        player = self.world.player
        width, height = self.width, self.height
        camera = 2 * x / width - 1
        ray_x = player.dir_x + player.plane_x * camera
        ray_y = player.dir_y + player.plane_y * camera
        map_x, map_y = int(player.x), int(player.y)
        delta_x = abs(1 / ray_x) if ray_x else math.inf
        delta_y = abs(1 / ray_y) if ray_y else math.inf

        if ray_x < 0:
            step_x, side_x = -1, (player.x - map_x) * delta_x
        else:
            step_x, side_x = 1, (map_x + 1.0 - player.x) * delta_x
        if ray_y < 0:
            step_y, side_y = -1, (player.y - map_y) * delta_y
        else:
            step_y, side_y = 1, (map_y + 1.0 - player.y) * delta_y

        while True:
            if side_x < side_y:
                side_x += delta_x
                map_x += step_x
                side = X_SIDE
            else:
                side_y += delta_y
                map_y += step_y
                side = Y_SIDE
            if self._is_wall(map_x, map_y):
                break

        if side == X_SIDE:
            distance = (map_x - player.x + (1 - step_x) // 2) / ray_x if ray_x else math.inf
        else:
            distance = (map_y - player.y + (1 - step_y) // 2) / ray_y if ray_y else math.inf

        line_height = int(height / distance) if distance > 0 else height
        draw_start = max(0, _cdiv(-line_height, 2) + height // 2)
        draw_end = line_height // 2 + height // 2
        if draw_end >= height:
            draw_end = height - 1

        texture = self.textures.for_side(side, step_x, step_y)
        if side == X_SIDE:
            wall_x = player.y + distance * ray_y
        else:
            wall_x = player.x + distance * ray_x
        wall_x = wall_x - math.floor(wall_x) if math.isfinite(wall_x) else 0.0
        tex_x = int(wall_x * texture.width)
        if (side == X_SIDE and ray_x > 0) or (side == Y_SIDE and ray_y < 0):
            tex_x = texture.width - tex_x - 1
        step = texture.height / line_height if line_height else 0.0
        tex_pos = (draw_start - height // 2 + line_height // 2) * step

        ceiling = _color_value(self.world.scene.ceiling)
        floor = _color_value(self.world.scene.floor)
        y = 0
        while y < draw_start:
            image.put_pixel(x, y, ceiling)
            y += 1
        while y < draw_end:
            tex_y = int(tex_pos) & (texture.height - 1)
            tex_pos += step
            image.put_pixel(x, y, _texel(texture, tex_x, tex_y))
            y += 1
        while y < height:
            image.put_pixel(x, y, floor)
            y += 1
        return distance

    def _draw_sprites(self, image: Image, depths: Sequence[float]) -> None:
        player = self.world.player
        width, height = self.width, self.height
        self.world.sprites = sort_sprites(self.world.sprites, player.x, player.y)
        det = player.plane_x * player.dir_y - player.dir_x * player.plane_y
        if det == 0:
            return
        inverse = 1.0 / det
        texture = self.textures.sprite
        for sprite in self.world.sprites:
            rel_x = sprite.x - player.x
            rel_y = sprite.y - player.y
            tr_x = inverse * (player.dir_y * rel_x - player.dir_x * rel_y)
            tr_y = inverse * (-player.plane_y * rel_x + player.plane_x * rel_y)
            if tr_y <= 0:
                continue
            screen_x = int((width // 2) * (1 + tr_x / tr_y))
            sprite_h = abs(int(height / tr_y))
            top = max(0, height // 2 - sprite_h // 2)
            bottom = sprite_h // 2 + height // 2
            if bottom >= height:
                bottom = height - 1
            sprite_w = abs(int(width / tr_y))
            left_edge = _cdiv(-sprite_w, 2) + screen_x
            start_x = max(0, left_edge)
            end_x = min(width, sprite_w // 2 + screen_x)
            for stripe in range(start_x, end_x):
                if not (0 < stripe < width and tr_y < depths[stripe]):
                    continue
                tex_x = _cdiv(_cdiv(256 * (stripe - left_edge) * texture.width, sprite_w), 256)
                for y in range(top, bottom):
                    d = y * 256 - height * 128 + sprite_h * 128
                    tex_y = _cdiv(_cdiv(d * texture.height, sprite_h), 256)
                    color = _texel(texture, tex_x, tex_y)
                    if color & 0x00FFFF:
                        image.put_pixel(stripe, y, color)
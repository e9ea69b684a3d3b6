"""Reading of .cub scene descriptions: resolution, textures, colours and map rows."""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from cubecaster.image import rgb

SCENE_SUFFIX = ".cub"

_ATOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]*)")
_COLOR_RE = re.compile(r" *([0-9]*)[ ,]*([0-9]*)[ ,]*([0-9]*)")
_DIGITS = "0123456789"

# Key prefix, how many characters to drop before the value, and the field it sets.
_PATH_KEYS = (
    ("NO ", 2, "north"),
    ("SO", 2, "south"),
    ("WE", 2, "west"),
    ("EA", 2, "east"),
    ("S ", 1, "sprite"),
)
_COLOR_KEYS = (
    ("F ", "floor"),
    ("C ", "ceiling"),
)


class SceneError(ValueError):
    """Raised when a scene description or its map is invalid."""


@dataclass(frozen=True)
class Color:
    """A floor or ceiling colour as three channel values."""

    r: int
    g: int
    b: int

    @property
    def value(self) -> int:
        """The colour packed as 0xRRGGBB."""
        return rgb(self.r, self.g, self.b)


@dataclass
class Scene:
    """Settings and map rows read from a scene description."""

    width: int = 0
    height: int = 0
    north: Optional[str] = None
    south: Optional[str] = None
    west: Optional[str] = None
    east: Optional[str] = None
    sprite: Optional[str] = None
    floor: Optional[Color] = None
    ceiling: Optional[Color] = None
    rows: list[str] = field(default_factory=list)

    def is_complete(self) -> bool:
        """Whether every texture path, both colours and the resolution are set."""
        paths = (self.north, self.south, self.west, self.east, self.sprite)
        return (
            all(path is not None for path in paths)
            and bool(self.width)
            and bool(self.height)
            and self.floor is not None
            and self.ceiling is not None
        )


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits) & 0xFFFFFFFF
    if value & 0x80000000:
        value -= 1 << 32
    return -value if sign == "-" else value


def parse_color(text: str) -> Color:
    """Read "R,G,B" (commas or spaces between the numbers); missing numbers are 0.

    Trailing characters and channels above 255 produce a warning, not an error.
    """
    match = _COLOR_RE.match(text)
    r, g, b = (int(digits) if digits else 0 for digits in match.groups())
    if text[match.end():]:
        warnings.warn(f"too long colour {text!r}", UserWarning, stacklevel=2)
    if r > 255 or g > 255 or b > 255:
        warnings.warn(f"colour value above 255 in {text!r}", UserWarning, stacklevel=2)
    return Color(r, g, b)


def _read_resolution(
    scene: Scene,
    text: str,
    screen_size: Optional[tuple[int, int]],
    save: bool,
) -> None:
    width = _atoi(text)
    rest = text[1:].lstrip(_DIGITS)
    if not rest.startswith(" "):
        raise SceneError("bad resolution")
    height = _atoi(rest)
    if width <= 0 or height <= 0:
        raise SceneError("bad resolution")
    if screen_size is not None and not save:
        screen_width, screen_height = screen_size
        width = min(width, screen_width)
        height = min(height, screen_height)
    scene.width = width
    scene.height = height


def _read_path(scene: Scene, attribute: str, text: str) -> None:
    path = text.lstrip(" ")
    if path[:1] != "." and path[1:2] != "/":
        raise SceneError(f"bad characters in texture path {path!r}")
    setattr(scene, attribute, path)


def _read_setting(
    scene: Scene,
    line: str,
    screen_size: Optional[tuple[int, int]],
    save: bool,
) -> bool:
    """Apply one line; return True when it belongs to the settings before the map."""
    if not line:
        return True
    if line.startswith("R"):
        if scene.width:
            raise SceneError("resolution defined twice")
        _read_resolution(scene, line[1:], screen_size, save)
        return True
    for prefix, offset, attribute in _PATH_KEYS:
        if line.startswith(prefix):
            if getattr(scene, attribute) is not None:
                raise SceneError(f"{prefix.strip()} defined twice")
            _read_path(scene, attribute, line[offset:])
            return True
    for prefix, attribute in _COLOR_KEYS:
        if line.startswith(prefix):
            if getattr(scene, attribute) is not None:
                raise SceneError(f"{prefix.strip()} defined twice")
            setattr(scene, attribute, parse_color(line[1:]))
            return True
    if not scene.is_complete():
        raise SceneError(f"bad string in map: {line!r}")
    return False


def parse_scene(
    lines: Iterable[str],
    screen_size: Optional[tuple[int, int]] = None,
    save: bool = False,
) -> Scene:
    """Build a scene from the lines of a description, without their line ends.

    Empty lines anywhere count towards the settings block, and the map is
    every line after as many lines as that block holds. The resolution is
    capped to ``screen_size`` unless ``save`` is set.
    """
    scene = Scene()
    collected: list[str] = []
    settings = 0
    for raw in lines:
        line = raw.rstrip("\n")
        if _read_setting(scene, line, screen_size, save):
            settings += 1
        collected.append(line)
    scene.rows = collected[settings:]
    if not scene.is_complete():
        raise SceneError("missing texture path, colour or resolution")
    return scene


def load_scene(
    path: str | os.PathLike[str],
    screen_size: Optional[tuple[int, int]] = None,
    save: bool = False,
) -> Scene:
    """Read a .cub file and parse it."""
    if not os.fspath(path).endswith(SCENE_SUFFIX):
        raise SceneError("bad map extension")
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as error:
        raise SceneError(f"can't read map: {error}") from error
    # Only newline-terminated lines are taken; anything after the last newline is ignored.
    return parse_scene(text.split("\n")[:-1], screen_size, save)
"""Reader for XPM text images."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, Optional

from cubecaster.colornames import lookup_color
from cubecaster.image import Image

TRANSPARENT = 0xFF000000

_WORD_RE = re.compile(r"[^ \t]+")
_QUOTED_RE = re.compile(r'"([^"]*)"')
_ATOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)(\d*)")
_HEX_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_NAME_LIMIT = 63


class XpmError(ValueError):
    """Raised when XPM data cannot be turned into an image."""


def split_words(text: str) -> list[str]:
    """Split text into words separated by spaces and tabs only."""
    return _WORD_RE.findall(text)


def _find_unquoted(text: str, token: str) -> int:
    quoted = False
    for pos, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        if not quoted and text.startswith(token, pos):
            return pos
    return -1


def _blank_comments(text: str, opener: str, closer: str) -> str:
    while (start := _find_unquoted(text, opener)) != -1:
        end = text.find(closer, start + len(opener))
        stop = len(text) if end == -1 else end + len(closer)
        text = text[:start] + " " * (stop - start) + text[stop:]
    return text


def strip_comments(text: str) -> str:
    """Replace C and C++ comments outside string literals with spaces.

    The text keeps its length; a line comment also blanks its newline.
    """
    text = _blank_comments(text, "/*", "*/")
    return _blank_comments(text, "//", "\n")


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits)
    return -value if sign == "-" else value


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def text_to_rgb(name: str, extra: Optional[str]) -> int:
    """Resolve an XPM colour value: "#hex", or a colour name of one or two words.

    Unknown names give 0; "None" gives -1.
    """
    if name.startswith("#"):
        match = _HEX_RE.match(name, 1)
        sign, digits = match.group(1), match.group(2)
        if not digits:
            return 0
        value = int(digits, 16)
        return _to_int32(-value if sign == "-" else value)
    if extra is not None:
        name = f"{name} {extra}"[:_NAME_LIMIT]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def _parse_header(line: Optional[str]) -> tuple[int, int, int, int]:
    if line is None:
        raise XpmError("missing XPM header")
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"bad XPM header: {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"bad XPM header: {line!r}")
    return values  # type: ignore[return-value]


def _parse_color(line: Optional[str], cpp: int) -> tuple[str, int]:
    if line is None:
        raise XpmError("missing XPM colour line")
    if len(line) < cpp:
        raise XpmError(f"colour line too short: {line!r}")
    words = split_words(line[cpp:])
    try:
        key_index = words.index("c")
    except ValueError:
        raise XpmError(f"no colour in line: {line!r}") from None
    if key_index + 1 >= len(words):
        raise XpmError(f"no colour in line: {line!r}")
    name = words[key_index + 1]
    extra = words[key_index + 2] if key_index + 2 < len(words) else None
    return line[:cpp], text_to_rgb(name, extra)


def parse_xpm_lines(lines: Iterable[str]) -> Image:
    """Build an image from the string values of an XPM file, in order."""
    source = iter(lines)
    width, height, ncolors, cpp = _parse_header(next(source, None))

    colors: dict[str, int] = {}
    for _ in range(ncolors):
        key, value = _parse_color(next(source, None), cpp)
        if cpp <= 2:
            colors[key] = value
        else:
            colors.setdefault(key, value)

    pixels: list[int] = []
    for row in range(height):
        line = next(source, None)
        if line is None:
            raise XpmError(f"missing pixel row {row}")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row {row} too short")
        for x in range(width):
            color = colors.get(line[x * cpp:(x + 1) * cpp], 0)
            pixels.append(TRANSPARENT if color == -1 else color & 0xFFFFFFFF)
    return Image(width, height, pixels)


def parse_xpm(text: str) -> Image:
    """Parse the text of an XPM file."""
    return parse_xpm_lines(_QUOTED_RE.findall(strip_comments(text)))


def load_xpm(path: str | os.PathLike[str]) -> Image:
    """Read and parse an XPM file."""
    return parse_xpm(Path(path).read_text(encoding="latin-1"))
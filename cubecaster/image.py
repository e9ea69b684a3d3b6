"""In-memory 32-bit images and BMP export."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field

_FILE_HEADER_SIZE = 14
_INFO_HEADER_SIZE = 40
_HEADER_SIZE = _FILE_HEADER_SIZE + _INFO_HEADER_SIZE
_BITS_PER_PIXEL = 24


def rgb(r: int, g: int, b: int) -> int:
    """Pack three channel values into a 0xRRGGBB integer."""
    return r << 16 | g << 8 | b


@dataclass
class Image:
    """A width x height grid of 0xAARRGGBB pixels, stored row by row from the top."""

    width: int
    height: int
    pixels: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"bad image size {self.width}x{self.height}")
        size = self.width * self.height
        if not self.pixels:
            self.pixels = [0] * size
        elif len(self.pixels) != size:
            raise ValueError(
                f"{len(self.pixels)} pixels given for a {self.width}x{self.height} image"
            )

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.width + x

    def get_pixel(self, x: int, y: int) -> int:
        """Return the colour stored at (x, y)."""
        return self.pixels[self._index(x, y)]

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store a colour at (x, y), kept to 32 bits."""
        self.pixels[self._index(x, y)] = color & 0xFFFFFFFF

    def to_bmp(self) -> bytes:
        """Encode the image as an uncompressed 24-bit bottom-up BMP."""
        file_size = (_HEADER_SIZE + 4 * (self.height + self.width)) & 0xFFFFFFFF
        header = struct.pack(
            "<2sIIIIiiHHIIiiII",
            b"BM",
            file_size,
            0,
            _HEADER_SIZE,
            _INFO_HEADER_SIZE,
            self.width,
            self.height,
            1,
            _BITS_PER_PIXEL,
            0,
            0,
            0,
            0,
            0,
            0,
        )
        padding = b"\x00" * (-3 * self.width % 4)
        body = bytearray(header)
        for y in reversed(range(self.height)):
            row = self.pixels[y * self.width:(y + 1) * self.width]
            for color in row:
                body += (color & 0xFFFFFF).to_bytes(3, "little")
            body += padding
        return bytes(body)

    def save_bmp(self, path: str | os.PathLike[str]) -> None:
        """Write the image to a BMP file, replacing any existing file."""
        with open(path, "wb") as handle:
            handle.write(self.to_bmp())
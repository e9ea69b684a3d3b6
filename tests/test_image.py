import struct

import pytest

from cubecaster.image import Image, rgb


def test_rgb_channels_recoverable():
    value = rgb(12, 200, 99)
    assert value >> 16 == 12
    assert (value >> 8) & 0xFF == 200
    assert value & 0xFF == 99


def test_rgb_black():
    assert rgb(0, 0, 0) == 0


def test_new_image_is_black():
    image = Image(3, 2)
    assert image.pixels == [0] * 6


def test_put_and_get_round_trip():
    image = Image(4, 3)
    image.put_pixel(2, 1, 0x123456)
    assert image.get_pixel(2, 1) == 0x123456
    assert image.pixels[1 * 4 + 2] == 0x123456


def test_put_pixel_keeps_alpha_byte():
    image = Image(1, 1)
    image.put_pixel(0, 0, 0xFF000000)
    assert image.get_pixel(0, 0) == 0xFF000000


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (4, 0), (0, 3)])
def test_out_of_range_access(x, y):
    image = Image(4, 3)
    with pytest.raises(IndexError):
        image.get_pixel(x, y)
    with pytest.raises(IndexError):
        image.put_pixel(x, y, 0)


def test_pixel_count_must_match():
    with pytest.raises(ValueError):
        Image(2, 2, [1, 2, 3])


def test_bmp_header_fields():
    image = Image(4, 2)
    data = image.to_bmp()
    assert data[:2] == b"BM"
    assert struct.unpack_from("<I", data, 10)[0] == 54
    assert struct.unpack_from("<I", data, 14)[0] == 40
    assert struct.unpack_from("<i", data, 18)[0] == image.width
    assert struct.unpack_from("<i", data, 22)[0] == image.height
    assert struct.unpack_from("<H", data, 26)[0] == 1
    assert struct.unpack_from("<H", data, 28)[0] == 24


def test_bmp_body_is_bottom_up_bgr():
    image = Image(4, 2)
    bottom_left = rgb(10, 20, 30)
    top_left = rgb(40, 50, 60)
    image.put_pixel(0, 1, bottom_left)
    image.put_pixel(0, 0, top_left)
    data = image.to_bmp()
    assert len(data) == 54 + image.width * image.height * 3
    assert data[54:57] == bytes([30, 20, 10])
    row = image.width * 3
    assert data[54 + row:54 + row + 3] == bytes([60, 50, 40])


def test_bmp_drops_alpha():
    image = Image(4, 1)
    image.put_pixel(3, 0, 0xFF000000 | rgb(1, 2, 3))
    data = image.to_bmp()
    assert data[54 + 9:54 + 12] == bytes([3, 2, 1])


def test_save_bmp_writes_same_bytes(tmp_path):
    image = Image(4, 4)
    image.put_pixel(1, 2, rgb(255, 0, 0))
    target = tmp_path / "shot.bmp"
    target.write_bytes(b"old content that is longer than nothing")
    image.save_bmp(target)
    assert target.read_bytes() == image.to_bmp()
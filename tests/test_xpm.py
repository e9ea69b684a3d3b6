import pytest

from cubecaster.colornames import lookup_color
from cubecaster.xpm import (
    XpmError,
    load_xpm,
    parse_xpm,
    parse_xpm_lines,
    split_words,
    strip_comments,
    text_to_rgb,
)

SAMPLE = """/* XPM */
static char *wall[] = {
/* columns rows colors chars-per-pixel */
"3 2 3 1 ",
"  c None",
". c #FF0000",
"x c red",
"x. ",
" .x"
};
"""


def test_split_words_spaces_and_tabs():
    assert split_words("  a\tbb  c ") == ["a", "bb", "c"]


def test_split_words_newline_is_not_a_separator():
    assert split_words("a\nb c") == ["a\nb", "c"]


def test_split_words_empty():
    assert split_words(" \t ") == []


def test_strip_comments_keeps_length_and_removes_comment():
    text = 'x /* gone */ "kept"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "gone" not in result
    assert result.endswith('"kept"')


def test_strip_comments_ignores_markers_inside_quotes():
    text = '"a/*b" /*c*/'
    result = strip_comments(text)
    assert result.startswith('"a/*b"')
    assert result[6:].strip() == ""


def test_strip_line_comment_blanks_newline():
    text = '"a" // note\n"b"'
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "\n" not in result
    assert "note" not in result


def test_text_to_rgb_hex():
    assert text_to_rgb("#00ff00", None) == 0x00FF00


def test_text_to_rgb_two_word_name():
    assert text_to_rgb("dark", "red") == lookup_color("dark red")


def test_text_to_rgb_unknown_and_none():
    assert text_to_rgb("nosuchcolour", None) == 0
    assert text_to_rgb("None", None) == -1


def test_parse_sample():
    image = parse_xpm(SAMPLE)
    assert (image.width, image.height) == (3, 2)
    assert image.get_pixel(0, 0) == lookup_color("red")
    assert image.get_pixel(1, 0) == 0xFF0000
    assert image.get_pixel(2, 0) == 0xFF000000
    assert image.get_pixel(0, 1) == 0xFF000000
    assert image.get_pixel(2, 1) == lookup_color("red")


def test_parse_two_chars_per_pixel():
    image = parse_xpm_lines(["2 1 2 2", "aa c #000011", "bb c #002200", "bbaa"])
    assert image.pixels == [0x002200, 0x000011]


def test_short_key_last_definition_wins():
    image = parse_xpm_lines(["1 1 2 1", "a c #000001", "a c #000002", "a"])
    assert image.pixels == [0x000002]


def test_long_key_first_definition_wins():
    image = parse_xpm_lines(["1 1 2 3", "abc c #000001", "abc c #000002", "abc"])
    assert image.pixels == [0x000001]


def test_unknown_key_gives_black():
    image = parse_xpm_lines(["2 1 1 1", "a c #0000AA", "az"])
    assert image.pixels == [0x0000AA, 0]


@pytest.mark.parametrize(
    "lines",
    [
        [],
        ["0 1 1 1", "a c #000000", "a"],
        ["1 1 1", "a c #000000", "a"],
        ["1 1 1 1", "a s name", "a"],
        ["1 1 1 1", "a c", "a"],
        ["2 1 1 1", "a c #000000", "a"],
        ["1 2 1 1", "a c #000000", "a"],
        ["1 1 2 1", "a c #000000"],
    ],
)
def test_bad_xpm_raises(lines):
    with pytest.raises(XpmError):
        parse_xpm_lines(lines)


def test_load_xpm_from_file(tmp_path):
    path = tmp_path / "wall.xpm"
    path.write_text(SAMPLE, encoding="latin-1")
    assert load_xpm(path) == parse_xpm(SAMPLE)


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_xpm(tmp_path / "absent.xpm")
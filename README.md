# cubecaster

cubecaster draws a textured first-person view of a grid maze. The maze and
its settings are read from a `.cub` scene file. Wall and sprite textures come
from XPM images. You can walk through the maze in a window, or save one
rendered frame as a BMP screenshot.

## Installation

```
pip install .
```

The window uses `pygame`, which is installed along with the package.

## Usage

Open a scene in a window:

```
cubecaster map.cub
```

Render the first frame to `screenshot.bmp` in the current directory and exit:

```
cubecaster map.cub --save
```

The program takes one or two arguments. Any other count prints `ERROR` and
exits with status 1. A scene file name that does not end in `.cub` is
rejected. The second argument must be `--save` or a leading part of it, such
as `--sa`. For a screenshot, the frame width is reduced to a multiple of 4.

If the scene, its map or a texture is invalid, the program prints `ERROR!`
followed by the reason and exits with status 1. Problems that are only
warnings are printed as lines starting with `ATTENTION:`. Examples are a gap
at a map corner, extra characters after a colour, or a colour channel above
255.

### Controls

| Key          | Action              |
|--------------|---------------------|
| W            | move forward        |
| S            | move back           |
| A / D        | strafe left / right |
| Left / Right | turn                |
| Escape       | quit                |

Closing the window also quits. Moving forward or back steps half a cell. The
step is taken only when the cell one unit ahead (or behind) is empty floor.

## Scene files

A scene file has configuration lines first and then the map:

```
R 1280 720
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
S ./textures/sprite.xpm
F 220,100,0
C 225,30,0

111111
100201
10N001
111111
```

- `R`: the width and height of the view. When the scene is shown in a
  window, a size larger than the screen is reduced to fit the screen. A
  screenshot keeps the size given in the file.
- `NO`, `SO`, `WE`, `EA`, `S`: paths to XPM textures for the north, south,
  west and east walls and for sprites. Write them as `./...`.
- `F`, `C`: the floor and ceiling colours, given as `r,g,b`. A missing
  number counts as 0.

Each key may appear only once. Every setting must be present before the
first map line. Empty lines count as part of the configuration block.

In the map, `1` is a wall, `0` is empty floor, `2` is a sprite, and `N`,
`S`, `E` or `W` marks where the player starts and which way the player faces.
Spaces lie outside the maze. There must be exactly one player. An open cell
next to a space or to the edge of the map is an error. A gap only at a
corner gives a warning. Any other character is an error.

## Library use

The modules can also be used on their own:

- `cubecaster.scene`: `parse_scene`, `load_scene`, `parse_color`, `Scene`,
  `Color`, `SceneError`
- `cubecaster.gridmap`: `build_world`, `check_map`, `pad_map`, `find_player`,
  `collect_sprites`, `sort_sprites`, `World`, `Player`, `Sprite`
- `cubecaster.xpm`: `load_xpm`, `parse_xpm`, `parse_xpm_lines`,
  `split_words`, `strip_comments`, `text_to_rgb`, `XpmError`
- `cubecaster.image`: `Image` (with `get_pixel`, `put_pixel`, `to_bmp` and
  `save_bmp`), `rgb`
- `cubecaster.render`: `Renderer`, `Textures`, `load_textures`
- `cubecaster.movement`: `handle_key`, `Key`, `turn`, `go_forward`,
  `go_back`, `strafe`
- `cubecaster.colornames`: `lookup_color`
- `cubecaster.cli`: `main`, `take_screenshot`, `run_window`

```python
from cubecaster.scene import load_scene
from cubecaster.gridmap import build_world
from cubecaster.render import Renderer, load_textures

scene = load_scene("map.cub", save=True)
world = build_world(scene)
frame = Renderer(world, load_textures(scene)).render()
frame.save_bmp("frame.bmp")
```

`take_screenshot("map.cub", "frame.bmp")` does the same in one call. It also
reduces the width to a multiple of 4.

## Limitations

Textures can only be XPM images. Other image formats are not read. The window
does not use the mouse and has no sound. It has no menus, no minimap and no
way to save progress.

## Running the tests

```
pip install .[test]
pytest
```
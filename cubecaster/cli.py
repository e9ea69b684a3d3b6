"""Command line entry point: open a window on a scene or save a screenshot."""

from __future__ import annotations

import os
import sys
import warnings
from array import array
from typing import Optional, Sequence

from cubecaster.gridmap import World, build_world
from cubecaster.image import Image
from cubecaster.movement import Key, handle_key
from cubecaster.render import Renderer, Textures, load_textures
from cubecaster.scene import SceneError, load_scene
from cubecaster.xpm import XpmError

SCREENSHOT_NAME = "screenshot.bmp"
SAVE_FLAG = "--save"


def _screenshot(world: World, textures: Textures, output: str | os.PathLike[str]) -> Image:
    width = world.scene.width
    renderer = Renderer(world, textures, width=width - width % 4)
    image = renderer.render()
    image.save_bmp(output)
    return image


def take_screenshot(
    scene_path: str | os.PathLike[str],
    output: str | os.PathLike[str] = SCREENSHOT_NAME,
) -> Image:
    """Render the scene's first frame to a BMP file, width trimmed to a multiple of 4."""
    scene = load_scene(scene_path, save=True)
    world = build_world(scene)
    return _screenshot(world, load_textures(scene), output)


def _to_rgb_bytes(image: Image) -> bytes:
    raw = array("I", image.pixels)
    if sys.byteorder == "big":
        raw.byteswap()
    data = raw.tobytes()
    out = bytearray(len(image.pixels) * 3)
    out[0::3] = data[2::4]
    out[1::3] = data[1::4]
    out[2::3] = data[0::4]
    return bytes(out)


def _show(pygame, screen, image: Image) -> None:
    if image.width and image.height:
        surface = pygame.image.frombuffer(
            _to_rgb_bytes(image), (image.width, image.height), "RGB"
        )
        screen.blit(surface, (0, 0))
    pygame.display.flip()


def run_window(world: World, renderer: Renderer) -> None:
    """Show the world in a window and react to keys until it is closed."""
    import pygame

    pygame.display.init()
    try:
        screen = pygame.display.set_mode((renderer.width, renderer.height))
        pygame.display.set_caption("3D")
        _show(pygame, screen, renderer.render())
        keys = {
            pygame.K_a: Key.STRAFE_LEFT,
            pygame.K_d: Key.STRAFE_RIGHT,
            pygame.K_w: Key.FORWARD,
            pygame.K_s: Key.BACK,
            pygame.K_LEFT: Key.TURN_LEFT,
            pygame.K_RIGHT: Key.TURN_RIGHT,
            pygame.K_ESCAPE: Key.ESCAPE,
        }
        while True:
            event = pygame.event.wait()
            if event.type == pygame.QUIT:
                return
            if event.type != pygame.KEYDOWN or event.key not in keys:
                continue
            if not handle_key(world, keys[event.key]):
                return
            _show(pygame, screen, renderer.render())
    finally:
        pygame.display.quit()


def _screen_size() -> Optional[tuple[int, int]]:
    import pygame

    try:
        pygame.display.init()
        info = pygame.display.Info()
    except pygame.error:
        return None
    if info.current_w > 0 and info.current_h > 0:
        return info.current_w, info.current_h
    return None


def _show_attention(message, category, filename, lineno, file=None, line=None) -> None:
    print(f"ATTENTION: {message}")


def _fail(message: str) -> int:
    print("ERROR!")
    print(message)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on a .cub file, or save a screenshot with a second "--save" argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) not in (1, 2):
        print("ERROR")
        return 1
    save = len(args) == 2
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.showwarning = _show_attention
        try:
            screen = None if save else _screen_size()
            scene = load_scene(args[0], screen, save)
            world = build_world(scene)
            textures = load_textures(scene)
            if save:
                # Any leading part of the flag is accepted.
                if not SAVE_FLAG.startswith(args[1]):
                    raise SceneError("bad save argv")
                _screenshot(world, textures, SCREENSHOT_NAME)
                return 0
        except (SceneError, XpmError, OSError) as error:
            return _fail(str(error))
    run_window(world, Renderer(world, textures))
    return 0


if __name__ == "__main__":
    sys.exit(main())
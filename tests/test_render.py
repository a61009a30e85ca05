"""Pillow rendering of shape descriptors and overlays."""
import numpy as np
import pytest
from PIL import Image

from qrdots.layout import (
    LayoutParams,
    ModuleGrid,
    ShapeColor,
    ShapeDescriptor,
    ShapeKind,
    generate_layout,
)
from qrdots.render import (
    Palette,
    composite_image,
    draw_shapes,
    normalize_image,
    render_shapes,
    save_png,
    to_png_bytes,
    world_to_pixel,
)

RED = (255, 0, 0)
BLUE = (0, 0, 255)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def test_palette_resolves_colors():
    palette = Palette(fg=RED, bg=BLUE)
    assert palette.resolve(ShapeColor.FOREGROUND) == RED
    assert palette.resolve(ShapeColor.BACKGROUND) == BLUE


@pytest.mark.parametrize("color", [(0, 0), (0, 0, 256), (-1, 0, 0)])
def test_palette_rejects_bad_colors(color):
    with pytest.raises(ValueError):
        Palette(fg=color)


def test_world_to_pixel():
    assert world_to_pixel((0.0, 0.0), (300, 200)) == (150.0, 100.0)
    assert world_to_pixel((-10.0, 20.0), (300, 200)) == (140.0, 80.0)


def test_render_dark_grid():
    grid = ModuleGrid(np.ones((21, 21), dtype=bool))
    shapes = generate_layout(grid, LayoutParams())
    image = render_shapes(
        shapes,
        canvas_size=(300, 300),
        palette=Palette(fg=BLACK, bg=WHITE),
        clear_color=BLUE,
    )
    assert image.mode == "RGB"
    assert image.size == (300, 300)
    # outside the plate
    assert image.getpixel((1, 1)) == BLUE
    # top-left finder square at row 0, col 0
    assert image.getpixel((45, 45)) == BLACK
    # data circle at row 0, col 10
    assert image.getpixel((145, 45)) == BLACK
    # blank center shows the plate
    assert image.getpixel((150, 150)) == WHITE


def test_circle_leaves_corners_to_plate():
    shapes = [
        ShapeDescriptor(ShapeKind.SQUARE, ShapeColor.BACKGROUND, (0.0, 0.0), (40.0, 40.0), depth=-1),
        ShapeDescriptor(ShapeKind.CIRCLE, ShapeColor.FOREGROUND, (0.0, 0.0), (30.0, 30.0)),
    ]
    image = render_shapes(shapes, canvas_size=(40, 40), palette=Palette(fg=RED, bg=WHITE))
    assert image.getpixel((20, 20)) == RED
    assert image.getpixel((6, 6)) == WHITE


def test_square_fills_its_corners():
    shapes = [
        ShapeDescriptor(ShapeKind.SQUARE, ShapeColor.FOREGROUND, (0.0, 0.0), (30.0, 30.0)),
    ]
    image = render_shapes(shapes, canvas_size=(40, 40), palette=Palette(fg=RED, bg=WHITE))
    assert image.getpixel((6, 6)) == RED
    assert image.getpixel((34, 34)) == RED
    assert image.getpixel((35, 35)) == WHITE


def test_shapes_drawn_by_depth():
    plate = ShapeDescriptor(
        ShapeKind.SQUARE, ShapeColor.BACKGROUND, (0.0, 0.0), (40.0, 40.0), depth=-1
    )
    dot = ShapeDescriptor(ShapeKind.SQUARE, ShapeColor.FOREGROUND, (0.0, 0.0), (10.0, 10.0))
    image = Image.new("RGB", (40, 40), BLUE)
    # plate listed last but drawn first
    draw_shapes(image, [dot, plate], Palette(fg=RED, bg=WHITE))
    assert image.getpixel((20, 20)) == RED
    assert image.getpixel((2, 2)) == WHITE


def test_normalize_grayscale_array():
    arr = normalize_image(np.full((4, 5), 7, dtype=np.uint8))
    assert arr.shape == (4, 5, 3)
    assert arr.dtype == np.uint8


def test_normalize_drops_alpha_unless_allowed():
    rgba = np.zeros((2, 2, 4), dtype=np.uint8)
    assert normalize_image(rgba).shape == (2, 2, 3)
    assert normalize_image(rgba, allow_alpha=True).shape == (2, 2, 4)


def test_normalize_pil_image():
    img = Image.new("RGBA", (3, 2), (1, 2, 3, 4))
    assert normalize_image(img).shape == (2, 3, 3)
    assert normalize_image(img, allow_alpha=True).shape == (2, 3, 4)


def test_normalize_rejects_bad_input():
    with pytest.raises(TypeError):
        normalize_image([[0, 1]], name="overlay")
    with pytest.raises(ValueError):
        normalize_image(np.zeros((2, 2, 2)))
    with pytest.raises(ValueError):
        normalize_image(np.zeros((2, 2, 3, 1)))


def test_composite_image_fills_rect():
    base = Image.new("RGB", (50, 50), WHITE)
    overlay = Image.new("RGB", (10, 10), RED)
    composite_image(base, overlay, (5, 5, 20, 20))
    assert base.getpixel((10, 10)) == RED
    assert base.getpixel((24, 24)) == RED
    assert base.getpixel((0, 0)) == WHITE
    assert base.getpixel((30, 30)) == WHITE


def test_composite_image_respects_alpha():
    base = Image.new("RGB", (20, 20), WHITE)
    overlay = np.zeros((10, 10, 4), dtype=np.uint8)
    overlay[..., 0] = 255
    overlay[:5, :, 3] = 255  # top half opaque, bottom transparent
    composite_image(base, overlay, (0, 0, 10, 10))
    assert base.getpixel((5, 1)) == RED
    assert base.getpixel((5, 8)) == WHITE


def test_composite_image_rejects_empty_rect():
    with pytest.raises(ValueError):
        composite_image(Image.new("RGB", (5, 5)), Image.new("RGB", (2, 2)), (0, 0, 0, 3))


def test_png_output(tmp_path):
    image = Image.new("RGB", (8, 8), RED)
    data = to_png_bytes(image)
    assert data.startswith(b"\x89PNG")

    path = save_png(image, tmp_path / "out.png")
    with Image.open(path) as reloaded:
        assert reloaded.size == (8, 8)
        assert reloaded.convert("RGB").getpixel((3, 3)) == RED


def test_render_sub_pixel_blocks():
    grid = ModuleGrid(np.ones((21, 21), dtype=bool))
    params = LayoutParams(block_size=0.5, center_exclusion_size=3.5)
    image = render_shapes(
        generate_layout(grid, params),
        canvas_size=(40, 40),
        palette=Palette(fg=BLACK, bg=WHITE),
        clear_color=BLUE,
    )
    assert image.size == (40, 40)
    assert image.getpixel((0, 0)) == BLUE
    # the 10.5 px grid covers the canvas center
    assert image.getpixel((15, 15)) != BLUE

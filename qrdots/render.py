"""
Pillow rendering of shape layouts.

Shape descriptors live in layout coordinates (origin at the canvas
center, y up). This module maps them onto a Pillow canvas (origin at the
top-left corner, y down), draws them in depth order, and composites
overlay images at fixed screen-space rectangles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Iterable, Union

import numpy as np
from PIL import Image, ImageDraw

from qrdots.layout import Point, ShapeColor, ShapeDescriptor, ShapeKind


logger = logging.getLogger(__name__)

Color = tuple[int, int, int]  # (R, G, B)
ImageLike = Union[np.ndarray, Image.Image]
Rect = tuple[int, int, int, int]  # (left, top, width, height)


def check_color(value: Color, name: str) -> Color:
    rgb = tuple(int(c) for c in value)
    if len(rgb) != 3 or not all(0 <= c <= 255 for c in rgb):
        raise ValueError(f"'{name}' must be an (R, G, B) triple in 0-255")
    return rgb


@dataclass(frozen=True)
class Palette:
    """
    RGB values for the two shape colors.

    Parameters
    ----------
    fg : Color, optional
        Color of dark modules. The default is (0, 0, 0).
    bg : Color, optional
        Color of light modules and the background plate. The default is
        (255, 255, 255).
    """

    fg: Color = (0, 0, 0)
    bg: Color = (255, 255, 255)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fg", check_color(self.fg, "fg"))
        object.__setattr__(self, "bg", check_color(self.bg, "bg"))

    def resolve(self, color: ShapeColor) -> Color:
        return self.fg if color is ShapeColor.FOREGROUND else self.bg


def world_to_pixel(point: Point, canvas_size: tuple[int, int]) -> Point:
    """Convert a layout-space point to canvas pixel coordinates."""
    width, height = canvas_size
    x, y = point
    return width / 2.0 + x, height / 2.0 - y


def _bounding_box(
    shape: ShapeDescriptor,
    canvas_size: tuple[int, int],
) -> list[float]:
    px, py = world_to_pixel(shape.center, canvas_size)
    half_w = shape.size[0] / 2.0
    half_h = shape.size[1] / 2.0
    x0, y0 = px - half_w, py - half_h
    # Pillow boxes include their far edge; sub-pixel shapes collapse to x0
    return [x0, y0, max(x0, px + half_w - 1), max(y0, py + half_h - 1)]


def draw_shapes(
    image: Image.Image,
    shapes: Iterable[ShapeDescriptor],
    palette: Palette,
) -> Image.Image:
    """
    Draw shape descriptors onto an image in place.

    Shapes are drawn in increasing depth; shapes of equal depth keep
    their input order.

    Parameters
    ----------
    image : PIL.Image.Image
        Canvas to draw on. The layout origin maps to its center.
    shapes : iterable of ShapeDescriptor
        Shapes to draw.
    palette : Palette
        RGB values used for foreground and background shapes.

    Returns
    -------
    PIL.Image.Image
        The same image, for chaining.
    """
    draw = ImageDraw.Draw(image)
    count = 0
    for shape in sorted(shapes, key=lambda s: s.depth):
        box = _bounding_box(shape, image.size)
        fill = palette.resolve(shape.color)
        if shape.kind is ShapeKind.CIRCLE:
            draw.ellipse(box, fill=fill)
        else:
            draw.rectangle(box, fill=fill)
        count += 1

    logger.debug("Drew %d shapes on a %dx%d canvas", count, *image.size)
    return image


def render_shapes(
    shapes: Iterable[ShapeDescriptor],
    *,
    canvas_size: tuple[int, int] = (1280, 720),
    palette: Palette = Palette(),
    clear_color: Color = (255, 255, 255),
) -> Image.Image:
    """
    Render shape descriptors to a new RGB image.

    Parameters
    ----------
    shapes : iterable of ShapeDescriptor
        Shapes to draw.
    canvas_size : tuple of int, optional
        Canvas (width, height) in pixels. The default is (1280, 720).
    palette : Palette, optional
        Shape colors. The default is black on white.
    clear_color : Color, optional
        Color of the canvas outside any shape. The default is white.

    Returns
    -------
    PIL.Image.Image
        Image in RGB mode.
    """
    image = Image.new(
        "RGB",
        tuple(canvas_size),
        check_color(clear_color, "clear_color"),
    )
    return draw_shapes(image, shapes, palette)


def normalize_image(
    image: ImageLike,
    *,
    name: str = "image",
    allow_alpha: bool = False,
) -> np.ndarray:
    """
    Normalize a NumPy array or PIL Image into a uint8 array.

    Parameters
    ----------
    image : numpy.ndarray or PIL.Image.Image
        Input image. Supported forms are:
        - Grayscale array of shape (H, W).
        - RGB array of shape (H, W, 3).
        - RGBA array of shape (H, W, 4); the alpha channel is
          preserved if `allow_alpha` is True and dropped otherwise.
        - PIL Image in any mode Pillow can convert to RGB.
    name : str, optional
        Name used in error messages. The default is "image".
    allow_alpha : bool, optional
        If True, RGBA input keeps its alpha channel. The default is
        False.

    Returns
    -------
    numpy.ndarray
        Array with dtype uint8 and shape (H, W, 3) or, when
        `allow_alpha` is True, possibly (H, W, 4).

    Raises
    ------
    TypeError
        If `image` is not a NumPy array or PIL Image.
    ValueError
        If the input has an unsupported shape or channel count.
    """
    # --- PIL input ---
    if isinstance(image, Image.Image):
        if allow_alpha and (
            image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info
        ):
            # Preserve alpha if present
            return np.asarray(image.convert("RGBA"), dtype=np.uint8)
        return np.asarray(image.convert("RGB"), dtype=np.uint8)

    # --- NumPy input ---
    if not isinstance(image, np.ndarray):
        raise TypeError(f"{name} must be a NumPy array or PIL.Image.Image")

    arr = np.asarray(image)
    if arr.ndim == 2:
        # Grayscale → RGB
        arr = np.stack([arr] * 3, axis=-1)
    elif arr.ndim == 3:
        channels = arr.shape[2]
        if channels == 4:
            if not allow_alpha:
                arr = arr[..., :3]  # drop alpha
        elif channels != 3:
            raise ValueError(
                f"{name} array has unsupported channel count {channels}; "
                f"expected 1, 3, or 4 channels."
            )
    else:
        raise ValueError(
            f"{name} array must be 2D (grayscale) or 3D (color); "
            f"got shape {arr.shape}"
        )

    return arr.astype(np.uint8)


def composite_image(
    base: Image.Image,
    overlay: ImageLike,
    rect: Rect,
) -> Image.Image:
    """
    Paste an image into a screen-space rectangle of `base`.

    The overlay is resized to the rectangle and pasted using its alpha
    channel as a transparency mask when it has one.

    Parameters
    ----------
    base : PIL.Image.Image
        Canvas to composite onto. Modified in place.
    overlay : numpy.ndarray or PIL.Image.Image
        Image to paste.
    rect : tuple of int
        Target rectangle as (left, top, width, height) in pixels.

    Returns
    -------
    PIL.Image.Image
        The same `base` image.

    Raises
    ------
    ValueError
        If the rectangle has a non-positive width or height.
    """
    left, top, width, height = (int(v) for v in rect)
    if width <= 0 or height <= 0:
        raise ValueError("overlay rectangle must have a positive size")

    overlay_arr = normalize_image(overlay, name="overlay", allow_alpha=True)
    # Ensure we have an RGBA image for alpha compositing
    overlay_img = Image.fromarray(overlay_arr).convert("RGBA")
    overlay_resized = overlay_img.resize((width, height), Image.LANCZOS)

    # Paste with alpha
    base.paste(overlay_resized, (left, top), overlay_resized)
    return base


def to_png_bytes(image: Image.Image) -> bytes:
    """Return PNG-encoded bytes of `image`."""
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def save_png(image: Image.Image, path: str | Path) -> Path:
    """Write `image` to `path` as PNG and return the path."""
    path = Path(path)
    image.save(path, format="PNG")
    logger.info("Saved %dx%d image to %s", image.width, image.height, path)
    return path

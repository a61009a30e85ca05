"""
Scene assembly.

A Scene collects two independent layers: the QR shapes and any
screen-space images placed on top of them. The two setup functions,
``spawn_pattern`` and ``add_center_image``, each add to one layer and can
run in either order; ``Scene.render`` always draws shapes by depth first
and composites images afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from qrdots.config import SceneConfig
from qrdots.encode import encode_grid
from qrdots.layout import (
    LayoutParams,
    ModuleGrid,
    ShapeDescriptor,
    generate_layout,
)
from qrdots.render import (
    Color,
    ImageLike,
    Palette,
    Rect,
    composite_image,
    render_shapes,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImagePlacement:
    """An image pinned to a screen-space rectangle."""

    image: ImageLike
    rect: Rect


class Scene:
    """
    Drawable content of one window.

    Parameters
    ----------
    window_size : tuple of int, optional
        Canvas (width, height) in pixels. The default is (1280, 720).
    clear_color : Color, optional
        Canvas color. The default is white.
    palette : Palette, optional
        Colors used for shape descriptors.
    """

    def __init__(
        self,
        window_size: tuple[int, int] = (1280, 720),
        clear_color: Color = (255, 255, 255),
        palette: Palette = Palette(),
    ) -> None:
        self.window_size = tuple(window_size)
        self.clear_color = clear_color
        self.palette = palette
        self._shapes: list[ShapeDescriptor] = []
        self._images: list[ImagePlacement] = []

    @property
    def shapes(self) -> tuple[ShapeDescriptor, ...]:
        return tuple(self._shapes)

    @property
    def images(self) -> tuple[ImagePlacement, ...]:
        return tuple(self._images)

    def add_shapes(self, shapes: list[ShapeDescriptor]) -> None:
        self._shapes.extend(shapes)

    def add_image(self, image: ImageLike, rect: Rect) -> None:
        self._images.append(ImagePlacement(image=image, rect=tuple(rect)))

    def render(self) -> Image.Image:
        """Draw all shapes, then composite all images, onto a new canvas."""
        canvas = render_shapes(
            self._shapes,
            canvas_size=self.window_size,
            palette=self.palette,
            clear_color=self.clear_color,
        )
        for placement in self._images:
            composite_image(canvas, placement.image, placement.rect)
        return canvas


def spawn_pattern(scene: Scene, grid: ModuleGrid, params: LayoutParams) -> None:
    """Lay out `grid` and add the resulting shapes to `scene`."""
    shapes = generate_layout(grid, params)
    scene.add_shapes(shapes)
    logger.info("Spawned %d shapes for the QR pattern", len(shapes))


def add_center_image(scene: Scene, image: ImageLike, rect: Rect) -> None:
    """Place `image` at the screen-space rectangle `rect`."""
    scene.add_image(image, rect)
    logger.info("Placed center image at %s", tuple(rect))


def build_scene(
    config: SceneConfig,
    *,
    overlay: Optional[ImageLike] = None,
) -> Scene:
    """
    Encode the payload and run both setup steps.

    Parameters
    ----------
    config : SceneConfig
        Payload, layout and window settings.
    overlay : numpy.ndarray or PIL.Image.Image, optional
        Center image. When None, ``config.overlay_path`` is loaded if
        set; a missing file is logged and the scene is built without it.

    Returns
    -------
    Scene
        Scene holding the QR shapes and, if available, the overlay.

    Raises
    ------
    qrcode.exceptions.DataOverflowError
        If the payload does not fit in a QR code.
    """
    grid = encode_grid(config.qr_spec)

    scene = Scene(
        window_size=config.window_size,
        clear_color=config.clear_color,
        palette=config.palette,
    )

    if overlay is None and config.overlay_path is not None:
        try:
            with Image.open(config.overlay_path) as img:
                overlay = img.copy()
        except FileNotFoundError:
            logger.warning("Center image not found: %s", config.overlay_path)

    spawn_pattern(scene, grid, config.layout_params)
    if overlay is not None:
        add_center_image(scene, overlay, config.overlay_rect)
    return scene

"""
Configuration defaults and loading.

The defaults reproduce the bundled demo: a 1280x720 window with a white
clear color, the payload "Merry christmas NERDS!", 10 px blocks, 7-module
finder squares and a 70 px blank center holding a 50x50 image.

Classes
-------
SceneConfig
    Frozen, validated configuration for one scene.

Functions
---------
load_config
    Read a SceneConfig from a JSON file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from qrdots.encode import QRSpec
from qrdots.layout import LayoutParams
from qrdots.render import Color, Palette, Rect, check_color


logger = logging.getLogger(__name__)

DEFAULT_DATA = "Merry christmas NERDS!"
DEFAULT_ECC = "M"
DEFAULT_BLOCK_SIZE = 10.0
DEFAULT_CORNER_MARKER_SIZE = 7
DEFAULT_CENTER_EXCLUSION_SIZE = 70.0
DEFAULT_WINDOW_SIZE = (1280, 720)
DEFAULT_CLEAR_COLOR = (255, 255, 255)
DEFAULT_OVERLAY_RECT = (620, 400, 50, 50)
DEFAULT_OVERLAY_PATH = "assets/myface.png"


@dataclass(frozen=True)
class SceneConfig:
    """
    Settings for building a scene.

    Parameters
    ----------
    data : str
        Payload encoded into the QR code.
    ecc : str
        QR error-correction level, one of 'L', 'M', 'Q', 'H'.
    block_size, corner_marker_size, center_exclusion_size
        Layout settings, see ``qrdots.layout.LayoutParams``.
    window_size : tuple of int
        Canvas (width, height) in pixels.
    clear_color, fg, bg : Color
        Canvas color, dark module color and light module color.
    overlay_path : str, optional
        Image placed in the center of the code. No image is drawn when
        None.
    overlay_rect : tuple of int
        Screen-space (left, top, width, height) of the overlay image.

    Raises
    ------
    ValueError
        If any value fails the checks of QRSpec, LayoutParams or Palette,
        or if the window or overlay rectangle has a non-positive size.
    TypeError
        If a layout size has the wrong type, see LayoutParams.
    """

    data: str = DEFAULT_DATA
    ecc: str = DEFAULT_ECC
    block_size: float = DEFAULT_BLOCK_SIZE
    corner_marker_size: int = DEFAULT_CORNER_MARKER_SIZE
    center_exclusion_size: float = DEFAULT_CENTER_EXCLUSION_SIZE
    window_size: tuple[int, int] = DEFAULT_WINDOW_SIZE
    clear_color: Color = DEFAULT_CLEAR_COLOR
    fg: Color = (0, 0, 0)
    bg: Color = (255, 255, 255)
    overlay_path: Optional[str] = None
    overlay_rect: Rect = DEFAULT_OVERLAY_RECT

    def __post_init__(self) -> None:
        # JSON gives lists; store tuples so the config stays hashable
        for name in ("window_size", "clear_color", "fg", "bg", "overlay_rect"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        # Component value objects validate and normalize their own fields
        object.__setattr__(self, "ecc", self.qr_spec.ecc)
        params = self.layout_params
        object.__setattr__(self, "block_size", params.block_size)
        object.__setattr__(
            self, "center_exclusion_size", params.center_exclusion_size
        )
        palette = Palette(fg=self.fg, bg=self.bg)
        object.__setattr__(self, "fg", palette.fg)
        object.__setattr__(self, "bg", palette.bg)
        object.__setattr__(
            self, "clear_color", check_color(self.clear_color, "clear_color")
        )

        if len(self.window_size) != 2 or min(self.window_size) <= 0:
            raise ValueError("'window_size' must be a positive (width, height)")
        if len(self.overlay_rect) != 4 or min(self.overlay_rect[2:]) <= 0:
            raise ValueError(
                "'overlay_rect' must be (left, top, width, height) "
                "with a positive size"
            )

    @property
    def qr_spec(self) -> QRSpec:
        return QRSpec(data=self.data, ecc=self.ecc)

    @property
    def layout_params(self) -> LayoutParams:
        return LayoutParams(
            block_size=self.block_size,
            corner_marker_size=self.corner_marker_size,
            center_exclusion_size=self.center_exclusion_size,
        )

    @property
    def palette(self) -> Palette:
        return Palette(fg=self.fg, bg=self.bg)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "SceneConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path) -> SceneConfig:
    """
    Read a SceneConfig from a JSON object file.

    Keys missing from the file keep their defaults.
    """
    path = Path(path)
    logger.info("Loading config from: %s", path)
    with path.open("r", encoding="utf-8") as f:
        values = json.load(f)
    if not isinstance(values, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return SceneConfig.from_dict(values)

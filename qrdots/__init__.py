"""
Dotted QR code layouts.

This package turns a payload string into a QR module grid and lays the
grid out as 2D shapes: circles for data modules, squares for the three
finder-pattern corners, and a blank square in the middle where an image
can be placed. The layout is a plain list of shape descriptors, so any
2D renderer can consume it; a Pillow renderer is included.

Functions
---------
make_grid
    Encode a payload into a ModuleGrid.
generate_layout
    Map a ModuleGrid to a list of ShapeDescriptor.
build_scene
    Encode, lay out and place the center image from a SceneConfig.

Classes
-------
ModuleGrid
    Immutable boolean module matrix.
LayoutParams
    Block size, corner marker size and center exclusion size.
ShapeDescriptor
    One drawable shape.
SceneConfig
    Frozen settings for one scene.

Examples
--------
>>> grid = make_grid("Merry christmas NERDS!")
>>> shapes = generate_layout(grid, LayoutParams(block_size=10))
>>> shapes[0].kind
<ShapeKind.SQUARE: 'square'>

Render the default scene to a PNG:

>>> scene = build_scene(SceneConfig())
>>> scene.render().save("qrdots.png")
"""

from qrdots.config import SceneConfig, load_config
from qrdots.encode import QRSpec, encode_grid, make_grid
from qrdots.layout import (
    CellRange,
    LayoutParams,
    ModuleGrid,
    ShapeColor,
    ShapeDescriptor,
    ShapeKind,
    center_exclusion_zone,
    corner_zones,
    generate_layout,
)
from qrdots.render import Palette, render_shapes
from qrdots.scene import Scene, add_center_image, build_scene, spawn_pattern

__all__ = [
    "CellRange",
    "LayoutParams",
    "ModuleGrid",
    "Palette",
    "QRSpec",
    "Scene",
    "SceneConfig",
    "ShapeColor",
    "ShapeDescriptor",
    "ShapeKind",
    "add_center_image",
    "build_scene",
    "center_exclusion_zone",
    "corner_zones",
    "encode_grid",
    "generate_layout",
    "load_config",
    "make_grid",
    "render_shapes",
    "spawn_pattern",
]

__version__ = "0.1.0"

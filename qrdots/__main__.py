"""Command-line interface."""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Optional, Sequence

from qrcode.exceptions import DataOverflowError

from qrdots.config import DEFAULT_OVERLAY_PATH, SceneConfig, load_config
from qrdots.logging_config import setup_logging
from qrdots.render import save_png
from qrdots.scene import build_scene


logger = logging.getLogger("qrdots.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrdots",
        description="Render a QR code as dots with a blank center for an image.",
    )
    parser.add_argument("--data", help="payload to encode")
    parser.add_argument(
        "--ecc",
        type=str.upper,
        choices=["L", "M", "Q", "H"],
        help="error-correction level",
    )
    parser.add_argument("--config", help="JSON file with scene settings")
    parser.add_argument(
        "--overlay",
        nargs="?",
        const=DEFAULT_OVERLAY_PATH,
        help=f"center image (default when given without a value: {DEFAULT_OVERLAY_PATH})",
    )
    parser.add_argument(
        "-o", "--output", default="qrdots.png", help="output PNG path"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log debug messages"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config) if args.config else SceneConfig()
    overrides = {
        name: value
        for name, value in (
            ("data", args.data),
            ("ecc", args.ecc),
            ("overlay_path", args.overlay),
        )
        if value is not None
    }
    if overrides:
        config = dataclasses.replace(config, **overrides)

    try:
        scene = build_scene(config)
    except DataOverflowError:
        logger.exception("Payload does not fit in a QR code")
        return 1

    save_png(scene.render(), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

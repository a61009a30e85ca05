"""
QR payload encoding.

Wraps the qrcode library so that a payload string turns into a
ModuleGrid at one module per cell, without quiet-zone padding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import qrcode
from qrcode.constants import (
    ERROR_CORRECT_L,
    ERROR_CORRECT_M,
    ERROR_CORRECT_Q,
    ERROR_CORRECT_H,
)
from qrcode.exceptions import DataOverflowError

from qrdots.layout import ModuleGrid


logger = logging.getLogger(__name__)

_ECC_MAP = {
    "L": ERROR_CORRECT_L,  # ~7% error correction
    "M": ERROR_CORRECT_M,  # ~15% (default)
    "Q": ERROR_CORRECT_Q,  # ~25%
    "H": ERROR_CORRECT_H,  # ~30%
}


@dataclass(frozen=True)
class QRSpec:
    """
    Immutable payload and error-correction settings for a QR code.

    Parameters
    ----------
    data : str
        Payload encoded into the QR code. Must be a non-empty string.
    ecc : {'L', 'M', 'Q', 'H'}, optional
        Error-correction level. The value is case-insensitive and is
        normalized to uppercase. The default is 'M'.

        A higher level leaves more room for the blank center area used
        by the overlay image, at the cost of a larger grid.

    Raises
    ------
    ValueError
        If `data` is empty or whitespace.
    ValueError
        If `ecc` is not one of {'L', 'M', 'Q', 'H'}.
    """

    data: str
    ecc: str = "M"

    def __post_init__(self) -> None:
        if not isinstance(self.data, str) or not self.data.strip():
            raise ValueError("'data' must be a non-empty string")

        ecc_upper = str(self.ecc).upper()
        if ecc_upper not in _ECC_MAP:
            raise ValueError("'ecc' must be one of {'L', 'M', 'Q', 'H'}")

        # Store normalized ECC
        object.__setattr__(self, "ecc", ecc_upper)

    @property
    def ecc_level(self) -> int:
        """Numeric qrcode error-correction constant for `ecc`."""
        return _ECC_MAP[self.ecc]


def encode_grid(spec: QRSpec) -> ModuleGrid:
    """
    Encode a payload into a module grid.

    Parameters
    ----------
    spec : QRSpec
        Payload and error-correction level.

    Returns
    -------
    ModuleGrid
        Grid with one cell per module and no quiet zone.

    Raises
    ------
    qrcode.exceptions.DataOverflowError
        If the payload does not fit in the largest QR version.
    """
    qr = qrcode.QRCode(
        version=None,  # let the library pick
        error_correction=spec.ecc_level,
        box_size=1,
        border=0,
    )
    qr.add_data(spec.data)
    try:
        qr.make(fit=True)
    except ValueError as exc:
        # Newer qrcode releases overflow into an invalid version number
        raise DataOverflowError(
            f"{len(spec.data)} characters do not fit in a QR code "
            f"at ECC level {spec.ecc}"
        ) from exc

    grid = ModuleGrid(qr.get_matrix())
    logger.info(
        "Encoded %d characters as version %d (%dx%d modules, ECC %s)",
        len(spec.data),
        qr.version,
        grid.width,
        grid.height,
        spec.ecc,
    )
    return grid


def make_grid(data: str, *, ecc: str = "M") -> ModuleGrid:
    """Shortcut for ``encode_grid(QRSpec(data, ecc))``."""
    return encode_grid(QRSpec(data=data, ecc=ecc))

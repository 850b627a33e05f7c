"""Per-screen reference DPI, with the user's font DPI preference on top"""

from __future__ import annotations

import logging
import math
from typing import Optional

from xdpi.common.errors import InvalidOverride

logger = logging.getLogger(__name__)

__all__ = [
    "REFERENCE_FONT_DPI",
    "REFERENCE_PROTOCOL",
    "fontDpi_parse",
    "referenceDpi_resolve",
]

REFERENCE_PROTOCOL = "protocol"
REFERENCE_FONT_DPI = "Xft.dpi"


def fontDpi_parse(value: str) -> float:
    """
    Parse a font DPI preference string.

    Args:
        value: Raw resource value, e.g. "144" or " 120.5 "

    Returns:
        Parsed DPI

    Raises:
        InvalidOverride: If the value is not a strictly positive finite number
    """
    try:
        dpi = float(value.strip())
    except ValueError as e:
        raise InvalidOverride(f"Font DPI {value!r} is not a number") from e
    if not math.isfinite(dpi) or dpi <= 0:
        raise InvalidOverride(f"Font DPI {value!r} is not positive")
    return dpi


def referenceDpi_resolve(protocol_dpi: float, font_dpi: Optional[str]) -> tuple[float, str]:
    """
    Pick the baseline DPI of a screen.

    Args:
        protocol_dpi: DPI derived from the core screen geometry
        font_dpi: Xft.dpi resource value, None when not set

    Returns:
        Tuple of (reference DPI, where it came from)
    """
    if font_dpi is None or not font_dpi.strip():
        return float(protocol_dpi), REFERENCE_PROTOCOL

    try:
        dpi = fontDpi_parse(font_dpi)
    except InvalidOverride as e:
        logger.warning(f"Ignoring {REFERENCE_FONT_DPI}: {e}")
        return float(protocol_dpi), REFERENCE_PROTOCOL

    logger.debug(f"{REFERENCE_FONT_DPI} {dpi} overrides protocol DPI {protocol_dpi}")
    return dpi, REFERENCE_FONT_DPI

"""Unit conversions from pixel counts and physical size"""

from __future__ import annotations

import math
from typing import Optional

from xdpi.common.settings import settings
from xdpi.common.types import DpiInfo

__all__ = [
    "axes_swap",
    "dotPitch_calculate",
    "dpi_and_pitch",
    "nearest_int",
    "perUnit_calculate",
    "representative_dpi",
]


def nearest_int(value: float) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def perUnit_calculate(pixels: int, mm: int, mm_per_unit: float) -> int:
    """
    Pixels per physical unit along one axis.

    Args:
        pixels: Pixel count along the axis
        mm: Physical length of the axis in millimeters
        mm_per_unit: Millimeters in one unit (25.4 for inches, 10 for cm)

    Returns:
        Rounded density, 0 when the physical length is unknown
    """
    if mm <= 0:
        return 0
    return nearest_int(pixels * mm_per_unit / mm)


def dotPitch_calculate(pixel_w: int, pixel_h: int, mm_w: int, mm_h: int) -> Optional[float]:
    """
    Distance between pixel centers along the diagonal, in millimeters.

    Returns:
        Dot pitch, or None when there are no pixels to divide by
    """
    if pixel_w == 0 and pixel_h == 0:
        return None
    return math.hypot(mm_w, mm_h) / math.hypot(pixel_w, pixel_h)


def dpi_and_pitch(pixel_w: int, pixel_h: int, mm_w: int, mm_h: int) -> DpiInfo:
    """
    Derive DPI, dots-per-cm and dot pitch of a pixel area.

    Pixel dimensions must already be axis-correct; callers swap the
    physical dimensions of a rotated output before calling (see axes_swap).

    Args:
        pixel_w: Width in pixels
        pixel_h: Height in pixels
        mm_w: Physical width in millimeters
        mm_h: Physical height in millimeters

    Returns:
        DpiInfo with zeros on any axis of unknown physical size
    """
    return DpiInfo(
        dpi_x=perUnit_calculate(pixel_w, mm_w, settings.MM_PER_INCH),
        dpi_y=perUnit_calculate(pixel_h, mm_h, settings.MM_PER_INCH),
        dpcm_x=perUnit_calculate(pixel_w, mm_w, settings.MM_PER_CM),
        dpcm_y=perUnit_calculate(pixel_h, mm_h, settings.MM_PER_CM),
        pitch_mm=dotPitch_calculate(pixel_w, pixel_h, mm_w, mm_h),
    )


def axes_swap(width: int, height: int, rotated: bool) -> tuple[int, int]:
    """Exchange width and height when rotated is set"""
    if rotated:
        return height, width
    return width, height


def representative_dpi(info: DpiInfo) -> int:
    """Single DPI value for an area: vertical, or horizontal if that is unknown"""
    if info.dpi_y != 0:
        return info.dpi_y
    return info.dpi_x

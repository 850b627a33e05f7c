"""Canonical Output and Monitor records built from raw descriptors"""

from __future__ import annotations

import logging
from typing import Optional

from xdpi.common.errors import QueryFailed
from xdpi.common.settings import settings
from xdpi.common.types import (
    ConnectionState,
    Monitor,
    NameData,
    Output,
    RawCrtc,
    RawMonitor,
    RawOutput,
    Rotation,
)
from xdpi.core.geometry import axes_swap, dpi_and_pitch, representative_dpi

logger = logging.getLogger(__name__)

__all__ = [
    "monitorRotation_infer",
    "monitor_build",
    "name_bound",
    "output_build",
]


def name_bound(name: NameData, max_bytes: int) -> str:
    """
    Convert a wire name into owned text of at most max_bytes bytes.

    Wire names carry an explicit length and no terminator; anything past
    the bound is dropped rather than rejected. A multi-byte character cut
    in half by the bound is dropped as well.

    Args:
        name: Name bytes (or already decoded text from a text-based source)
        max_bytes: Upper bound on the encoded length

    Returns:
        Decoded, bounded name
    """
    data = name.encode("utf-8", errors="replace") if isinstance(name, str) else bytes(name)
    if len(data) > max_bytes:
        logger.debug(f"Truncating {len(data)}-byte name to {max_bytes} bytes")
        data = data[:max_bytes]
        return data.decode("utf-8", errors="ignore")
    return data.decode("utf-8", errors="replace")


def _dimensions_check(kind: str, name: str, *values: Optional[int]) -> None:
    """Reject records with negative sizes"""
    for value in values:
        if value is not None and value < 0:
            raise QueryFailed(f"{kind} {name!r} reports negative dimension {value}")


def output_build(
    output: RawOutput,
    crtc: Optional[RawCrtc],
    primary_handle: Optional[int] = None,
    max_bytes: Optional[int] = None,
) -> Output:
    """
    Build the canonical record for one RandR output.

    The DPI is the unusable sentinel unless the output is connected, drives
    a CRTC and reports both physical dimensions. Pixel sizes come from the
    CRTC and are already rotated; the physical size is swapped to match
    when the CRTC is rotated by 90 or 270 degrees.

    Args:
        output: Raw output descriptor
        crtc: CRTC the output drives, None if it drives none
        primary_handle: Output handle the server reports as primary
        max_bytes: Name bound, defaults to the configured bound

    Returns:
        Canonical Output

    Raises:
        QueryFailed: If the descriptors carry negative dimensions
    """
    name = name_bound(output.name, max_bytes or settings.name_max_bytes)
    _dimensions_check("Output", name, output.mm_width, output.mm_height)

    connection = ConnectionState.fromValue(output.connection)
    primary = primary_handle is not None and primary_handle != 0 and output.handle == primary_handle

    width: Optional[int] = None
    height: Optional[int] = None
    rotated = False
    if crtc is not None:
        _dimensions_check("CRTC", str(crtc.handle), crtc.width, crtc.height)
        width, height = crtc.width, crtc.height
        rotated = Rotation.fromBits(crtc.rotation).isAxisSwapping()
    mm_w, mm_h = axes_swap(output.mm_width, output.mm_height, rotated)

    if (
        connection is not ConnectionState.CONNECTED
        or width is None
        or height is None
        or not mm_w
        or not mm_h
    ):
        return Output(
            name=name,
            handle=output.handle,
            width=width,
            height=height,
            mm_width=mm_w,
            mm_height=mm_h,
            rotated=rotated,
            connection=connection,
            primary=primary,
            dpi=settings.UNUSABLE_DPI,
        )

    info = dpi_and_pitch(width, height, mm_w, mm_h)
    return Output(
        name=name,
        handle=output.handle,
        width=width,
        height=height,
        mm_width=mm_w,
        mm_height=mm_h,
        rotated=rotated,
        connection=connection,
        primary=primary,
        dpi=representative_dpi(info),
        info=info,
    )


def monitorRotation_infer(width: int, height: int, mm_width: int, mm_height: int) -> bool:
    """
    Guess whether a monitor is rotated.

    Monitors carry no rotation; a monitor counts as rotated when its pixel
    area and its physical area disagree on being landscape.
    """
    return (width > height) != (mm_width > mm_height)


def monitor_build(monitor: RawMonitor, max_bytes: Optional[int] = None) -> Monitor:
    """
    Build the canonical record for one RandR 1.5 monitor.

    Args:
        monitor: Raw monitor descriptor
        max_bytes: Name bound, defaults to the configured bound

    Returns:
        Canonical Monitor

    Raises:
        QueryFailed: If the descriptor carries negative dimensions
    """
    name = name_bound(monitor.name, max_bytes or settings.name_max_bytes)
    _dimensions_check(
        "Monitor", name, monitor.width, monitor.height, monitor.mm_width, monitor.mm_height
    )

    rotated = monitorRotation_infer(
        monitor.width, monitor.height, monitor.mm_width, monitor.mm_height
    )
    mm_w, mm_h = axes_swap(monitor.mm_width, monitor.mm_height, rotated)

    dpi = settings.UNUSABLE_DPI
    info = None
    if mm_w and mm_h:
        info = dpi_and_pitch(monitor.width, monitor.height, mm_w, mm_h)
        dpi = representative_dpi(info)

    return Monitor(
        name=name,
        width=monitor.width,
        height=monitor.height,
        mm_width=mm_w,
        mm_height=mm_h,
        primary=monitor.primary,
        automatic=monitor.automatic,
        rotated=rotated,
        dpi=dpi,
        info=info,
    )

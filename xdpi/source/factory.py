"""Topology source factory."""

from __future__ import annotations

from typing import Optional

from xdpi.source.backend import TopologySource

SUPPORTED_SOURCES: tuple[str, ...] = ("xlib", "xrandr")


def source_create(source_name: str, display_name: Optional[str]) -> TopologySource:
    """
    Create a topology source.

    Args:
        source_name: Source identifier ("xlib" or "xrandr")
        display_name: X11 display name, None for $DISPLAY

    Returns:
        Unconnected topology source

    Raises:
        ValueError: If the source name is unknown
    """
    source = source_name.lower()

    if source == "xlib":
        from xdpi.x11.source import XlibTopologySource

        return XlibTopologySource(display_name=display_name)

    if source == "xrandr":
        from xdpi.xrandr.source import XrandrTopologySource

        return XrandrTopologySource(display_name=display_name)

    raise ValueError(
        f"Unsupported source '{source_name}'. Supported: {', '.join(SUPPORTED_SOURCES)}."
    )

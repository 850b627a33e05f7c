"""Parsers for the text printed by xdpyinfo, xrandr and xrdb"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from Xlib import rdb

from xdpi.common.types import (
    ConnectionState,
    RawCrtc,
    RawMonitor,
    RawOutput,
    Rotation,
    XineramaRegion,
)

SCREEN_HEADER = re.compile(r"^screen #(?P<index>\d+):")
SCREEN_DIMENSIONS = re.compile(
    r"^\s+dimensions:\s+(?P<w>\d+)x(?P<h>\d+) pixels \((?P<mmw>\d+)x(?P<mmh>\d+) millimeters\)"
)
XINERAMA_HEAD = re.compile(
    r"^\s*head #(?P<index>\d+):\s+(?P<w>\d+)x(?P<h>\d+) @ (?P<x>-?\d+),\s*(?P<y>-?\d+)"
)
RANDR_VERSION = re.compile(r"Server reports RandR version (?P<major>\d+)\.(?P<minor>\d+)")
OUTPUT_LINE = re.compile(
    r"^(?P<name>\S+) (?P<state>connected|disconnected|unknown connection)"
    r"(?P<primary> primary)?"
    r"(?: (?P<w>\d+)x(?P<h>\d+)\+(?P<x>-?\d+)\+(?P<y>-?\d+))?"
    r"(?: (?P<rotation>normal|left|inverted|right))?"
    r"(?: (?:X axis|Y axis|X and Y axis))?"
    r"(?: \([^)]*\))?"
    r"(?: (?P<mmw>\d+)mm x (?P<mmh>\d+)mm)?"
)
MONITOR_LINE = re.compile(
    r"^\s*\d+:\s+(?P<automatic>\+)?(?P<primary>\*)?(?P<name>\S+)\s+"
    r"(?P<w>\d+)/(?P<mmw>\d+)x(?P<h>\d+)/(?P<mmh>\d+)\+(?P<x>-?\d+)\+(?P<y>-?\d+)"
)
DISPLAY_NAME = re.compile(r"^(?P<base>.*:\d+)(?:\.\d+)?$")

CONNECTION_STATES = {
    "connected": ConnectionState.CONNECTED,
    "disconnected": ConnectionState.DISCONNECTED,
    "unknown connection": ConnectionState.UNKNOWN,
}

ROTATIONS = {
    "normal": Rotation.NORMAL,
    "left": Rotation.LEFT,
    "inverted": Rotation.INVERTED,
    "right": Rotation.RIGHT,
}


@dataclass(frozen=True)
class CoreScreen:
    """Core screen geometry as printed by xdpyinfo"""
    index: int
    width: int
    height: int
    mm_width: int
    mm_height: int


@dataclass(frozen=True)
class QueryResult:
    """Outputs, CRTCs and primary output of one `xrandr --query`"""
    outputs: tuple[RawOutput, ...]
    crtcs: tuple[RawCrtc, ...]
    primary_output: Optional[int]


def xdpyinfoScreens_parse(text: str) -> list[CoreScreen]:
    """
    Extract per-screen size from xdpyinfo output.

    Returns:
        Screens in the order printed
    """
    screens = []
    current: Optional[int] = None
    for line in text.splitlines():
        header = SCREEN_HEADER.match(line)
        if header:
            current = int(header.group("index"))
            continue
        dimensions = SCREEN_DIMENSIONS.match(line)
        if dimensions and current is not None:
            screens.append(
                CoreScreen(
                    index=current,
                    width=int(dimensions.group("w")),
                    height=int(dimensions.group("h")),
                    mm_width=int(dimensions.group("mmw")),
                    mm_height=int(dimensions.group("mmh")),
                )
            )
            current = None
    return screens


def xdpyinfoXinerama_parse(text: str) -> list[XineramaRegion]:
    """Extract Xinerama heads from `xdpyinfo -ext XINERAMA` output"""
    return [
        XineramaRegion(
            index=int(match.group("index")),
            x=int(match.group("x")),
            y=int(match.group("y")),
            width=int(match.group("w")),
            height=int(match.group("h")),
        )
        for match in map(XINERAMA_HEAD.match, text.splitlines())
        if match
    ]


def randrVersion_parse(text: str) -> Optional[tuple[int, int]]:
    """Server RandR version from `xrandr --version`, None if not reported"""
    match = RANDR_VERSION.search(text)
    if match is None:
        return None
    return int(match.group("major")), int(match.group("minor"))


def query_parse(text: str) -> QueryResult:
    """
    Extract outputs from `xrandr --query` output.

    xrandr prints no resource ids, so outputs are numbered from 1 in the
    order printed and every active output gets a CRTC with the same
    number. The geometry xrandr prints is the rotated pixel area, as a
    CRTC reports it. The physical size is printed already swapped for
    outputs rotated by 90 or 270 degrees; it is swapped back here so the
    records carry the size the output itself reports.

    Returns:
        Outputs, their CRTCs and the primary output handle
    """
    outputs = []
    crtcs = []
    primary_output = None
    for line in text.splitlines():
        if not line or line[0].isspace() or line.startswith("Screen "):
            continue
        match = OUTPUT_LINE.match(line)
        if match is None:
            continue

        handle = len(outputs) + 1
        rotation = ROTATIONS[match.group("rotation") or "normal"]
        mm_width = int(match.group("mmw") or 0)
        mm_height = int(match.group("mmh") or 0)
        if rotation.isAxisSwapping():
            mm_width, mm_height = mm_height, mm_width

        crtc_handle = 0
        if match.group("w") is not None:
            crtc_handle = handle
            crtcs.append(
                RawCrtc(
                    handle=crtc_handle,
                    width=int(match.group("w")),
                    height=int(match.group("h")),
                    rotation=rotation.value,
                    outputs=(handle,),
                )
            )
        if match.group("primary"):
            primary_output = handle

        outputs.append(
            RawOutput(
                handle=handle,
                name=match.group("name").encode("utf-8"),
                connection=CONNECTION_STATES[match.group("state")].value,
                mm_width=mm_width,
                mm_height=mm_height,
                crtc=crtc_handle,
            )
        )
    return QueryResult(outputs=tuple(outputs), crtcs=tuple(crtcs), primary_output=primary_output)


def listmonitors_parse(text: str) -> list[RawMonitor]:
    """Extract monitors from `xrandr --listmonitors` output"""
    return [
        RawMonitor(
            name=match.group("name").encode("utf-8"),
            width=int(match.group("w")),
            height=int(match.group("h")),
            mm_width=int(match.group("mmw")),
            mm_height=int(match.group("mmh")),
            primary=match.group("primary") is not None,
            automatic=match.group("automatic") is not None,
        )
        for match in map(MONITOR_LINE.match, text.splitlines())
        if match
    ]


def xrdbFontDpi_parse(global_text: str, screen_text: str = "") -> Optional[str]:
    """
    Xft.dpi as an X client would resolve it from `xrdb -query` output.

    Wildcard entries such as `*dpi` match the same way they do for the
    protocol source. Per-screen entries override the display-wide ones.

    Args:
        global_text: Output of `xrdb -query -global`
        screen_text: Output of `xrdb -query -screen` for one screen

    Returns:
        Raw resource value, None if unset
    """
    database = rdb.ResourceDB(string=global_text)
    if screen_text:
        database.insert_string(screen_text)
    value = database.get("Xft.dpi", "Xft.Dpi", None)
    if value is None:
        return None
    return str(value)


def screenDisplay_name(display_name: Optional[str], index: int) -> Optional[str]:
    """Display name addressing one screen, e.g. `:0` and 1 give `:0.1`"""
    if not display_name:
        return None
    match = DISPLAY_NAME.match(display_name)
    if match is None:
        return None
    return f"{match.group('base')}.{index}"

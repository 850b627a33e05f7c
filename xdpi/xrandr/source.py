"""Topology source built on the xdpyinfo, xrandr and xrdb command-line tools"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Optional

from xdpi.common.errors import ConnectionUnavailable, ExtensionUnsupported, QueryFailed
from xdpi.common.settings import settings
from xdpi.common.types import RawRandr, RawScreen, RawTopology
from xdpi.xrandr.parser import (
    CoreScreen,
    listmonitors_parse,
    query_parse,
    randrVersion_parse,
    xdpyinfoScreens_parse,
    screenDisplay_name,
    xdpyinfoXinerama_parse,
    xrdbFontDpi_parse,
)

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT_SEC: float = 5.0


class XrandrTopologySource:
    """Collects the same records as the Xlib source from command output

    Outputs are enumerated first and each active output is given its own
    CRTC, so this source needs no protocol binding at all.
    """

    name = "xrandr"

    def __init__(self, display_name: Optional[str] = None) -> None:
        """
        Initialize the source

        Args:
            display_name: X11 display name (e.g., ':0'), None for $DISPLAY
        """
        self._display_name: Optional[str] = display_name
        self._environ: dict[str, str] = dict(os.environ)
        if display_name:
            self._environ["DISPLAY"] = display_name
        self._xdpyinfo: Optional[str] = None

    def command_run(self, *args: str) -> str:
        """
        Run one tool against the display

        Returns:
            Standard output

        Raises:
            QueryFailed: If the tool is missing, times out or fails
        """
        logger.debug(f"Running {' '.join(args)}")
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=COMMAND_TIMEOUT_SEC,
                env=self._environ,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise QueryFailed(f"{args[0]} could not be run: {e}") from e
        if result.returncode != 0:
            raise QueryFailed(
                f"{' '.join(args)} exited with {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout

    def connection_establish(self) -> None:
        """
        Check that the display answers, caching xdpyinfo output

        Raises:
            ConnectionUnavailable: If xdpyinfo cannot talk to the display
        """
        try:
            self._xdpyinfo = self.command_run("xdpyinfo", "-ext", "XINERAMA")
            return
        except QueryFailed as e:
            logger.debug(f"xdpyinfo with Xinerama failed, retrying without: {e}")
        try:
            self._xdpyinfo = self.command_run("xdpyinfo")
        except QueryFailed as e:
            raise ConnectionUnavailable(f"Could not open X display: {e}") from e

    def connection_close(self) -> None:
        """Forget cached tool output"""
        self._xdpyinfo = None

    def __enter__(self) -> "XrandrTopologySource":
        """Context manager entry"""
        self.connection_establish()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit"""
        self.connection_close()

    def topology_fetch(self) -> RawTopology:
        """
        Query every screen of the display

        Returns:
            Raw topology with one RawScreen per core screen
        """
        if self._xdpyinfo is None:
            raise RuntimeError("Not connected to X11 display")

        randr_version: Optional[tuple[int, int]] = None
        try:
            randr_version = self.randrVersion_get()
        except (ExtensionUnsupported, QueryFailed) as e:
            logger.info(f"No per-output data: {e}")

        global_resources = self.resources_get("-query", "-global")
        screens = tuple(
            RawScreen(
                index=core.index,
                width=core.width,
                height=core.height,
                mm_width=core.mm_width,
                mm_height=core.mm_height,
                font_dpi=self.fontDpi_get(core.index, global_resources),
                randr=self.randr_fetch(core, randr_version),
            )
            for core in xdpyinfoScreens_parse(self._xdpyinfo)
        )
        return RawTopology(
            backend=self.name,
            screens=screens,
            xinerama=tuple(xdpyinfoXinerama_parse(self._xdpyinfo)),
        )

    def randrVersion_get(self) -> tuple[int, int]:
        """
        Server RandR version

        Raises:
            ExtensionUnsupported: If RandR is missing or older than 1.2
            QueryFailed: If xrandr cannot be run
        """
        version = randrVersion_parse(self.command_run("xrandr", "--version"))
        if version is None:
            raise ExtensionUnsupported("RandR")
        if version < settings.RANDR_MIN_VERSION:
            raise ExtensionUnsupported("RandR", ".".join(map(str, settings.RANDR_MIN_VERSION)))
        return version

    def randr_fetch(
        self, core: CoreScreen, version: Optional[tuple[int, int]]
    ) -> Optional[RawRandr]:
        """
        RandR data of one screen

        Returns:
            RandR record, None without RandR or when the query fails
        """
        if version is None:
            return None
        screen = str(core.index)
        try:
            query = query_parse(self.command_run("xrandr", "--screen", screen, "--query"))
        except QueryFailed as e:
            logger.error(f"Screen {core.index}: {e}")
            return None

        monitors = None
        if version >= settings.RANDR_MONITOR_VERSION:
            try:
                monitors = tuple(
                    listmonitors_parse(
                        self.command_run("xrandr", "--screen", screen, "--listmonitors")
                    )
                )
            except QueryFailed as e:
                logger.error(f"Screen {core.index}: error getting monitors: {e}")

        primary_output = None
        if version >= settings.RANDR_PRIMARY_VERSION:
            primary_output = query.primary_output

        return RawRandr(
            version=version,
            outputs=query.outputs,
            crtcs=query.crtcs,
            primary_output=primary_output,
            monitors=monitors,
        )

    def resources_get(self, *args: str) -> str:
        """Resource database text from xrdb, empty when unreadable"""
        try:
            return self.command_run("xrdb", *args)
        except QueryFailed as e:
            logger.info(f"X resources unavailable: {e}")
            return ""

    def fontDpi_get(self, index: int, global_resources: str) -> Optional[str]:
        """
        Look up Xft.dpi for one screen

        SCREEN_RESOURCES of the screen, read through a display name that
        addresses it, take precedence over RESOURCE_MANAGER.

        Returns:
            Raw resource value, None when unset
        """
        screen_resources = ""
        screen_display = screenDisplay_name(self._environ.get("DISPLAY"), index)
        if screen_display is not None:
            screen_resources = self.resources_get("-display", screen_display, "-query", "-screen")
        return xrdbFontDpi_parse(global_resources, screen_resources)

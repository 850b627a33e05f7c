"""Topology source speaking the X11 protocol through python-xlib"""

from __future__ import annotations

import logging
from typing import Any, Optional

from Xlib import X, Xatom, error as xerror, rdb
from Xlib import display as xdisplay
from Xlib.display import Display

from xdpi.common.errors import ConnectionUnavailable, ExtensionUnsupported, QueryFailed
from xdpi.common.settings import settings
from xdpi.common.types import (
    RawCrtc,
    RawMonitor,
    RawOutput,
    RawRandr,
    RawScreen,
    RawTopology,
    XineramaRegion,
)

logger = logging.getLogger(__name__)

RANDR_EXTENSION = "RANDR"
XINERAMA_EXTENSION = "XINERAMA"


class XlibTopologySource:
    """Queries core, Xinerama and RandR geometry over one X11 connection

    CRTCs are queried before outputs, the way the classic Xlib tools walk
    RandR. Each request blocks on its reply.
    """

    name = "xlib"

    def __init__(self, display_name: Optional[str] = None) -> None:
        """
        Initialize the source

        Args:
            display_name: X11 display name (e.g., ':0'), None for default
        """
        self._display: Optional[Display] = None
        self._display_name: Optional[str] = display_name

    def connection_establish(self) -> None:
        """
        Establish connection to X11 display

        Raises:
            ConnectionUnavailable: If the display cannot be opened
        """
        try:
            self._display = xdisplay.Display(self._display_name)
        except (xerror.DisplayError, OSError) as e:
            raise ConnectionUnavailable(f"Could not open X display: {e}") from e
        logger.debug(f"Connected to {self._display.get_display_name()}")

    def connection_close(self) -> None:
        """Close X11 display connection"""
        if self._display is not None:
            self._display.close()
            self._display = None

    def display_get(self) -> Display:
        """
        Get X11 display object

        Raises:
            RuntimeError: If not connected to display
        """
        if self._display is None:
            raise RuntimeError("Not connected to X11 display")
        return self._display

    def __enter__(self) -> "XlibTopologySource":
        """Context manager entry"""
        self.connection_establish()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit"""
        self.connection_close()

    # =========================================================================
    # Topology
    # =========================================================================

    def topology_fetch(self) -> RawTopology:
        """
        Query every screen of the display

        Returns:
            Raw topology with one RawScreen per core screen

        Raises:
            ConnectionUnavailable: If the server drops the connection mid-query
        """
        try:
            return self.topology_query()
        except xerror.ConnectionClosedError as e:
            raise ConnectionUnavailable(f"X display connection lost: {e}") from e

    def topology_query(self) -> RawTopology:
        """Walk screens, RandR and Xinerama on the open connection"""
        display = self.display_get()
        global_resources = self.resourceManager_get(display.screen(0).root)

        randr_version: Optional[tuple[int, int]] = None
        try:
            randr_version = self.randrVersion_get()
        except ExtensionUnsupported as e:
            logger.info(f"No per-output data: {e}")

        screens = []
        for index in range(display.screen_count()):
            screens.append(self.screen_fetch(index, randr_version, global_resources))

        return RawTopology(backend=self.name, screens=tuple(screens), xinerama=self.xinerama_fetch())

    def screen_fetch(
        self, index: int, randr_version: Optional[tuple[int, int]], global_resources: str
    ) -> RawScreen:
        """
        Query one core screen and its RandR data

        Args:
            index: Screen number
            randr_version: Negotiated RandR version, None without RandR
            global_resources: RESOURCE_MANAGER contents

        Returns:
            Raw screen record
        """
        screen = self.display_get().screen(index)
        randr = None
        if randr_version is not None:
            try:
                randr = self.randr_fetch(index, screen.root, randr_version)
            except QueryFailed as e:
                logger.error(f"Screen {index}: {e}")

        return RawScreen(
            index=index,
            width=screen.width_in_pixels,
            height=screen.height_in_pixels,
            mm_width=screen.width_in_mms,
            mm_height=screen.height_in_mms,
            font_dpi=self.fontDpi_get(screen.root, global_resources),
            randr=randr,
        )

    # =========================================================================
    # RandR
    # =========================================================================

    def randrVersion_get(self) -> tuple[int, int]:
        """
        Negotiate the RandR version

        Raises:
            ExtensionUnsupported: If RandR is missing or older than 1.2
        """
        display = self.display_get()
        if not display.has_extension(RANDR_EXTENSION):
            raise ExtensionUnsupported("RandR")
        reply = display.xrandr_query_version()
        version = (reply.major_version, reply.minor_version)
        if version < settings.RANDR_MIN_VERSION:
            raise ExtensionUnsupported("RandR", ".".join(map(str, settings.RANDR_MIN_VERSION)))
        logger.debug(f"RandR {version[0]}.{version[1]}")
        return version

    def randr_fetch(self, index: int, root: Any, version: tuple[int, int]) -> RawRandr:
        """
        Query RandR resources of one screen

        Raises:
            QueryFailed: If the screen resources cannot be read
        """
        try:
            if version >= settings.RANDR_PRIMARY_VERSION:
                resources = root.xrandr_get_screen_resources_current()
            else:
                resources = root.xrandr_get_screen_resources()
        except xerror.XError as e:
            raise QueryFailed(f"error getting RandR resources: {e}") from e

        timestamp = resources.config_timestamp
        crtcs = self.crtcs_fetch(index, resources.crtcs, timestamp)
        outputs = self.outputs_fetch(index, resources.outputs, timestamp)

        primary_output = None
        if version >= settings.RANDR_PRIMARY_VERSION:
            try:
                primary_output = root.xrandr_get_output_primary().output
            except xerror.XError as e:
                logger.error(f"Screen {index}: error getting primary output: {e}")

        monitors = None
        if version >= settings.RANDR_MONITOR_VERSION:
            monitors = self.monitors_fetch(index, root)

        return RawRandr(
            version=version,
            outputs=outputs,
            crtcs=crtcs,
            primary_output=primary_output,
            monitors=monitors,
        )

    def crtcs_fetch(self, index: int, handles: list[int], timestamp: int) -> tuple[RawCrtc, ...]:
        """Query every CRTC, skipping the ones that fail"""
        display = self.display_get()
        crtcs = []
        for handle in handles:
            try:
                info = display.xrandr_get_crtc_info(handle, timestamp)
            except xerror.XError as e:
                logger.error(f"Screen {index}: error getting CRTC {handle}: {e}")
                continue
            crtcs.append(
                RawCrtc(
                    handle=handle,
                    width=info.width,
                    height=info.height,
                    rotation=info.rotation,
                    outputs=tuple(info.outputs),
                )
            )
        return tuple(crtcs)

    def outputs_fetch(
        self, index: int, handles: list[int], timestamp: int
    ) -> tuple[RawOutput, ...]:
        """Query every output, skipping the ones that fail"""
        display = self.display_get()
        outputs = []
        for handle in handles:
            try:
                info = display.xrandr_get_output_info(handle, timestamp)
            except xerror.XError as e:
                logger.error(f"Screen {index}: error getting output {handle}: {e}")
                continue
            outputs.append(
                RawOutput(
                    handle=handle,
                    name=info.name,
                    connection=info.connection,
                    mm_width=info.mm_width,
                    mm_height=info.mm_height,
                    crtc=info.crtc,
                )
            )
        return tuple(outputs)

    def monitors_fetch(self, index: int, root: Any) -> Optional[tuple[RawMonitor, ...]]:
        """
        Query RandR 1.5 monitors of one screen

        Returns:
            Monitors, None if the query failed
        """
        display = self.display_get()
        try:
            reply = root.xrandr_get_monitors(is_active=True)
        except xerror.XError as e:
            logger.error(f"Screen {index}: error getting monitors: {e}")
            return None

        monitors = []
        for monitor in reply.monitors:
            try:
                name = display.get_atom_name(monitor.name)
            except xerror.XError as e:
                logger.error(f"Screen {index}: error resolving monitor name {monitor.name}: {e}")
                continue
            monitors.append(
                RawMonitor(
                    name=name,
                    width=monitor.width_in_pixels,
                    height=monitor.height_in_pixels,
                    mm_width=monitor.width_in_millimeters,
                    mm_height=monitor.height_in_millimeters,
                    primary=bool(monitor.primary),
                    automatic=bool(monitor.automatic),
                )
            )
        return tuple(monitors)

    # =========================================================================
    # Xinerama
    # =========================================================================

    def xinerama_fetch(self) -> tuple[XineramaRegion, ...]:
        """
        Query Xinerama heads

        Returns:
            Heads, empty when Xinerama is absent or inactive
        """
        display = self.display_get()
        if not display.has_extension(XINERAMA_EXTENSION):
            logger.debug("Xinerama extension not available")
            return ()
        try:
            if not display.xinerama_is_active():
                return ()
            reply = display.xinerama_query_screens()
        except xerror.XError as e:
            logger.error(f"Error querying Xinerama screens: {e}")
            return ()

        return tuple(
            XineramaRegion(index=i, x=head.x, y=head.y, width=head.width, height=head.height)
            for i, head in enumerate(reply.screens)
        )

    # =========================================================================
    # X resources
    # =========================================================================

    def resourceManager_get(self, root: Any) -> str:
        """Contents of the RESOURCE_MANAGER property, empty if unset"""
        return self.stringProperty_get(root, Xatom.RESOURCE_MANAGER)

    def stringProperty_get(self, root: Any, atom: int) -> str:
        """Read a STRING property of a root window"""
        if atom == X.NONE:
            return ""
        try:
            prop = root.get_full_property(atom, Xatom.STRING)
        except xerror.XError as e:
            logger.error(f"Error reading property {atom}: {e}")
            return ""
        if prop is None:
            return ""
        value = prop.value
        if isinstance(value, bytes):
            return value.decode("latin-1")
        return str(value)

    def fontDpi_get(self, root: Any, global_resources: str) -> Optional[str]:
        """
        Look up Xft.dpi for one screen

        Per-screen SCREEN_RESOURCES entries take precedence over the
        display-wide RESOURCE_MANAGER entries.

        Returns:
            Raw resource value, None when unset
        """
        database = rdb.ResourceDB(string=global_resources)
        screen_atom = self.display_get().intern_atom("SCREEN_RESOURCES", only_if_exists=True)
        screen_resources = self.stringProperty_get(root, screen_atom)
        if screen_resources:
            database.insert_string(screen_resources)
        value = database.get("Xft.dpi", "Xft.Dpi", None)
        if value is None:
            return None
        return str(value)

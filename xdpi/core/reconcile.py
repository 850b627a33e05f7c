"""Topology reconciliation: raw per-source records into one view per screen

Each screen is reconciled on its own. Failures on a single record are
logged and skipped; resource exhaustion drops the screen being built and
moves on to the next one.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from xdpi.common.errors import AllocationFailure, QueryFailed
from xdpi.common.settings import settings
from xdpi.common.types import (
    Monitor,
    Output,
    RawCrtc,
    RawOutput,
    RawRandr,
    RawScreen,
    RawTopology,
    Screen,
    ScreenTopology,
    Topology,
)
from xdpi.core.geometry import dpi_and_pitch, representative_dpi
from xdpi.core.records import monitor_build, output_build
from xdpi.core.reference import referenceDpi_resolve

logger = logging.getLogger(__name__)

__all__ = [
    "crtcForOutput_find",
    "outputs_reconcile",
    "monitors_reconcile",
    "screen_build",
    "screenTopology_build",
    "topology_reconcile",
]


def screen_build(raw: RawScreen) -> Screen:
    """
    Build the canonical screen with its reference DPI.

    Raises:
        QueryFailed: If the screen reports negative dimensions
    """
    for value in (raw.width, raw.height, raw.mm_width, raw.mm_height):
        if value < 0:
            raise QueryFailed(f"Screen {raw.index} reports negative dimension {value}")

    info = dpi_and_pitch(raw.width, raw.height, raw.mm_width, raw.mm_height)
    reference_dpi, reference_source = referenceDpi_resolve(representative_dpi(info), raw.font_dpi)
    return Screen(
        index=raw.index,
        width=raw.width,
        height=raw.height,
        mm_width=raw.mm_width,
        mm_height=raw.mm_height,
        info=info,
        reference_dpi=reference_dpi,
        reference_source=reference_source,
    )


def crtcForOutput_find(output: RawOutput, crtcs: Sequence[RawCrtc]) -> Optional[RawCrtc]:
    """
    Find the CRTC an output drives.

    Output-first sources fill in the output's CRTC handle; CRTC-first
    sources list the output on the CRTC. Either link is enough.

    Returns:
        Driving CRTC, None if the output drives none
    """
    if output.crtc:
        for crtc in crtcs:
            if crtc.handle == output.crtc:
                return crtc
    for crtc in crtcs:
        if output.handle in crtc.outputs:
            return crtc
    return None


def outputs_reconcile(
    screen_index: int, randr: RawRandr, failures: list[str], max_bytes: int
) -> list[Output]:
    """
    Canonical outputs of one screen, in the order the source enumerated them.

    Args:
        screen_index: Screen being reconciled, for log messages
        randr: RandR data of the screen
        failures: Accumulator for skipped records
        max_bytes: Name bound

    Returns:
        One Output per output that could be built
    """
    primary_handle: Optional[int] = None
    if randr.version >= settings.RANDR_PRIMARY_VERSION:
        primary_handle = randr.primary_output

    outputs: list[Output] = []
    seen: set[int] = set()
    for raw_output in randr.outputs:
        if raw_output.handle in seen:
            logger.debug(f"Screen {screen_index}: output {raw_output.handle} listed twice")
            continue
        seen.add(raw_output.handle)
        crtc = crtcForOutput_find(raw_output, randr.crtcs)
        try:
            outputs.append(output_build(raw_output, crtc, primary_handle, max_bytes))
        except QueryFailed as e:
            logger.error(f"Screen {screen_index}: skipping output: {e}")
            failures.append(f"screen {screen_index}: {e}")
    return outputs


def monitors_reconcile(
    screen_index: int, randr: RawRandr, failures: list[str], max_bytes: int
) -> Optional[list[Monitor]]:
    """
    Canonical monitors of one screen.

    Returns:
        List of monitors, None when the server predates monitors
    """
    if randr.version < settings.RANDR_MONITOR_VERSION or randr.monitors is None:
        return None

    monitors: list[Monitor] = []
    for raw_monitor in randr.monitors:
        try:
            monitors.append(monitor_build(raw_monitor, max_bytes))
        except QueryFailed as e:
            logger.error(f"Screen {screen_index}: skipping monitor: {e}")
            failures.append(f"screen {screen_index}: {e}")
    return monitors


def screenTopology_build(
    raw: RawScreen, failures: list[str], max_bytes: Optional[int] = None
) -> ScreenTopology:
    """
    Reconcile one screen.

    Raises:
        QueryFailed: If the core screen record itself is unusable
        AllocationFailure: If memory runs out while building records
    """
    bound = max_bytes or settings.name_max_bytes
    try:
        screen = screen_build(raw)
        screen_topology = ScreenTopology(screen=screen)
        if raw.randr is None:
            return screen_topology
        if raw.randr.version < settings.RANDR_MIN_VERSION:
            logger.info(
                f"Screen {raw.index}: RandR {raw.randr.version} too old for per-output data"
            )
            return screen_topology

        screen_topology.randr_version = raw.randr.version
        screen_topology.outputs = outputs_reconcile(raw.index, raw.randr, failures, bound)
        screen_topology.monitors = monitors_reconcile(raw.index, raw.randr, failures, bound)
        return screen_topology
    except MemoryError as e:
        raise AllocationFailure(f"Out of memory building screen {raw.index}") from e


def topology_reconcile(raw: RawTopology, max_bytes: Optional[int] = None) -> Topology:
    """
    Reconcile everything one source reported.

    Xinerama heads are carried over untouched. They are never matched
    against RandR outputs, so the same physical area may appear twice:
    once with DPI data and once without.

    Args:
        raw: Batch handed over by a topology source
        max_bytes: Name bound, defaults to the configured bound

    Returns:
        Topology keyed by screen index
    """
    topology = Topology(backend=raw.backend, xinerama=list(raw.xinerama))
    for raw_screen in raw.screens:
        try:
            topology.screens[raw_screen.index] = screenTopology_build(
                raw_screen, topology.failures, max_bytes
            )
        except (QueryFailed, AllocationFailure) as e:
            logger.error(f"Screen {raw_screen.index}: {e}")
            topology.failures.append(f"screen {raw_screen.index}: {e}")
    logger.info(
        f"{raw.backend}: reconciled {len(topology.screens)} screen(s), "
        f"{len(topology.xinerama)} Xinerama head(s), {len(topology.failures)} failure(s)"
    )
    return topology

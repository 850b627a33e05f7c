"""Scaling recommendations derived from DPI values"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from xdpi.common.settings import settings
from xdpi.common.types import (
    Report,
    ScalingFactor,
    ScreenScaling,
    ScreenTopology,
    Surface,
    SurfaceScaling,
    Topology,
)
from xdpi.core.geometry import nearest_int

logger = logging.getLogger(__name__)

__all__ = [
    "calc_scaling",
    "primaryReference_select",
    "report_calculate",
    "screenScaling_calculate",
    "surfacesScaling_calculate",
]


def calc_scaling(ratio: float) -> ScalingFactor:
    """
    Integer scaling factors around a DPI ratio.

    Args:
        ratio: DPI divided by the baseline DPI

    Returns:
        Floor, nearest and ceiling factors (each at least 1) plus the ratio
    """
    return ScalingFactor(
        min=max(1, math.floor(ratio)),
        actual=ratio,
        round=max(1, nearest_int(ratio)),
        max=max(1, math.ceil(ratio)),
    )


def primaryReference_select(surfaces: Sequence[Surface]) -> Optional[Surface]:
    """
    Choose the surface prorated factors are relative to.

    An explicitly primary surface wins. Otherwise the first usable surface
    in enumeration order stands in for the primary; the server gives no
    guarantee that this is the surface the user considers primary.

    Returns:
        Reference surface, None if no surface has a positive DPI
    """
    candidates = [surface for surface in surfaces if surface.dpi > 0]
    for surface in candidates:
        if surface.primary:
            return surface
    if candidates:
        return candidates[0]
    return None


def surfacesScaling_calculate(
    surfaces: Sequence[Surface], reference_ratio: float, baseline_dpi: float
) -> tuple[SurfaceScaling, ...]:
    """
    Native and prorated factors for every usable surface.

    Prorating rescales a surface's DPI so that the primary surface lands
    exactly on the screen's reference ratio.

    Args:
        surfaces: Outputs or monitors of one screen, in enumeration order
        reference_ratio: Screen reference DPI over the baseline DPI
        baseline_dpi: DPI for a factor of 1

    Returns:
        One entry per usable surface, tagged with its position in
        surfaces; unusable ones are left out
    """
    primary = primaryReference_select(surfaces)
    results = []
    for index, surface in enumerate(surfaces):
        if not surface.isUsable():
            logger.debug(f"No scaling for {surface.name}: no usable DPI")
            continue
        native_ratio = surface.dpi / baseline_dpi
        if primary is None:
            prorated_ratio = native_ratio
        else:
            prorated_ratio = reference_ratio * surface.dpi / primary.dpi
        results.append(
            SurfaceScaling(
                index=index,
                name=surface.name,
                dpi=surface.dpi,
                native=calc_scaling(native_ratio),
                prorated=calc_scaling(prorated_ratio),
            )
        )
    return tuple(results)


def screenScaling_calculate(
    screen_topology: ScreenTopology, baseline_dpi: Optional[float] = None
) -> ScreenScaling:
    """
    Scaling recommendations for one reconciled screen.

    Args:
        screen_topology: Reconciled screen
        baseline_dpi: DPI for a factor of 1, defaults to the configured one

    Returns:
        Reference factor plus per-output and per-monitor factors
    """
    baseline = baseline_dpi or settings.baseline_dpi
    reference_ratio = screen_topology.screen.reference_dpi / baseline
    monitors = screen_topology.monitors or []
    return ScreenScaling(
        reference=calc_scaling(reference_ratio),
        outputs=surfacesScaling_calculate(screen_topology.outputs, reference_ratio, baseline),
        monitors=surfacesScaling_calculate(monitors, reference_ratio, baseline),
    )


def report_calculate(
    topology: Topology,
    environment: Optional[dict[str, str]] = None,
    baseline_dpi: Optional[float] = None,
) -> Report:
    """
    Attach scaling recommendations to a reconciled topology.

    Args:
        topology: Result of topology_reconcile
        environment: Scaling-related environment variables, passed through
        baseline_dpi: DPI for a factor of 1, defaults to the configured one

    Returns:
        Report ready for presentation
    """
    scaling = {
        index: screenScaling_calculate(screen_topology, baseline_dpi)
        for index, screen_topology in topology.screens.items()
    }
    return Report(topology=topology, scaling=scaling, environment=dict(environment or {}))

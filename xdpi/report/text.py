"""Plain-text rendering of a scaling report"""

from __future__ import annotations

from typing import Optional

from xdpi.common.types import (
    ConnectionState,
    DpiInfo,
    Monitor,
    Output,
    Report,
    ScalingFactor,
    ScreenScaling,
    ScreenTopology,
    SurfaceScaling,
)

__all__ = [
    "dpiInfo_format",
    "report_render",
    "scaling_format",
]

NO_DPI = "no DPI information"


def dpiInfo_format(info: DpiInfo) -> str:
    """Format DPI, dots-per-cm and dot pitch of one area"""
    text = f"{info.dpi_x}x{info.dpi_y} dpi, {info.dpcm_x}x{info.dpcm_y} dpcm"
    if info.pitch_mm is not None:
        text += f", {info.pitch_mm:.3f} mm dot pitch"
    return text


def scaling_format(factor: ScalingFactor) -> str:
    """Format a factor as min/actual/round/max"""
    return f"{factor.min}/{factor.actual:.2f}/{factor.round}/{factor.max}"


def _surfaceScaling_line(scaling: Optional[SurfaceScaling]) -> Optional[str]:
    if scaling is None:
        return None
    return (
        f"\t\t\tscaling: native {scaling_format(scaling.native)}, "
        f"prorated {scaling_format(scaling.prorated)}"
    )


def _output_lines(output: Output, scaling: Optional[SurfaceScaling]) -> list[str]:
    label = output.name + (" (primary)" if output.primary else "")
    if output.info is None:
        if output.connection is not ConnectionState.CONNECTED:
            reason = output.connection.name.lower()
        elif output.width is None:
            reason = "off"
        else:
            reason = f"{output.width}x{output.height} pixels"
        return [f"\t\t{label}: {reason}, {NO_DPI}"]

    lines = [
        f"\t\t{label}: {output.width}x{output.height} pixels, "
        f"({'R' if output.rotated else 'U'}) {output.mm_width}x{output.mm_height} mm: "
        f"{dpiInfo_format(output.info)}"
    ]
    scaling_line = _surfaceScaling_line(scaling)
    if scaling_line:
        lines.append(scaling_line)
    return lines


def _monitor_lines(monitor: Monitor, scaling: Optional[SurfaceScaling]) -> list[str]:
    flags = [flag for flag, on in (("primary", monitor.primary), ("automatic", monitor.automatic)) if on]
    label = monitor.name + (f" ({', '.join(flags)})" if flags else "")
    if monitor.info is None:
        return [f"\t\t{label}: {monitor.width}x{monitor.height} pixels, {NO_DPI}"]

    lines = [
        f"\t\t{label}: {monitor.width}x{monitor.height} pixels, "
        f"({'R' if monitor.rotated else 'U'}) {monitor.mm_width}x{monitor.mm_height} mm: "
        f"{dpiInfo_format(monitor.info)}"
    ]
    scaling_line = _surfaceScaling_line(scaling)
    if scaling_line:
        lines.append(scaling_line)
    return lines


def _screen_lines(screen_topology: ScreenTopology, scaling: Optional[ScreenScaling]) -> list[str]:
    screen = screen_topology.screen
    lines = [
        f"Screen {screen.index}: {screen.width}x{screen.height} pixels, "
        f"{screen.mm_width}x{screen.mm_height} mm: {dpiInfo_format(screen.info)}"
    ]
    reference = f"\tReference DPI: {screen.reference_dpi:g} ({screen.reference_source})"
    if scaling is not None:
        reference += f", scaling {scaling_format(scaling.reference)}"
    lines.append(reference)

    if screen_topology.randr_version is None:
        return lines

    output_scaling = {s.index: s for s in scaling.outputs} if scaling else {}
    major, minor = screen_topology.randr_version
    lines.append(f"\tXRandR {major}.{minor}:")
    for index, output in enumerate(screen_topology.outputs):
        lines.extend(_output_lines(output, output_scaling.get(index)))

    if screen_topology.monitors is not None:
        monitor_scaling = {s.index: s for s in scaling.monitors} if scaling else {}
        lines.append("\tMonitors:")
        for index, monitor in enumerate(screen_topology.monitors):
            lines.extend(_monitor_lines(monitor, monitor_scaling.get(index)))
    return lines


def report_render(report: Report) -> list[str]:
    """
    Render a report as text lines.

    Args:
        report: Report from report_calculate

    Returns:
        Lines without trailing newlines
    """
    topology = report.topology
    lines = [f"** {topology.backend} interfaces"]
    for index in sorted(topology.screens):
        lines.extend(_screen_lines(topology.screens[index], report.scaling.get(index)))

    if topology.xinerama:
        lines.append("Xinerama screens:")
        for region in topology.xinerama:
            lines.append(f"\t{region.index}: {region.width}x{region.height} pixels, {NO_DPI}")

    if report.environment:
        lines.append("Environment:")
        for name, value in report.environment.items():
            lines.append(f"\t{name}={value}")

    if topology.failures:
        lines.append("Failures:")
        for failure in topology.failures:
            lines.append(f"\t{failure}")
    return lines

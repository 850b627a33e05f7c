"""Common types and data structures for xdpi

Raw* records are what a topology source hands over, exactly as the server
reported them. The remaining records are the canonical, reconciled view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Rotation(Enum):
    """RandR rotation values (low nibble of the rotation bitmask)"""
    NORMAL = 1
    LEFT = 2       # 90 degrees
    INVERTED = 4   # 180 degrees
    RIGHT = 8      # 270 degrees

    @classmethod
    def fromBits(cls, bits: int) -> "Rotation":
        """
        Decode a RandR rotation bitmask, ignoring reflection bits

        Args:
            bits: Rotation bitmask as reported by the CRTC

        Returns:
            Matching rotation, NORMAL when the nibble is not a single rotation
        """
        try:
            return cls(bits & 0x0F)
        except ValueError:
            return cls.NORMAL

    def isAxisSwapping(self) -> bool:
        """Check if this rotation exchanges the horizontal and vertical axes"""
        return self in (Rotation.LEFT, Rotation.RIGHT)


class ConnectionState(Enum):
    """RandR output connection state"""
    CONNECTED = 0
    DISCONNECTED = 1
    UNKNOWN = 2

    @classmethod
    def fromValue(cls, value: int) -> "ConnectionState":
        """Decode a wire connection value, unknown values map to UNKNOWN"""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Raw records, as delivered by a topology source
# ---------------------------------------------------------------------------

NameData = Union[bytes, str]


@dataclass(frozen=True)
class RawOutput:
    """One RandR output descriptor"""
    handle: int
    name: NameData
    connection: int
    mm_width: int
    mm_height: int
    crtc: int = 0  # 0 = not driving any CRTC


@dataclass(frozen=True)
class RawCrtc:
    """One RandR CRTC descriptor"""
    handle: int
    width: int
    height: int
    rotation: int = Rotation.NORMAL.value
    outputs: tuple[int, ...] = ()


@dataclass(frozen=True)
class RawMonitor:
    """One RandR 1.5 monitor descriptor"""
    name: NameData
    width: int
    height: int
    mm_width: int
    mm_height: int
    primary: bool = False
    automatic: bool = False


@dataclass(frozen=True)
class RawRandr:
    """RandR data for one screen"""
    version: tuple[int, int]
    outputs: tuple[RawOutput, ...] = ()
    crtcs: tuple[RawCrtc, ...] = ()
    primary_output: Optional[int] = None
    monitors: Optional[tuple[RawMonitor, ...]] = None


@dataclass(frozen=True)
class RawScreen:
    """Core protocol screen plus whatever extension data came with it"""
    index: int
    width: int
    height: int
    mm_width: int
    mm_height: int
    font_dpi: Optional[str] = None
    randr: Optional[RawRandr] = None


@dataclass(frozen=True)
class XineramaRegion:
    """Xinerama head: a pixel rectangle with no physical size"""
    index: int
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class RawTopology:
    """Fully materialized batch handed over by one source"""
    backend: str
    screens: tuple[RawScreen, ...] = ()
    xinerama: tuple[XineramaRegion, ...] = ()


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DpiInfo:
    """Derived physical resolution of a pixel area"""
    dpi_x: int
    dpi_y: int
    dpcm_x: int
    dpcm_y: int
    pitch_mm: Optional[float]


@dataclass(frozen=True)
class ScalingFactor:
    """Integer scaling recommendations around a DPI ratio"""
    min: int
    actual: float
    round: int
    max: int


@dataclass
class Screen:
    """One core protocol screen"""
    index: int
    width: int
    height: int
    mm_width: int
    mm_height: int
    info: DpiInfo
    reference_dpi: float
    reference_source: str = "protocol"


@dataclass(frozen=True)
class Output:
    """One RandR output after reconciliation"""
    name: str
    handle: int
    width: Optional[int]
    height: Optional[int]
    mm_width: int
    mm_height: int
    rotated: bool
    connection: ConnectionState
    primary: bool
    dpi: int
    info: Optional[DpiInfo] = None

    def isUsable(self) -> bool:
        """Check if this output carries a valid DPI"""
        return self.dpi >= 0


@dataclass(frozen=True)
class Monitor:
    """One RandR 1.5 monitor after reconciliation"""
    name: str
    width: int
    height: int
    mm_width: int
    mm_height: int
    primary: bool
    automatic: bool
    rotated: bool
    dpi: int
    info: Optional[DpiInfo] = None

    def isUsable(self) -> bool:
        """Check if this monitor carries a valid DPI"""
        return self.dpi >= 0


Surface = Union[Output, Monitor]


@dataclass(frozen=True)
class SurfaceScaling:
    """Native and prorated recommendations for one output or monitor

    Names may be truncated and need not be unique, so the surface is
    identified by its position in the screen's output or monitor list.
    """
    index: int
    name: str
    dpi: int
    native: ScalingFactor
    prorated: ScalingFactor


@dataclass
class ScreenTopology:
    """Everything known about one screen after reconciliation"""
    screen: Screen
    randr_version: Optional[tuple[int, int]] = None
    outputs: list[Output] = field(default_factory=list)
    monitors: Optional[list[Monitor]] = None


@dataclass
class Topology:
    """Result of one reconciliation pass, keyed by screen index"""
    backend: str
    screens: dict[int, ScreenTopology] = field(default_factory=dict)
    xinerama: list[XineramaRegion] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScreenScaling:
    """Scaling recommendations for one screen"""
    reference: ScalingFactor
    outputs: tuple[SurfaceScaling, ...] = ()
    monitors: tuple[SurfaceScaling, ...] = ()


@dataclass
class Report:
    """Topology plus scaling recommendations, ready for presentation"""
    topology: Topology
    scaling: dict[int, ScreenScaling] = field(default_factory=dict)
    environment: dict[str, str] = field(default_factory=dict)

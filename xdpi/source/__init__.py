"""Topology source abstraction layer."""

from xdpi.source.backend import TopologySource
from xdpi.source.factory import SUPPORTED_SOURCES, source_create

__all__ = [
    "SUPPORTED_SOURCES",
    "TopologySource",
    "source_create",
]

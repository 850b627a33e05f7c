"""Unit tests for topology source factory"""

import pytest

from xdpi.source.factory import SUPPORTED_SOURCES, source_create
from xdpi.x11.source import XlibTopologySource
from xdpi.xrandr.source import XrandrTopologySource


class TestSourceCreate:
    """Test source_create"""

    def test_xlib(self):
        """Test the xlib source is created unconnected"""
        source = source_create("xlib", ":1")
        assert isinstance(source, XlibTopologySource)
        with pytest.raises(RuntimeError, match="Not connected"):
            source.display_get()

    def test_xrandr_case_insensitive(self):
        """Test source names ignore case"""
        assert isinstance(source_create("XRandR", None), XrandrTopologySource)

    def test_unknown_raises(self):
        """Test unknown names are rejected"""
        with pytest.raises(ValueError, match="Unsupported source"):
            source_create("wayland", None)

    def test_every_supported_source_is_created(self):
        """Test each advertised name maps to a source with that name"""
        for name in SUPPORTED_SOURCES:
            assert source_create(name, None).name == name

"""Unit tests for canonical Output and Monitor builders"""

import pytest

from xdpi.common.errors import QueryFailed
from xdpi.common.types import ConnectionState, RawCrtc, RawMonitor, RawOutput, Rotation
from xdpi.core.records import monitorRotation_infer, monitor_build, name_bound, output_build


def _output(**overrides) -> RawOutput:
    """Connected 509x286 mm output driving CRTC 10"""
    values = dict(handle=1, name=b"HDMI-1", connection=0, mm_width=509, mm_height=286, crtc=10)
    values.update(overrides)
    return RawOutput(**values)


def _crtc(**overrides) -> RawCrtc:
    """Unrotated 1920x1080 CRTC driving output 1"""
    values = dict(handle=10, width=1920, height=1080, rotation=Rotation.NORMAL.value, outputs=(1,))
    values.update(overrides)
    return RawCrtc(**values)


class TestNameBound:
    """Test name conversion at ingestion"""

    def test_bytes_decoded(self):
        """Test wire bytes become text"""
        assert name_bound(b"eDP-1", 128) == "eDP-1"

    def test_text_passes_through(self):
        """Test already decoded names are accepted"""
        assert name_bound("DP-2", 128) == "DP-2"

    def test_truncated_at_bound(self):
        """Test long names are truncated instead of rejected"""
        assert name_bound(b"A" * 300, 16) == "A" * 16

    def test_truncation_drops_split_character(self):
        """Test a multi-byte character cut by the bound is dropped"""
        assert name_bound("abé".encode("utf-8"), 3) == "ab"

    def test_embedded_nul_is_kept(self):
        """Test names are length-delimited, not NUL-terminated"""
        assert name_bound(b"HDMI\x00-1", 128) == "HDMI\x00-1"


class TestOutputBuild:
    """Test output_build"""

    def test_connected_output(self):
        """Test a connected output driving a CRTC gets a DPI"""
        output = output_build(_output(), _crtc())
        assert output.name == "HDMI-1"
        assert output.width == 1920
        assert output.height == 1080
        assert output.dpi == 96
        assert output.info is not None
        assert output.info.dpi_x == 96
        assert output.rotated is False
        assert output.connection is ConnectionState.CONNECTED

    def test_rotated_output_swaps_physical_size(self):
        """Test a 270 degree rotation swaps mm to match the CRTC pixel axes"""
        raw = _output(mm_width=600, mm_height=340)
        crtc = _crtc(width=1080, height=1920, rotation=Rotation.RIGHT.value)

        output = output_build(raw, crtc)

        assert output.rotated is True
        assert (output.mm_width, output.mm_height) == (340, 600)
        assert output.info.dpi_x == 81
        assert output.info.dpi_y == 81
        assert output.dpi == 81

    def test_rotation_270_full_hd(self):
        """Test 1920x1080 at 509x286 mm rotated 270 degrees stays at 96 DPI"""
        crtc = _crtc(width=1080, height=1920, rotation=Rotation.RIGHT.value)
        output = output_build(_output(), crtc)
        assert (output.mm_width, output.mm_height) == (286, 509)
        assert output.info.dpi_x == 96
        assert output.info.dpi_y == 96

    def test_inverted_output_keeps_axes(self):
        """Test a 180 degree rotation does not swap axes"""
        output = output_build(_output(), _crtc(rotation=Rotation.INVERTED.value))
        assert output.rotated is False
        assert output.mm_width == 509

    @pytest.mark.parametrize("connection", [1, 2])
    def test_not_connected_is_unusable(self, connection):
        """Test disconnected and unknown outputs get the sentinel DPI"""
        output = output_build(_output(connection=connection), _crtc())
        assert output.dpi == -1
        assert output.info is None
        assert output.isUsable() is False

    def test_no_crtc_is_unusable(self):
        """Test an output driving no CRTC has no pixel size and no DPI"""
        output = output_build(_output(crtc=0), None)
        assert output.width is None
        assert output.height is None
        assert output.dpi == -1

    @pytest.mark.parametrize("mm", [(0, 286), (509, 0), (0, 0)])
    def test_zero_physical_size_is_unusable(self, mm):
        """Test outputs without a physical size get the sentinel DPI"""
        output = output_build(_output(mm_width=mm[0], mm_height=mm[1]), _crtc())
        assert output.dpi == -1

    def test_primary_matched_by_handle(self):
        """Test the primary flag follows the reported primary handle"""
        assert output_build(_output(), _crtc(), primary_handle=1).primary is True
        assert output_build(_output(), _crtc(), primary_handle=2).primary is False
        assert output_build(_output(), _crtc(), primary_handle=None).primary is False

    def test_negative_dimension_raises(self):
        """Test a corrupt CRTC size is reported as a failed query"""
        with pytest.raises(QueryFailed):
            output_build(_output(), _crtc(width=-1))

    def test_name_bound_applied(self):
        """Test the name bound passed in is honored"""
        output = output_build(_output(name=b"X" * 40), _crtc(), max_bytes=8)
        assert output.name == "X" * 8


class TestMonitorBuild:
    """Test monitor rotation inference and monitor_build"""

    def test_tall_pixels_tall_mm_not_rotated(self):
        """Test a portrait monitor reporting portrait mm is not rotated"""
        assert monitorRotation_infer(1080, 1920, 286, 509) is False

    def test_wide_pixels_tall_mm_rotated(self):
        """Test disagreeing orientation infers a rotation"""
        assert monitorRotation_infer(1920, 1080, 286, 509) is True

    def test_rotated_monitor_swaps_mm(self):
        """Test inferred rotation swaps mm before the DPI is computed"""
        monitor = monitor_build(RawMonitor(b"HDMI-1", 1920, 1080, 286, 509, primary=True))
        assert monitor.rotated is True
        assert (monitor.mm_width, monitor.mm_height) == (509, 286)
        assert monitor.dpi == 96
        assert monitor.primary is True

    def test_unrotated_monitor(self):
        """Test a consistent monitor keeps its mm"""
        monitor = monitor_build(RawMonitor(b"DP-1", 1080, 1920, 286, 509, automatic=True))
        assert monitor.rotated is False
        assert (monitor.mm_width, monitor.mm_height) == (286, 509)
        assert monitor.dpi == 96
        assert monitor.automatic is True

    def test_sizeless_monitor_is_unusable(self):
        """Test a monitor without physical size has no DPI"""
        monitor = monitor_build(RawMonitor(b"VIRTUAL-1", 1024, 768, 0, 0))
        assert monitor.dpi == -1
        assert monitor.info is None

    def test_negative_dimension_raises(self):
        """Test a corrupt monitor record is reported as a failed query"""
        with pytest.raises(QueryFailed):
            monitor_build(RawMonitor(b"DP-1", -1, 1080, 509, 286))

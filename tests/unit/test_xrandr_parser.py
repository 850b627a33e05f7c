"""Unit tests for xdpyinfo, xrandr and xrdb output parsing"""

from xdpi.common.types import ConnectionState, Rotation
from xdpi.xrandr.parser import (
    listmonitors_parse,
    query_parse,
    randrVersion_parse,
    screenDisplay_name,
    xdpyinfoScreens_parse,
    xdpyinfoXinerama_parse,
    xrdbFontDpi_parse,
)

XDPYINFO = """\
name of display:    :0
version number:    11.0
number of screens:    2

XINERAMA version 1.1 opcode: 150
  head #0: 1920x1080 @ 0,0
  head #1: 1080x1920 @ 1920,0

screen #0:
  dimensions:    3000x1920 pixels (794x508 millimeters)
  resolution:    96x96 dots per inch
  depths (7):    24, 1, 4, 8, 15, 16, 32

screen #1:
  dimensions:    1024x768 pixels (0x0 millimeters)
  resolution:    0x0 dots per inch
"""

XRANDR_QUERY = """\
Screen 0: minimum 320 x 200, current 3000 x 1920, maximum 16384 x 16384
HDMI-1 connected primary 1920x1080+0+0 (normal left inverted right x axis y axis) 509mm x 286mm
   1920x1080     60.00*+  50.00    59.94
   1280x720      60.00    50.00
DP-1 connected 1080x1920+1920+0 left (normal left inverted right x axis y axis) 340mm x 600mm
   1920x1080     60.00*+
DP-2 disconnected (normal left inverted right x axis y axis)
HDMI-2 connected (normal left inverted right x axis y axis)
   1920x1080     60.00 +
VIRTUAL1 unknown connection (normal left inverted right x axis y axis)
"""

LISTMONITORS = """\
Monitors: 2
 0: +*HDMI-1 1920/509x1080/286+0+0  HDMI-1
 1: +DP-1 1080/600x1920/340+1920+0  DP-1
 2: split 960/254x1080/286+0+0  none
"""


class TestXdpyinfo:
    """Test xdpyinfo parsing"""

    def test_screens(self):
        """Test screen sizes are read per screen"""
        screens = xdpyinfoScreens_parse(XDPYINFO)
        assert [(s.index, s.width, s.height, s.mm_width, s.mm_height) for s in screens] == [
            (0, 3000, 1920, 794, 508),
            (1, 1024, 768, 0, 0),
        ]

    def test_xinerama_heads(self):
        """Test Xinerama heads are read with position and size"""
        heads = xdpyinfoXinerama_parse(XDPYINFO)
        assert [(h.index, h.x, h.y, h.width, h.height) for h in heads] == [
            (0, 0, 0, 1920, 1080),
            (1, 1920, 0, 1080, 1920),
        ]

    def test_no_xinerama(self):
        """Test output without Xinerama heads yields none"""
        assert xdpyinfoXinerama_parse("screen #0:\n") == []


class TestRandrVersion:
    """Test xrandr --version parsing"""

    def test_version(self):
        """Test the server version is read, not the client version"""
        text = "xrandr program version       1.5.1\nServer reports RandR version 1.6\n"
        assert randrVersion_parse(text) == (1, 6)

    def test_missing(self):
        """Test a missing server line yields None"""
        assert randrVersion_parse("xrandr program version 1.5.1\n") is None


class TestQueryParse:
    """Test xrandr --query parsing"""

    def test_outputs(self):
        """Test every output line becomes one output, in order"""
        result = query_parse(XRANDR_QUERY)
        names = [o.name for o in result.outputs]
        assert names == [b"HDMI-1", b"DP-1", b"DP-2", b"HDMI-2", b"VIRTUAL1"]

    def test_connection_states(self):
        """Test connection words map to wire values"""
        states = [ConnectionState(o.connection) for o in query_parse(XRANDR_QUERY).outputs]
        assert states == [
            ConnectionState.CONNECTED,
            ConnectionState.CONNECTED,
            ConnectionState.DISCONNECTED,
            ConnectionState.CONNECTED,
            ConnectionState.UNKNOWN,
        ]

    def test_primary(self):
        """Test the primary output handle is reported"""
        result = query_parse(XRANDR_QUERY)
        assert result.primary_output == result.outputs[0].handle

    def test_active_outputs_get_crtcs(self):
        """Test only outputs with a geometry drive a CRTC"""
        result = query_parse(XRANDR_QUERY)
        assert len(result.crtcs) == 2
        hdmi, dp = result.crtcs
        assert (hdmi.width, hdmi.height) == (1920, 1080)
        assert hdmi.outputs == (result.outputs[0].handle,)
        assert result.outputs[0].crtc == hdmi.handle
        assert result.outputs[3].crtc == 0

    def test_rotated_output_unswaps_mm(self):
        """Test the printed mm of a rotated output are swapped back"""
        result = query_parse(XRANDR_QUERY)
        dp = result.outputs[1]
        assert (dp.mm_width, dp.mm_height) == (600, 340)
        assert Rotation.fromBits(result.crtcs[1].rotation) is Rotation.LEFT
        assert (result.crtcs[1].width, result.crtcs[1].height) == (1080, 1920)

    def test_inactive_output_has_no_mm(self):
        """Test outputs without a mode report no physical size"""
        hdmi2 = query_parse(XRANDR_QUERY).outputs[3]
        assert (hdmi2.mm_width, hdmi2.mm_height) == (0, 0)

    def test_reflected_output(self):
        """Test reflection words between rotation and modes are tolerated"""
        text = "eDP-1 connected 1920x1080+0+0 inverted X axis (normal left) 344mm x 193mm\n"
        output = query_parse(text).outputs[0]
        assert (output.mm_width, output.mm_height) == (344, 193)


class TestListmonitorsParse:
    """Test xrandr --listmonitors parsing"""

    def test_monitors(self):
        """Test monitor size, mm and flags"""
        monitors = listmonitors_parse(LISTMONITORS)
        assert [m.name for m in monitors] == [b"HDMI-1", b"DP-1", b"split"]
        hdmi, dp, split = monitors
        assert (hdmi.width, hdmi.mm_width, hdmi.height, hdmi.mm_height) == (1920, 509, 1080, 286)
        assert hdmi.primary is True and hdmi.automatic is True
        assert dp.primary is False and dp.automatic is True
        assert split.primary is False and split.automatic is False


class TestXrdbParse:
    """Test xrdb -query parsing"""

    def test_font_dpi(self):
        """Test the Xft.dpi value is returned as text"""
        text = "Xcursor.size:\t24\nXft.dpi:\t144\nXft.antialias:\t1\n"
        assert xrdbFontDpi_parse(text) == "144"

    def test_unset(self):
        """Test a database without Xft.dpi yields None"""
        assert xrdbFontDpi_parse("Xcursor.size:\t24\n") is None

    def test_wildcard(self):
        """Test loose bindings match Xft.dpi"""
        assert xrdbFontDpi_parse("*dpi:\t120\n") == "120"
        assert xrdbFontDpi_parse("Xft*dpi:\t110\n") == "110"

    def test_tight_binding_beats_wildcard(self):
        """Test the more specific entry wins"""
        assert xrdbFontDpi_parse("*dpi:\t120\nXft.dpi:\t144\n") == "144"

    def test_screen_overrides_global(self):
        """Test per-screen resources replace display-wide ones"""
        assert xrdbFontDpi_parse("Xft.dpi:\t96\n", "Xft.dpi:\t192\n") == "192"


class TestScreenDisplayName:
    """Test display names addressing one screen"""

    def test_appends_screen(self):
        """Test the screen number is added"""
        assert screenDisplay_name(":0", 1) == ":0.1"
        assert screenDisplay_name("host:10", 0) == "host:10.0"

    def test_replaces_screen(self):
        """Test an existing screen number is replaced"""
        assert screenDisplay_name(":0.1", 0) == ":0.0"

    def test_unusable(self):
        """Test unset or malformed names give None"""
        assert screenDisplay_name(None, 0) is None
        assert screenDisplay_name("nonsense", 0) is None

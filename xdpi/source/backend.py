"""Topology source protocol shared by all query backends."""

from __future__ import annotations

from typing import Protocol

from xdpi.common.types import RawTopology


class TopologySource(Protocol):
    """Abstract display topology source."""

    name: str

    def connection_establish(self) -> None:
        """
        Establish connection to the display server.

        Raises:
            ConnectionUnavailable: If the server cannot be reached.
        """

    def connection_close(self) -> None:
        """Close connection to the display server."""

    def topology_fetch(self) -> RawTopology:
        """
        Query every screen and extension the server offers.

        Per-record failures are logged and skipped; missing extensions
        leave the matching fields empty.

        Returns:
            Fully materialized raw topology.
        """

    def __enter__(self) -> "TopologySource":
        """Context manager entry."""

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""

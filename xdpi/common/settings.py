"""Application settings singleton - single source of truth for configuration

This module provides a singleton Settings class that consolidates:
1. Unit conversion constants
2. RandR version gates for optional features
3. Runtime configuration from config.yml

Usage:
    from xdpi.common.settings import settings

    # Initialize once at startup with loaded config
    config = ConfigLoader.config_load()
    settings.initialize(config)

    # Use anywhere in the application
    ratio = dpi / settings.BASELINE_DPI
"""

from typing import Optional

from xdpi.common.config import Config


class Settings:
    """Singleton settings manager combining config.yml and fixed constants

    The singleton pattern ensures all parts of the application use the same
    configuration values and constants.
    """

    _instance: Optional["Settings"] = None

    def __new__(cls) -> "Settings":
        """Ensure only one Settings instance exists"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize settings singleton (only runs once)"""
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._config: Optional[Config] = None

    def initialize(self, config: Config) -> None:
        """
        Initialize with loaded configuration

        Args:
            config: Loaded configuration
        """
        self._config = config

    # =========================================================================
    # Unit Constants
    # =========================================================================

    MM_PER_INCH: float = 25.4
    """Millimeters per inch, for DPI"""

    MM_PER_CM: float = 10.0
    """Millimeters per centimeter, for dots-per-cm"""

    BASELINE_DPI: float = 96.0
    """DPI that corresponds to a scaling factor of exactly 1

    Toolkits treat 96 DPI as unscaled. Every ratio handed to the scaling
    calculator is relative to this value.
    """

    UNUSABLE_DPI: int = -1
    """Sentinel DPI for outputs that are off, disconnected or sizeless"""

    NAME_MAX_BYTES: int = 128
    """Default bound for output and monitor names, in bytes"""

    # =========================================================================
    # RandR Version Gates
    # =========================================================================

    RANDR_MIN_VERSION: tuple[int, int] = (1, 2)
    """Oldest RandR with per-output and per-CRTC queries"""

    RANDR_PRIMARY_VERSION: tuple[int, int] = (1, 3)
    """First RandR that reports a primary output"""

    RANDR_MONITOR_VERSION: tuple[int, int] = (1, 5)
    """First RandR with the monitor abstraction"""

    # =========================================================================
    # Runtime Configuration Access
    # =========================================================================

    @property
    def config(self) -> Config:
        """Get loaded configuration object"""
        if self._config is None:
            raise RuntimeError("Settings not initialized. Call settings.initialize(config) first.")
        return self._config

    @property
    def baseline_dpi(self) -> float:
        """Configured baseline DPI, falling back to BASELINE_DPI"""
        if self._config is None:
            return self.BASELINE_DPI
        return self._config.scaling.baseline_dpi

    @property
    def name_max_bytes(self) -> int:
        """Configured name bound, falling back to NAME_MAX_BYTES"""
        if self._config is None:
            return self.NAME_MAX_BYTES
        return self._config.names.max_bytes


# Global singleton instance
settings = Settings()
"""Global settings singleton instance

Import this anywhere in the application:
    from xdpi.common.settings import settings
"""

"""Configuration file loading and management"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_BACKENDS: List[str] = ["xlib", "xrandr"]

DEFAULT_ENVIRONMENT_VARIABLES: List[str] = [
    "GDK_SCALE",
    "GDK_DPI_SCALE",
    "QT_AUTO_SCREEN_SCALE_FACTOR",
    "QT_ENABLE_HIGHDPI_SCALING",
    "QT_SCALE_FACTOR",
    "QT_SCREEN_SCALE_FACTORS",
    "QT_FONT_DPI",
    "QT_DEVICE_PIXEL_RATIO",
    "ELM_SCALE",
    "CLUTTER_SCALE",
    "XCURSOR_SIZE",
    "WINIT_X11_SCALE_FACTOR",
]

DEFAULT_LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ScalingConfig:
    """Scaling calculation settings"""
    baseline_dpi: float = 96.0


@dataclass
class NamesConfig:
    """Output and monitor name handling"""
    max_bytes: int = 128


@dataclass
class EnvironmentConfig:
    """Environment variables reported alongside the topology"""
    variables: List[str] = field(default_factory=lambda: list(DEFAULT_ENVIRONMENT_VARIABLES))


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class Config:
    """Complete application configuration"""
    display: Optional[str] = None
    backends: List[str] = field(default_factory=lambda: list(DEFAULT_BACKENDS))
    scaling: ScalingConfig = field(default_factory=ScalingConfig)
    names: NamesConfig = field(default_factory=NamesConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "config.yml",
        "~/.config/xdpi/config.yml",
        "/etc/xdpi/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
            ValueError: If the document is not a mapping
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Every section is optional; missing keys keep their defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object

        Raises:
            ValueError: If a value has the wrong shape
        """
        backends = data.get("backends", DEFAULT_BACKENDS)
        if isinstance(backends, str):
            backends = [backends]
        if not isinstance(backends, list) or not backends:
            raise ValueError("backends must be a non-empty list")

        scaling_data = data.get("scaling") or {}
        baseline_dpi = float(scaling_data.get("baseline_dpi", 96.0))
        if baseline_dpi <= 0:
            raise ValueError(f"scaling.baseline_dpi must be positive, got {baseline_dpi}")
        scaling = ScalingConfig(baseline_dpi=baseline_dpi)

        names_data = data.get("names") or {}
        max_bytes = int(names_data.get("max_bytes", 128))
        if max_bytes < 1:
            raise ValueError(f"names.max_bytes must be at least 1, got {max_bytes}")
        names = NamesConfig(max_bytes=max_bytes)

        environment_data = data.get("environment") or {}
        environment = EnvironmentConfig(
            variables=list(environment_data.get("variables", DEFAULT_ENVIRONMENT_VARIABLES)),
        )

        logging_data = data.get("logging") or {}
        logging = LoggingConfig(
            level=logging_data.get("level", "WARNING"),
            file=logging_data.get("file"),
            format=logging_data.get("format", DEFAULT_LOG_FORMAT),
        )

        return Config(
            display=data.get("display"),
            backends=[str(name).lower() for name in backends],
            scaling=scaling,
            names=names,
            environment=environment,
            logging=logging,
        )

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, searches standard
                locations and falls back to built-in defaults.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicit config file does not exist
            ValueError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return Config()

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configWithOverrides_load(
        file_path: Optional[Path] = None,
        **overrides: Any
    ) -> Config:
        """
        Load configuration and apply command-line overrides

        Args:
            file_path: Optional path to config file
            **overrides: Key-value pairs to override config values

        Returns:
            Config object with overrides applied

        Example:
            config = ConfigLoader.configWithOverrides_load(
                display=":1",
                backends=["xrandr"],
            )
        """
        config = ConfigLoader.config_load(file_path)

        if overrides.get("display") is not None:
            config.display = overrides["display"]
        if overrides.get("backends"):
            config.backends = [name.lower() for name in overrides["backends"]]

        return config

"""
Configuration System

Manages generator configuration from multiple sources:
1. Default values
2. Settings file (.projgen.yaml)
3. Environment variables (highest priority)
"""

from typing import Any, Dict, Optional
from pathlib import Path
import logging
import os
import yaml
from dataclasses import dataclass, field, asdict

from .environment import parse_bool, parse_bool_env
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = ".projgen.yaml"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL", "FATAL"]
VALID_OUTPUT_FORMATS = ["text", "json", "yaml"]


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    file: Optional[str] = None


@dataclass
class ModeConfig:
    """Mode resolution configuration"""
    strict: bool = False  # reject unrecognised --mode values
    default_output_format: str = "text"


@dataclass
class GeneratorConfig:
    """Complete generator configuration"""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    mode: ModeConfig = field(default_factory=ModeConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Create configuration from dictionary"""
        config = cls()

        try:
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])
            if "mode" in data:
                config.mode = ModeConfig(**data["mode"])
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

        config.mode.strict = _coerce_bool("mode.strict", config.mode.strict)
        return config


def _coerce_bool(key: str, value: Any) -> bool:
    """Accept YAML booleans and the same words as GENERATOR_* boolean variables."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and (parsed := parse_bool(value)) is not None:
        return parsed
    raise ConfigurationError(f"{key} must be a boolean, got {value!r}")


class ConfigManager:
    """
    Configuration manager with multiple source support

    Load priority (highest to lowest):
    1. Environment variables
    2. Settings file
    3. Defaults
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_file: Optional path to settings file
        """
        self.config_file = Path(config_file) if config_file else Path(DEFAULT_SETTINGS_FILE)
        self._config = self._load_config()

    def _load_config(self) -> GeneratorConfig:
        """
        Load configuration from all sources

        Raises:
            ConfigurationError: If the settings file cannot be parsed or
                the merged configuration fails validation
        """
        config = GeneratorConfig()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    file_data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load settings file {self.config_file}: {e}") from e

            if file_data:
                if not isinstance(file_data, dict):
                    raise ConfigurationError(f"Settings file {self.config_file} must contain a mapping")
                config = GeneratorConfig.from_dict(file_data)
                logger.debug("Loaded settings from %s", self.config_file)

        config = self._apply_env_overrides(config)

        errors = _collect_errors(config)
        if errors:
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))
        return config

    def _apply_env_overrides(self, config: GeneratorConfig) -> GeneratorConfig:
        """
        Apply environment variable overrides

        Environment variables format: GENERATOR_<KEY>
        Example: GENERATOR_LOG_LEVEL=DEBUG
        """
        if log_level := os.getenv("GENERATOR_LOG_LEVEL"):
            config.logging.level = log_level
        if log_file := os.getenv("GENERATOR_LOG_FILE"):
            config.logging.file = log_file

        config.mode.strict = parse_bool_env("GENERATOR_STRICT_MODE", config.mode.strict)
        if output_format := os.getenv("GENERATOR_OUTPUT_FORMAT"):
            config.mode.default_output_format = output_format

        return config

    def get(self, section: Optional[str] = None) -> Any:
        """
        Get configuration section or entire config

        Args:
            section: Optional section name (logging, mode)
        """
        if section is None:
            return self._config

        return getattr(self._config, section, None)

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration

        Returns:
            Tuple of (is_valid, errors)
        """
        errors = _collect_errors(self._config)
        return len(errors) == 0, errors

    def reload(self) -> None:
        """Reload configuration from file"""
        self._config = self._load_config()


def _collect_errors(config: GeneratorConfig) -> list[str]:
    errors = []

    level = config.logging.level
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Logging level must be one of: {', '.join(VALID_LOG_LEVELS)} "
            f"(logging.level or GENERATOR_LOG_LEVEL, got {level!r})"
        )

    if config.logging.file is not None and not isinstance(config.logging.file, str):
        errors.append(f"Logging file must be a path, got {config.logging.file!r}")

    if not isinstance(config.mode.strict, bool):
        errors.append(f"Strict mode must be a boolean, got {config.mode.strict!r}")

    output_format = config.mode.default_output_format
    if not isinstance(output_format, str) or output_format.lower() not in VALID_OUTPUT_FORMATS:
        errors.append(
            f"Default output format must be one of: {', '.join(VALID_OUTPUT_FORMATS)} "
            f"(mode.default_output_format or GENERATOR_OUTPUT_FORMAT, got {output_format!r})"
        )

    return errors

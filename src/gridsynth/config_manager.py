"""
Configuration Management System for gridsynth
Provides centralized configuration loading, validation, and management.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .error_handler import global_error_handler, with_error_handling
from .exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
SUPPORTED_EXECUTION_MODES = {"interpreter", "compiler"}


@dataclass
class GridConfig:
    """Configuration for pattern grids."""

    blank_glyph: str = " "
    max_height: int = 500
    max_width: int = 500

    def validate(self) -> None:
        """Validate grid configuration."""
        if len(self.blank_glyph) != 1:
            raise ValidationError(
                "Blank glyph must be a single character", "INVALID_BLANK_GLYPH"
            )

        if self.max_height <= 0 or self.max_width <= 0:
            raise ValidationError(
                "Maximum grid dimensions must be positive",
                "INVALID_MAX_DIMENSIONS",
            )


@dataclass
class SynthesisConfig:
    """Tuning knobs for the code generator."""

    grouping_threshold: int = 20
    wrap_threshold: int = 5
    indent: str = "    "

    def validate(self) -> None:
        """Validate synthesis configuration."""
        if self.grouping_threshold < 0:
            raise ValidationError(
                "Grouping threshold cannot be negative",
                "INVALID_GROUPING_THRESHOLD",
            )

        if self.wrap_threshold < 1:
            raise ValidationError(
                "Wrap threshold must be positive", "INVALID_WRAP_THRESHOLD"
            )

        if self.indent.strip():
            raise ValidationError(
                "Indent must only contain whitespace", "INVALID_INDENT"
            )


@dataclass
class VerifierConfig:
    """Configuration for output verification reports."""

    max_reported_differences: int = 10

    def validate(self) -> None:
        if self.max_reported_differences <= 0:
            raise ValidationError(
                "Max reported differences must be positive",
                "INVALID_MAX_REPORTED",
            )


@dataclass
class ExecutionConfig:
    """Configuration for running generated programs."""

    mode: str = "interpreter"
    compiler: str = "g++"
    compiler_flags: List[str] = field(default_factory=lambda: ["-O0"])
    timeout: int = 30

    def validate(self) -> None:
        """Validate execution configuration."""
        if self.mode not in SUPPORTED_EXECUTION_MODES:
            raise ValidationError(
                f"Unsupported execution mode: {self.mode}",
                "UNSUPPORTED_EXECUTION_MODE",
            )

        if not self.compiler:
            raise ValidationError(
                "Compiler cannot be empty", "EMPTY_COMPILER"
            )

        if self.timeout <= 0:
            raise ValidationError(
                "Timeout must be positive", "INVALID_TIMEOUT"
            )


@dataclass
class SystemConfig:
    """Configuration for system settings."""

    debug: bool = False
    log_level: str = "WARNING"

    def validate(self) -> None:
        """Validate system configuration."""
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValidationError(
                f"Invalid log level: {self.log_level}", "INVALID_LOG_LEVEL"
            )


@dataclass
class GridSynthConfig:
    """Main configuration class for gridsynth."""

    grid: GridConfig = field(default_factory=GridConfig)
    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)
    verifier: VerifierConfig = field(default_factory=VerifierConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    system: SystemConfig = field(default_factory=SystemConfig)

    def validate(self) -> None:
        """Validate all configuration sections."""
        self.grid.validate()
        self.synthesis.validate()
        self.verifier.validate()
        self.execution.validate()
        self.system.validate()


class ConfigManager:
    """Configuration manager for gridsynth."""

    def __init__(self, config_dir: str = "config"):
        if config_dir and os.path.isfile(config_dir):
            # If config_dir is actually a file path, extract directory
            config_file = Path(config_dir)
            self.config_dir = config_file.parent
            self._explicit_config_file: Optional[Path] = config_file
        else:
            self.config_dir = Path(config_dir)
            self._explicit_config_file = None

        self.config: Optional[GridSynthConfig] = None
        self._config_file_paths = [
            self.config_dir / "config.json",
            self.config_dir / "config.yaml",
            self.config_dir / "config.yml",
            Path("gridsynth.json"),
            Path("gridsynth.yaml"),
            Path("gridsynth.yml"),
        ]
        # Load .env early if present (non-fatal if missing)
        try:
            from dotenv import load_dotenv  # type: ignore

            env_path = self.config_dir / ".env"
            if env_path.exists():
                load_dotenv(dotenv_path=str(env_path))
            elif os.path.exists(".env"):
                load_dotenv(dotenv_path=".env")
        except ImportError:
            # dotenv is optional
            pass

    @with_error_handling(global_error_handler, reraise=True)
    def load_config(self, config_path: Optional[str] = None) -> GridSynthConfig:
        """Load configuration from file or use defaults."""
        if config_path:
            config_file: Optional[Path] = Path(config_path)
            if not config_file.exists():
                raise ConfigurationError(
                    f"Configuration file not found: {config_path}",
                    "CONFIG_NOT_FOUND",
                )
        elif self._explicit_config_file:
            config_file = self._explicit_config_file
        else:
            config_file = self._find_config_file()

        if config_file:
            config_data = self._load_config_file(config_file)
            self.config = self._create_config_from_dict(config_data)
            logger.debug(f"Configuration read from {config_file}")
        else:
            logger.info("No configuration file found, using defaults")
            self.config = GridSynthConfig()

        # Load environment variables
        self._load_env_overrides()

        # Validate configuration
        try:
            self.config.validate()
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {str(e)}",
                "CONFIG_VALIDATION_FAILED",
            )

        logger.info("Configuration loaded successfully")
        return self.config

    def _find_config_file(self) -> Optional[Path]:
        """Find the first available configuration file."""
        for config_path in self._config_file_paths:
            if config_path.exists():
                return config_path
        return None

    def _load_config_file(self, config_file: Path) -> Dict[str, Any]:
        """Load configuration from JSON or YAML file."""
        suffix = config_file.suffix.lower()
        if suffix not in [".json", ".yaml", ".yml"]:
            raise ConfigurationError(
                f"Unsupported config file format: {config_file.suffix}",
                "UNSUPPORTED_FORMAT",
            )
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    return json.load(f)
                return yaml.safe_load(f) or {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {str(e)}", "INVALID_JSON"
            )
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in config file: {str(e)}", "INVALID_YAML"
            )
        except OSError as e:
            raise ConfigurationError(
                f"Error reading config file: {str(e)}", "FILE_READ_ERROR"
            )

    def _create_config_from_dict(
        self, config_data: Dict[str, Any]
    ) -> GridSynthConfig:
        """Create GridSynthConfig from dictionary."""
        if not isinstance(config_data, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping", "INVALID_STRUCTURE"
            )
        try:
            return GridSynthConfig(
                grid=GridConfig(**config_data.get("grid", {})),
                synthesis=SynthesisConfig(**config_data.get("synthesis", {})),
                verifier=VerifierConfig(**config_data.get("verifier", {})),
                execution=ExecutionConfig(**config_data.get("execution", {})),
                system=SystemConfig(**config_data.get("system", {})),
            )
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid configuration structure: {str(e)}",
                "INVALID_STRUCTURE",
            )

    def _load_env_overrides(self):
        """Load environment variable overrides."""
        if not self.config:
            return

        env_mappings = {
            "GRIDSYNTH_BLANK_GLYPH": ("grid", "blank_glyph"),
            "GRIDSYNTH_MAX_HEIGHT": ("grid", "max_height"),
            "GRIDSYNTH_MAX_WIDTH": ("grid", "max_width"),
            "GRIDSYNTH_GROUPING_THRESHOLD": ("synthesis", "grouping_threshold"),
            "GRIDSYNTH_WRAP_THRESHOLD": ("synthesis", "wrap_threshold"),
            "GRIDSYNTH_MAX_REPORTED": ("verifier", "max_reported_differences"),
            "GRIDSYNTH_EXECUTION_MODE": ("execution", "mode"),
            "GRIDSYNTH_COMPILER": ("execution", "compiler"),
            "GRIDSYNTH_COMPILER_TIMEOUT": ("execution", "timeout"),
            "GRIDSYNTH_DEBUG": ("system", "debug"),
            "GRIDSYNTH_LOG_LEVEL": ("system", "log_level"),
        }

        for env_var, (section, key) in env_mappings.items():
            value: Any = os.getenv(env_var)
            if value is None:
                continue
            section_obj = getattr(self.config, section)

            # Type conversion
            if key == "debug":
                value = value.lower() in ["true", "1", "yes", "on"]
            elif key in [
                "max_height",
                "max_width",
                "grouping_threshold",
                "wrap_threshold",
                "max_reported_differences",
                "timeout",
            ]:
                try:
                    value = int(value)
                except ValueError:
                    logger.warning("Invalid integer for %s: %s", env_var, value)
                    continue
            elif key == "log_level":
                value = value.upper()

            setattr(section_obj, key, value)
            logger.debug(f"Environment override: {env_var} = {value}")

    def save_config(self, config_path: Optional[str] = None) -> None:
        """Save current configuration to file."""
        if not self.config:
            raise ConfigurationError("No configuration to save", "NO_CONFIG")

        if not config_path:
            config_path = str(self.config_dir / "config.json")

        config_file = Path(config_path)
        suffix = config_file.suffix.lower()
        if suffix not in [".json", ".yaml", ".yml"]:
            raise ConfigurationError(
                f"Unsupported save format: {config_file.suffix}",
                "UNSUPPORTED_SAVE_FORMAT",
            )
        config_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(config_file, "w", encoding="utf-8") as f:
                if suffix == ".json":
                    json.dump(asdict(self.config), f, indent=2, ensure_ascii=False)
                else:
                    yaml.safe_dump(
                        asdict(self.config), f, default_flow_style=False
                    )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save configuration: {str(e)}", "CONFIG_SAVE_FAILED"
            )

        logger.info(f"Configuration saved to {config_file}")

    def get_config(self) -> GridSynthConfig:
        """Get current configuration, loading defaults on first use."""
        if self.config is None:
            return self.load_config()
        return self.config

    def update_config(self, section: str, key: str, value: Any) -> None:
        """Update a specific configuration value."""
        if not self.config:
            raise ConfigurationError("No configuration loaded", "NO_CONFIG")

        if not hasattr(self.config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}", "UNKNOWN_SECTION"
            )

        section_obj = getattr(self.config, section)
        if not hasattr(section_obj, key):
            raise ConfigurationError(
                f"Unknown configuration key: {key}", "UNKNOWN_KEY"
            )

        previous = getattr(section_obj, key)
        setattr(section_obj, key, value)

        # Re-validate configuration
        try:
            self.config.validate()
        except ValidationError as e:
            setattr(section_obj, key, previous)
            raise ConfigurationError(
                f"Configuration update validation failed: {str(e)}",
                "UPDATE_VALIDATION_FAILED",
            )

        logger.info(f"Configuration updated: {section}.{key} = {value}")


# Lazy-loaded global configuration manager instance
_config_manager_instance: Optional[ConfigManager] = None


def get_config_manager(config_dir: str = "config") -> ConfigManager:
    """Get the global configuration manager instance (lazy-loaded)."""
    global _config_manager_instance
    if _config_manager_instance is None:
        _config_manager_instance = ConfigManager(config_dir)
    return _config_manager_instance

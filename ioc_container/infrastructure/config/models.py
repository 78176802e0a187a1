"""
Configuration models and data structures.

This module defines the configuration models used to bootstrap a container,
providing type safety and validation for configuration values.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_directory: str = "logs"
    max_file_size: str = "10 MB"
    backup_count: int = 5
    console_enabled: bool = True
    file_enabled: bool = False


@dataclass
class ContainerConfig:
    """Container bootstrap configuration."""
    cache_fakes: bool = False
    autoload: Dict[str, str] = field(default_factory=dict)
    aliases: Dict[str, str] = field(default_factory=dict)
    providers: List[str] = field(default_factory=list)


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    name: str = "ioc-container"
    version: str = "0.1.0"
    debug: bool = False

    container: ContainerConfig = field(default_factory=ContainerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_file_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate_logging()
        self._validate_container()

    def _validate_logging(self) -> None:
        self.logging.level = self.logging.level.upper()
        if self.logging.level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.logging.level}")
        if self.logging.backup_count < 0:
            raise ValueError(
                f"Log backup count must not be negative, got {self.logging.backup_count}")

    def _validate_container(self) -> None:
        for prefix, directory in self.container.autoload.items():
            if not prefix or not directory:
                raise ValueError(
                    f"Autoload entries need a prefix and a directory, got {prefix!r}: {directory!r}")
        for name, target in self.container.aliases.items():
            if not name or not target:
                raise ValueError(
                    f"Alias entries need a name and a target, got {name!r}: {target!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = asdict(self)
        data.pop("config_file_path", None)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicationConfig":
        """Create configuration from dictionary."""
        container = _section(ContainerConfig, "container", data.get("container"))
        logging_config = _section(LoggingConfig, "logging", data.get("logging"))

        # Unknown top-level keys are ignored
        return cls(
            name=data.get("name", "ioc-container"),
            version=data.get("version", "0.1.0"),
            debug=data.get("debug", False),
            container=container,
            logging=logging_config,
            config_file_path=data.get("config_file_path"),
        )


def _section(section_cls: Any, name: str, values: Optional[Dict[str, Any]]) -> Any:
    values = values or {}
    if not isinstance(values, dict):
        raise ValueError(f"'{name}' section must be a mapping, got {type(values).__name__}")
    known = {f.name for f in fields(section_cls)}
    unknown = sorted(str(key) for key in set(values) - known)
    if unknown:
        raise ValueError(f"Unknown keys in '{name}' section: {', '.join(unknown)}")
    return section_cls(**values)

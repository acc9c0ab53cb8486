"""Configuration management for meshops using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

import tomli
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from meshops.core.exceptions import ConfigurationError


class ImportConfig(BaseModel):
    """Configuration for scene import and flattening."""

    model_config = ConfigDict(frozen=True)

    max_scene_nodes: int = Field(
        100_000, ge=1, description="Maximum scene nodes visited during flattening"
    )
    join_identical_vertices: bool = Field(
        True,
        description="Exactly weld vertices inside each imported primitive mesh",
    )


class RetrievalConfig(BaseModel):
    """Configuration for resource retrieval."""

    model_config = ConfigDict(frozen=True)

    max_size_mb: float = Field(
        1000.0, gt=0, description="Maximum resource size to retrieve (MB)"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Logging level"
    )
    format: Literal["json", "console", "plain"] = Field(
        "console", description="Log format"
    )
    colorize: bool = Field(True, description="Colorize console output")
    log_dir: Optional[Path] = Field(None, description="Directory for log files")
    log_to_file: bool = Field(False, description="Enable file logging")


class Config(BaseModel):
    """Main configuration for meshops."""

    model_config = ConfigDict(frozen=True)

    importing: ImportConfig = Field(
        default_factory=ImportConfig, description="Import configuration"
    )
    retrieval: RetrievalConfig = Field(
        default_factory=RetrievalConfig, description="Retrieval configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> "Config":
        """Load configuration from TOML file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the TOML is malformed or holds invalid values
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
            return cls(**data)
        except (tomli.TOMLDecodeError, ValidationError) as e:
            raise ConfigurationError(
                f"Invalid configuration file {path}: {e}", {"path": str(path)}
            )

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create configuration from dictionary."""
        return cls(**data)

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return self.model_dump(mode="json", exclude_none=True)

    def save_toml(self, path: Path | str) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save TOML file
        """
        import tomli_w

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(self.to_dict(), f)


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()


def load_config(path: Optional[Path | str] = None) -> Config:
    """Load configuration from file or return defaults.

    Args:
        path: Optional path to configuration file

    Returns:
        Config instance
    """
    if path:
        return Config.from_toml(path)
    return get_default_config()

"""Application configuration settings."""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from wsdl2swagger.exceptions import ConfigurationError


class LoggingConfig(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(default="WARNING", description="Log level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    json_format: bool = Field(default=False, description="Use JSON log format")

    class Config:
        env_prefix = "LOG_"


class LoaderConfig(BaseSettings):
    """WSDL loader configuration settings."""

    strict: bool = Field(
        default=True, description="Strict XML schema handling in zeep"
    )
    xml_huge_tree: bool = Field(
        default=False, description="Allow very deep or large XML trees"
    )

    class Config:
        env_prefix = "WSDL_LOADER_"


class ConversionConfig(BaseSettings):
    """Conversion orchestration settings."""

    output_dir: str = Field(
        default=".", description="Directory receiving the YAML documents"
    )
    max_concurrent: int = Field(
        default=8, ge=1, description="Maximum services converted at once"
    )
    sort_services: bool = Field(
        default=True, description="Process services ordered by name"
    )
    validate_output: bool = Field(
        default=True, description="Validate generated Swagger documents"
    )
    strict_validation: bool = Field(
        default=False, description="Fail a service when validation finds issues"
    )
    api_version: str = Field(
        default="1.0.0", description="info.version of generated documents"
    )

    class Config:
        env_prefix = "CONVERSION_"

    def get_output_dir(self) -> Path:
        """Get the output directory path."""
        return Path(self.output_dir)


class Settings(BaseSettings):
    """Main application settings."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def get_log_file_path(self) -> Optional[Path]:
        """Get the log file path if configured."""
        if self.logging.file_path:
            return Path(self.logging.file_path)
        return None


def load_settings(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Settings:
    """Build settings from defaults, environment, a YAML file and overrides.

    Sections of the YAML file (``logging``, ``loader``, ``conversion``)
    replace the matching defaults; ``overrides`` (typically CLI options)
    win over both. Options whose value is ``None`` are ignored.

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values
    """
    data: Dict[str, Dict[str, Any]] = {}

    if config_file:
        path = Path(config_file)
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {path}", {"error": str(e)}
            )
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {path}", {"error": str(e)}
            )

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                "Configuration file must contain a mapping",
                {"file": str(path)},
            )
        for section, values in loaded.items():
            if isinstance(values, dict):
                data[section] = dict(values)

    for section, values in (overrides or {}).items():
        present = {k: v for k, v in values.items() if v is not None}
        if present:
            data.setdefault(section, {}).update(present)

    try:
        return Settings(
            logging=LoggingConfig(**data.get("logging", {})),
            loader=LoaderConfig(**data.get("loader", {})),
            conversion=ConversionConfig(**data.get("conversion", {})),
        )
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration values", {"errors": e.errors()}
        )

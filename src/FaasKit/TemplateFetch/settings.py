# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.settings",
#   "purpose": "Settings model, environment overrides, and YAML loading for the template fetcher",
#   "sections": [
#     {"id": "model", "name": "Settings Model", "anchor": "MOD", "kind": "api"},
#     {"id": "loading", "name": "Configuration Loading", "anchor": "LOD", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Settings model, environment overrides, and YAML loading for the template fetcher.

Values resolve in the following order, lowest precedence first: field defaults,
``FAAS_TEMPLATE_*`` environment variables, an optional YAML file, and explicit
keyword overrides passed to :func:`load_settings`.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Dict, Mapping, Optional

try:  # pragma: no cover - dependency check
    import yaml  # type: ignore
except ModuleNotFoundError as exc:  # pragma: no cover - explicit guidance for users
    raise ImportError(
        "PyYAML is required for configuration parsing. "
        "Install the package with its declared dependencies."
    ) from exc

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    ARCHIVE_NAME,
    DEFAULT_FETCH_TIMEOUT_SEC,
    DEFAULT_TEMPLATE_REPOSITORY,
    TEMPLATE_DIRECTORY,
)
from .errors import UserConfigError

__all__ = [
    "TemplateFetchSettings",
    "load_raw_yaml",
    "load_settings",
]

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


class TemplateFetchSettings(BaseSettings):
    """Runtime configuration for a template fetch run."""

    repository_url: str = Field(
        default=DEFAULT_TEMPLATE_REPOSITORY,
        description="Git repository whose master archive carries the templates",
    )
    archive_name: str = Field(
        default=ARCHIVE_NAME,
        description="Local file name used to stage the downloaded archive",
    )
    template_dir: str = Field(
        default=TEMPLATE_DIRECTORY,
        description="Directory holding one subdirectory per language",
    )
    timeout_sec: float = Field(
        default=DEFAULT_FETCH_TIMEOUT_SEC,
        gt=0.0,
        description="Request timeout for the archive download in seconds",
    )
    overwrite: bool = Field(
        default=False,
        description="Replace language directories that already exist locally",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_dir: Optional[Path] = Field(
        default=None,
        description="Directory for JSON log files; console logging only when unset",
    )

    model_config = SettingsConfigDict(
        env_prefix="FAAS_TEMPLATE_", case_sensitive=False, extra="ignore"
    )

    @field_validator("repository_url", mode="before")
    @classmethod
    def default_empty_repository(cls, value: Any) -> Any:
        """Fall back to the default repository when the URL is blank."""

        if value is None:
            return DEFAULT_TEMPLATE_REPOSITORY
        if isinstance(value, str) and not value.strip():
            return DEFAULT_TEMPLATE_REPOSITORY
        return value

    @field_validator("archive_name", "template_dir")
    @classmethod
    def validate_single_segment(cls, value: str) -> str:
        """Reject names that would escape the working directory."""

        parts = PurePosixPath(value.replace("\\", "/")).parts
        if len(parts) != 1 or parts[0] in {".", "..", "/"}:
            raise ValueError(f"must be a single path segment, got '{value}'")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        """Normalise logging levels and ensure they match the supported set."""

        upper = str(value).upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"level must be one of {sorted(_VALID_LOG_LEVELS)}, got '{value}'")
        return upper


def load_raw_yaml(config_path: Path) -> Mapping[str, object]:
    """Read a YAML mapping from ``config_path``.

    Raises:
        UserConfigError: If the file is missing, unparsable, not a mapping, or
            names keys that :class:`TemplateFetchSettings` does not define.
    """

    if not config_path.exists():
        raise UserConfigError(f"Configuration file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise UserConfigError(f"Configuration file {config_path} is not valid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise UserConfigError(f"Configuration file {config_path} must contain a mapping")

    unknown = sorted(str(key) for key in data if key not in TemplateFetchSettings.model_fields)
    if unknown:
        raise UserConfigError(
            f"Unknown configuration keys in {config_path}: {', '.join(unknown)}"
        )
    return data


def load_settings(
    config_path: Optional[Path] = None, **overrides: Any
) -> TemplateFetchSettings:
    """Build :class:`TemplateFetchSettings` from environment, YAML, and overrides."""

    values: Dict[str, Any] = {}
    if config_path is not None:
        values.update(load_raw_yaml(config_path))
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return TemplateFetchSettings(**values)
    except PydanticValidationError as exc:
        raise UserConfigError(f"Invalid template fetch settings: {exc}") from exc

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from diffpost.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_INTER_POST_DELAY,
    DEFAULT_MAX_COMMENT_LENGTH,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_DELAY,
)
from diffpost.exceptions import ConfigError, CredentialMissingError
from diffpost.logging import get_logger
from diffpost.models.delivery import DeliveryPolicy
from diffpost.utils.duration import parse_duration

__all__ = [
    "DiffPostConfig",
    "PROJECT_CONFIG_NAME",
    "TOKEN_ENV_VARS",
    "load_config",
    "require_github_token",
    "resolve_github_token",
]

logger = get_logger(__name__)

#: Config file picked up from the working directory when --config is not given.
PROJECT_CONFIG_NAME = "diffpost.yaml"

#: Environment variables searched for a token, in order.
TOKEN_ENV_VARS: tuple[str, ...] = ("GH_TOKEN", "GITHUB_TOKEN")


class DiffPostConfig(BaseSettings):
    """Settings for splitting and posting a diff report.

    Attributes:
        max_length: Maximum comment size in bytes (GitHub's limit is 65536).
        max_retries: Retries after the first attempt for each comment.
        retry_delay: Base backoff delay in seconds.
        backoff_factor: Backoff multiplier (>= 1).
        request_timeout: Per-request timeout in seconds.
        inter_post_delay: Pause in seconds between consecutive posts.
        dry_run: Log what would be posted instead of posting.
        api_url: GitHub REST API root.
        log_level: Default log level when --log-level is not given.

    Durations accept seconds (``2``, ``0.5``) or unit strings (``2s``,
    ``500ms``, ``1m30s``).
    """

    model_config = SettingsConfigDict(
        env_prefix="DIFFPOST_",
        extra="ignore",
    )

    max_length: int = Field(default=DEFAULT_MAX_COMMENT_LENGTH, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0.0)
    backoff_factor: float = Field(default=DEFAULT_BACKOFF_FACTOR, ge=1.0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0.0)
    inter_post_delay: float = Field(default=DEFAULT_INTER_POST_DELAY, ge=0.0)
    dry_run: bool = False
    api_url: str = DEFAULT_GITHUB_API_URL
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    @field_validator(
        "retry_delay", "request_timeout", "inter_post_delay", mode="before"
    )
    @classmethod
    def parse_durations(cls, v: Any) -> Any:
        """Accept unit strings like ``2s`` for duration fields."""
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return "warning" if v == "warn" else v
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Environment variables (DIFFPOST_*)
        2. Init settings (values read from the YAML config file)
        3. Field defaults

        CLI flags are applied afterwards by ``with_overrides``.
        """
        return (env_settings, init_settings)

    def delivery_policy(self) -> DeliveryPolicy:
        """Build the retry policy handed to the DeliveryClient."""
        return DeliveryPolicy(
            max_retries=self.max_retries,
            initial_delay=self.retry_delay,
            backoff_factor=self.backoff_factor,
            request_timeout=self.request_timeout,
        )

    def with_overrides(self, **overrides: Any) -> DiffPostConfig:
        """Return a validated copy with non-None overrides applied.

        Raises:
            ConfigError: If an override fails validation.
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        if not updates:
            return self
        try:
            return type(self).model_validate({**self.model_dump(), **updates})
        except ValidationError as e:
            raise _config_error(e) from e


def _config_error(error: ValidationError) -> ConfigError:
    first_error = error.errors()[0]
    field = ".".join(str(loc) for loc in first_error["loc"])
    return ConfigError(
        message=f"Invalid configuration: {first_error['msg']}",
        field=field,
        value=first_error.get("input"),
    )


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if loaded is None:
        logger.warning("config_file_empty", path=str(path))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return {str(key).replace("-", "_"): value for key, value in loaded.items()}


def load_config(config_path: Path | None = None) -> DiffPostConfig:
    """Load configuration with hierarchy: defaults -> YAML file -> env.

    Args:
        config_path: Explicit config file. If None, ``./diffpost.yaml`` is
            used when it exists.

    Returns:
        DiffPostConfig instance with merged configuration.

    Raises:
        ConfigError: If an explicit config file is missing, or the
            configuration is invalid.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}", field="config")
        data = _load_yaml_file(config_path)
    else:
        default_path = Path.cwd() / PROJECT_CONFIG_NAME
        if default_path.exists():
            data = _load_yaml_file(default_path)
        else:
            logger.debug("no_project_config", path=str(default_path))
            data = {}

    try:
        return DiffPostConfig(**data)
    except ValidationError as e:
        raise _config_error(e) from e


def resolve_github_token(
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Find a GitHub token: explicit value, then GH_TOKEN, then GITHUB_TOKEN."""
    if explicit:
        return explicit
    env = os.environ if environ is None else environ
    for name in TOKEN_ENV_VARS:
        token = env.get(name, "").strip()
        if token:
            return token
    return None


def require_github_token(
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Like ``resolve_github_token`` but raises if no token is found.

    Raises:
        CredentialMissingError: If no token is configured.
    """
    token = resolve_github_token(explicit, environ)
    if token is None:
        raise CredentialMissingError()
    return token

"""Pydantic models for the mirror configuration file.

Example::

    log_level: INFO
    github:
      token: ${GITHUB_TOKEN}
    targets:
      - org: amznlabs
        repositories: [oss-dashboard, ion-java]
"""

import os
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ${VAR_NAME} or ${VAR_NAME:default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


class LogLevel(str, Enum):
    """Logging levels accepted in configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def substitute_env_vars(value: Any) -> Any:
    """Replace ``${VAR}`` references in strings, recursing into containers.

    Raises:
        ValueError: If a referenced variable is unset and has no default
    """
    if isinstance(value, str):

        def replacer(match: re.Match[str]) -> str:
            var_name, default_value = match.group(1), match.group(2)
            env_value = os.getenv(var_name)
            if env_value is not None:
                return env_value
            if default_value is not None:
                return default_value
            raise ValueError(f"Required environment variable '{var_name}' not found")

        return ENV_VAR_PATTERN.sub(replacer, value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


class BaseConfigModel(BaseModel):
    """Base configuration model with environment variable substitution."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @model_validator(mode="before")
    @classmethod
    def substitute_env(cls, values: Any) -> Any:
        """Substitute environment variables in string values."""
        if isinstance(values, dict):
            return substitute_env_vars(values)
        return values


class GitHubConfig(BaseConfigModel):
    """GitHub API access settings."""

    token: str | None = Field(default=None, description="GitHub API token")
    base_url: str = Field(
        default="https://api.github.com", description="GitHub API base URL"
    )
    timeout: int = Field(default=30, ge=1, le=600, description="Request timeout")
    max_retries: int = Field(default=3, ge=0, le=10, description="Retries on 5xx")
    per_page: int = Field(default=100, ge=1, le=100, description="Page size")

    @field_validator("token")
    @classmethod
    def blank_token_is_anonymous(cls, v: str | None) -> str | None:
        """Treat an empty token as anonymous access."""
        if v is None or not v.strip():
            return None
        return v.strip()


class SyncTarget(BaseConfigModel):
    """An organization and the repositories of it to mirror."""

    org: str = Field(min_length=1, description="Organization or user login")
    repositories: list[str] = Field(
        default_factory=list,
        description="Repository names; empty mirrors the org-wide issue listing",
    )

    @field_validator("repositories")
    @classmethod
    def strip_owner_prefix(cls, v: list[str]) -> list[str]:
        """Accept 'org/repo' as well as bare repository names."""
        return [name.split("/", 1)[-1] for name in v]


class MirrorConfig(BaseConfigModel):
    """Root configuration of the mirror worker."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    targets: list[SyncTarget] = Field(description="What to mirror")

    @field_validator("targets")
    @classmethod
    def validate_targets_not_empty(cls, v: list[SyncTarget]) -> list[SyncTarget]:
        """Ensure at least one target is configured."""
        if not v:
            raise ValueError("At least one sync target must be configured")
        return v

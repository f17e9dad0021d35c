"""Mirror configuration: targets, GitHub access and logging."""

from .exceptions import (
    ConfigurationError,
    ConfigurationFileError,
    ConfigurationValidationError,
)
from .loader import ConfigurationLoader
from .models import GitHubConfig, LogLevel, MirrorConfig, SyncTarget

__all__ = [
    "ConfigurationError",
    "ConfigurationFileError",
    "ConfigurationLoader",
    "ConfigurationValidationError",
    "GitHubConfig",
    "LogLevel",
    "MirrorConfig",
    "SyncTarget",
]

"""Errors raised while locating, reading or validating the mirror configuration."""

from pydantic import ValidationError


class ConfigurationError(Exception):
    """The mirror cannot start with the configuration it was given."""


class ConfigurationFileError(ConfigurationError):
    """The configuration file is missing, unreadable or not a YAML mapping.

    Attributes:
        file_path: File the error concerns, None when no file was found
    """

    def __init__(self, message: str, file_path: str | None = None):
        super().__init__(f"{file_path}: {message}" if file_path else message)
        self.file_path = file_path


class ConfigurationValidationError(ConfigurationError):
    """The configuration file parsed but its values are invalid.

    Attributes:
        problems: One ``"dotted.location: message"`` line per invalid value
    """

    def __init__(self, error: ValidationError):
        self.problems = [
            f"{'.'.join(str(part) for part in item['loc']) or '<root>'}: {item['msg']}"
            for item in error.errors()
        ]
        super().__init__(f"{len(self.problems)} invalid configuration value(s)")

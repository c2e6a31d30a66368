"""Custom exception classes for framespot."""

from typing import Optional


class FramespotError(Exception):
    """Base exception for all framespot errors."""

    pass


class ConfigError(FramespotError):
    """Base exception for configuration errors."""

    pass


class UnknownConfigKeyError(ConfigError):
    """Raised when a tracking parameter name is not recognised."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown tracking parameter: {key}")


class SpotTableError(FramespotError):
    """Raised when a spot table cannot be parsed."""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{location}{message}")

"""Exception hierarchy shared across ipcgen components."""

from __future__ import annotations

from typing import Sequence


class IpcgenError(RuntimeError):
    """Base class for failures that abort a generation pass."""


class ConfigError(IpcgenError):
    """Raised when the configuration file cannot be parsed."""


class SourceReadError(IpcgenError):
    """Raised when an input file cannot be decoded."""


class ValidationError(IpcgenError):
    """Raised when extracted declarations violate a registry invariant."""


class DuplicateMethodError(ValidationError):
    """Raised when a (group, method) pair is declared more than once."""

    def __init__(self, group: str, method: str, sources: Sequence[str]) -> None:
        self.group = group
        self.method = method
        self.sources = list(sources)
        lines = [f"Duplicate method name '{method}' found in group '{group}':"]
        lines.extend(f"- {source}" for source in self.sources)
        super().__init__("\n".join(lines))


__all__ = [
    "ConfigError",
    "DuplicateMethodError",
    "IpcgenError",
    "SourceReadError",
    "ValidationError",
]

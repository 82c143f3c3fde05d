"""
namedreturns/errors.py

Run-level error types.

Convention violations are never raised; they are Diagnostics.  The
exceptions here cover the cases where a run cannot produce a
trustworthy diagnostic list at all.

Hierarchy::

    NamedReturnsError
    ├── TraversalUnavailableError   front end gave no traversal facility
    ├── ConfigError                 bad / unknown analyzer option
    └── DumpFormatError             undecodable front-end dump
"""

from __future__ import annotations

from typing import Optional

from namedreturns.go_ast import Position


class NamedReturnsError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, position: Optional[Position] = None) -> None:
        self.message = message
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        if self.position is not None and self.position.is_valid():
            return f"{self.position}: {self.message}"
        return self.message


class TraversalUnavailableError(NamedReturnsError):
    """The compilation unit carries no usable inspector."""

    def __init__(self, unit_name: str = "") -> None:
        msg = "failed to get inspector"
        if unit_name:
            msg += f" for {unit_name}"
        super().__init__(msg)
        self.unit_name = unit_name


class ConfigError(NamedReturnsError):
    pass


class DumpFormatError(NamedReturnsError):
    """A front-end dump could not be decoded."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)

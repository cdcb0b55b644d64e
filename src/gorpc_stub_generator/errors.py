"""Exceptions raised while generating RPC stubs.

Every failure of a generation run is fatal. The command-line entry point catches
`GeneratorError`, reports it and exits with a non-zero status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gorpc_stub_generator.go_ast import Position


class GeneratorError(Exception):
    """Base class for all errors of a generation run."""

    def __init__(self, message: str, position: Position | None = None):
        """Initialize the error.

        Args:
            message (str): A human-readable description of the problem.
            position (Position | None, optional): The source position the error refers to. Defaults to None.
        """
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.position}: {self.message}"


class GoSyntaxError(GeneratorError):
    """Raised when the Go source file cannot be parsed."""

    pass


class ValidationError(GeneratorError):
    """Raised when the interface violates a constraint of the RPC runtime."""

    pass


class UnsupportedTypeError(ValidationError):
    """Raised for a type expression outside of the supported type grammar."""

    pass


class OutputError(GeneratorError):
    """Raised when the source file cannot be read or the stub file cannot be written."""

    pass


class FormatterError(GeneratorError):
    """Raised when the external source formatter is missing or fails."""

    pass


class ConfigurationError(GeneratorError):
    """Raised for an invalid option of a generation run."""

    pass

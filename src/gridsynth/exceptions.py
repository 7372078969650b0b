"""
Custom exception classes for gridsynth.
Provides structured error handling across all modules.

The analysis, code generation and verification stages are total and do
not raise for in-bounds input; these exceptions cover the boundaries
around them (grid construction, configuration, program execution).
"""

from typing import Any, Dict, Optional


class GridSynthException(Exception):
    """Base exception for all gridsynth errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self):
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(GridSynthException):
    """Raised when configuration is invalid."""

    pass


class ValidationError(GridSynthException):
    """Raised when input validation fails."""

    pass


class GridError(GridSynthException):
    """Raised when a pattern cannot be turned into a grid."""

    pass


class ProgramSyntaxError(GridSynthException):
    """Raised when a program does not follow the generated grammar."""

    pass


class ExecutionError(GridSynthException):
    """Raised when compiling or running a generated program fails."""

    pass

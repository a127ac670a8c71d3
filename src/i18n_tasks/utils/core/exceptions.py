"""
Basic exception classes for i18n-tasks.

This module contains the error taxonomy shared by the pipeline steps, the
task graph and the command-line driver, without creating import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    CONFIGURATION = "configuration"
    NO_WORK = "no_work"
    EXTERNAL_TOOL = "external_tool"
    DEPENDENCY = "dependency"
    UNKNOWN = "unknown"


class I18nTasksError(Exception):
    """Base exception class for i18n-tasks specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.context: object | None = context
        self.recoverable: bool = recoverable


class ConfigurationError(I18nTasksError):
    """Unresolvable profile, invalid configuration or missing required input."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=False,
        )


class NoWorkError(I18nTasksError):
    """An empty file set where work was expected."""

    def __init__(self, message: str, context: object | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.NO_WORK,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recoverable=False,
        )


class ExternalToolError(I18nTasksError):
    """Non-zero exit or spawn failure of an external tool."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.EXTERNAL_TOOL,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=True,
        )
        self.command: str | None = command


class DependencyMissingError(I18nTasksError):
    """A pipeline stage's required input file is absent."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DEPENDENCY,
            severity=ErrorSeverity.HIGH,
            context=path,
            recoverable=False,
        )
        self.path: str | None = path

"""Error handling module for the climb report.

This module provides:
- Custom exception classes for the failure kinds of a report run
  (arguments, file system, parsing, encoding, configuration)
- User-friendly error message generation with suggested actions
- Centralized error handling service used by the entry point
"""

import csv
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    ARGUMENT = "argument"
    FILE_SYSTEM = "file_system"
    PARSE = "parse"
    ENCODING = "encoding"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class UserFriendlyError:
    """User-friendly error representation with suggested actions."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None


class AppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details

    def to_user_friendly(self) -> UserFriendlyError:
        """Convert to user-friendly error representation."""
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
        )


class ArgumentError(AppError):
    """Exception for malformed command-line input."""

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.ARGUMENT,
            severity=ErrorSeverity.ERROR,
            suggested_actions=["Run with --help to see the expected arguments"],
            technical_details=f"Argument: {argument}" if argument else None,
        )
        self.argument = argument


class FileSystemError(AppError):
    """Exception for file open/read failures."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        path: str | None = None,
    ) -> None:
        suggested_actions = self._get_suggested_actions(original_error)

        technical_details = None
        if original_error:
            technical_details = f"{type(original_error).__name__}: {str(original_error)}"
        if path:
            technical_details = f"Path: {path}" + (f"\n{technical_details}" if technical_details else "")

        super().__init__(
            message=message,
            category=ErrorCategory.FILE_SYSTEM,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
        )
        self.original_error = original_error
        self.path = path

    @staticmethod
    def _get_suggested_actions(original_error: Exception | None) -> list[str]:
        """Get suggested actions based on error type."""
        if isinstance(original_error, PermissionError):
            return [
                "Check file permissions",
                "Copy the snapshot somewhere readable",
            ]
        elif isinstance(original_error, FileNotFoundError):
            return [
                "Verify the snapshot path is correct",
                "Check if the file was moved or deleted",
            ]
        return ["Check the file path and permissions"]


class ParseError(AppError):
    """Exception for malformed snapshot rows or snapshot file names."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        technical_details = None
        if path:
            technical_details = f"Path: {path}"
        if line is not None:
            technical_details = (technical_details or "") + f"\nLine: {line}"
        if field:
            technical_details = (technical_details or "") + f"\nField: {field}"
        if value is not None:
            value_str = str(value)[:100]  # Truncate long values
            technical_details = (technical_details or "") + f"\nValue: {value_str}"

        super().__init__(
            message=message,
            category=ErrorCategory.PARSE,
            severity=ErrorSeverity.ERROR,
            suggested_actions=[
                "Check that the snapshot uses the bgg-ranking-historicals column layout",
                "Fix or remove the malformed row",
            ],
            technical_details=technical_details.strip() if technical_details else None,
        )
        self.path = path
        self.line = line
        self.field = field
        self.value = value

    def with_location(self, path: str, line: int) -> "ParseError":
        """Copy of this error annotated with the file and line it came from."""
        return ParseError(
            message=f"Unable to parse record in '{path}' line {line}, {self.message}",
            path=path,
            line=line,
            field=self.field,
            value=self.value,
        )


class EncodingError(AppError):
    """Exception for failures writing report rows."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(
            message=message,
            category=ErrorCategory.ENCODING,
            severity=ErrorSeverity.ERROR,
            suggested_actions=["Check that standard output is writable"],
            technical_details=(
                f"{type(original_error).__name__}: {str(original_error)}" if original_error else None
            ),
        )
        self.original_error = original_error


class ValidationError(AppError):
    """Exception for inputs that parse but cannot produce a report."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        constraints: list[str] | None = None,
    ) -> None:
        suggested_actions = ["Review the input requirements"]
        if constraints:
            suggested_actions.extend([f"Ensure: {c}" for c in constraints])

        technical_details = None
        if field:
            technical_details = f"Field: {field}"
        if value is not None:
            technical_details = (technical_details or "") + f"\nValue: {str(value)[:100]}"

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
        )
        self.field = field
        self.value = value
        self.constraints = constraints or []


class ConfigurationError(AppError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        current_value: Any = None,
        expected: str | None = None,
    ) -> None:
        suggested_actions = [
            "Check the configuration settings",
            "Reset to default values if needed",
        ]
        if expected:
            suggested_actions.append(f"Expected: {expected}")

        technical_details = None
        if setting:
            technical_details = f"Setting: {setting}"
        if current_value is not None:
            technical_details = (technical_details or "") + f"\nCurrent: {current_value}"

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
        )
        self.setting = setting
        self.current_value = current_value
        self.expected = expected


class ErrorHandlingService:
    """Centralized error handling service.

    Converts arbitrary exceptions into AppError instances and logs them with
    their technical details.
    """

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Handle an error and return a user-friendly representation.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context information

        Returns:
            User-friendly error representation
        """
        app_error = self._convert_to_app_error(error, context)
        self._log_error(app_error, operation, component, context)

        return app_error.to_user_friendly()

    def _convert_to_app_error(
        self,
        error: Exception,
        context: dict[str, Any] | None,
    ) -> AppError:
        """Convert a standard exception to an AppError."""
        if isinstance(error, AppError):
            return error

        path = context.get("path") if context else None
        if isinstance(error, PermissionError):
            return FileSystemError(
                message="Permission denied reading the snapshot.",
                original_error=error,
                path=path,
            )
        elif isinstance(error, FileNotFoundError):
            return FileSystemError(
                message="The snapshot file was not found.",
                original_error=error,
                path=path,
            )
        elif isinstance(error, OSError):
            return FileSystemError(
                message=f"A file system error occurred: {str(error)}",
                original_error=error,
                path=path,
            )
        elif isinstance(error, csv.Error):
            return ParseError(message=f"Malformed CSV: {str(error)}", path=path)
        elif isinstance(error, ValueError):
            return ValidationError(
                message=str(error),
                field=context.get("field") if context else None,
                value=context.get("value") if context else None,
            )

        return AppError(
            message="An unexpected error occurred.",
            category=ErrorCategory.UNEXPECTED,
            severity=ErrorSeverity.CRITICAL,
            technical_details=f"{type(error).__name__}: {str(error)}",
        )

    def _log_error(
        self,
        error: AppError,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        """Log error with full technical details."""
        log_method = log.warning if error.severity == ErrorSeverity.WARNING else log.error

        log_method(
            "Error occurred",
            error_message=error.message,
            category=error.category.value,
            severity=error.severity.value,
            operation=operation,
            component=component,
            technical_details=error.technical_details,
            context=context,
        )

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Create a formatted user message from an error.

        Args:
            error: The user-friendly error
            include_suggestions: Whether to include suggested actions

        Returns:
            Formatted message string
        """
        parts = [error.message]
        if error.technical_details:
            parts.append(error.technical_details)

        if include_suggestions and error.suggested_actions:
            parts.append("Suggested actions:")
            for action in error.suggested_actions[:3]:  # Limit to 3 suggestions
                parts.append(f"  • {action}")

        return "\n".join(parts)


# Global error handling service instance
_error_service: ErrorHandlingService | None = None


def get_error_service() -> ErrorHandlingService:
    """Get the global error handling service instance."""
    global _error_service
    if _error_service is None:
        _error_service = ErrorHandlingService()
    return _error_service

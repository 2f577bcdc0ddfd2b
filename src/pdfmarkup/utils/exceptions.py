"""
PdfMarkup - Custom Exceptions Module

This module defines custom exception classes for specific error cases
in the markup editor and the export pass.
"""


class PdfMarkupError(Exception):
    """Base exception for all PdfMarkup errors.

    All custom exceptions should inherit from this class to allow
    catching any PdfMarkup-specific error.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class InvalidInputError(PdfMarkupError):
    """Raised when a mutation is rejected before any state changes."""

    def __init__(self, reason: str, field_name: str | None = None) -> None:
        """Initialize the exception.

        Args:
            reason: Why the input was rejected
            field_name: Optional name of the offending field
        """
        self.reason = reason
        self.field_name = field_name
        details = f"field={field_name}" if field_name else None
        super().__init__(f"Invalid input: {reason}", details=details)


class DocumentLoadError(PdfMarkupError):
    """Raised when the input document cannot be opened or has no pages."""

    def __init__(self, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            reason: Optional reason why the document is unreadable
        """
        self.reason = reason
        msg = "Could not load document"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class ImageDecodeError(PdfMarkupError):
    """Raised when an embedded image is neither PNG nor JPEG or is corrupt."""

    def __init__(self, markup_id: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            markup_id: Id of the image markup that failed
            reason: Optional reason for the failure
        """
        self.markup_id = markup_id
        self.reason = reason
        msg = f"Failed to decode image for markup {markup_id}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"id={markup_id}")


class ExportError(PdfMarkupError):
    """Raised when the export pass fails as a whole."""

    def __init__(self, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            reason: Optional reason for the failure
        """
        self.reason = reason
        msg = "Export failed"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ExportInProgressError(ExportError):
    """Raised when an export is requested while another one is running."""

    def __init__(self) -> None:
        super().__init__("another export is already in progress")


class ConfigurationError(PdfMarkupError):
    """Raised when there's a configuration-related error."""

    def __init__(self, setting_name: str | None = None, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            setting_name: Optional name of the problematic setting
            reason: Optional reason for the error
        """
        self.setting_name = setting_name
        self.reason = reason

        if setting_name:
            msg = f"Configuration error for '{setting_name}'"
        else:
            msg = "Configuration error"

        if reason:
            msg += f": {reason}"

        super().__init__(msg)

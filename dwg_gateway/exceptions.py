"""
Exception classes for the DWG → DXF conversion gateway.

Internal failures are raised as ``BaseServiceError`` subclasses at the
point where they happen. The request pipeline maps them to an ``ApiError``
which carries the HTTP status and the plain-text message returned to the
caller.
"""

from typing import Any


class BaseServiceError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, error_type: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}


# Common error types for consistency
class ErrorTypes:
    """Common error type constants."""

    MISSING_FILE = "MISSING_FILE"
    MISSING_FILENAME = "MISSING_FILENAME"
    INVALID_EXTENSION = "INVALID_EXTENSION"
    FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
    MALFORMED_MULTIPART = "MALFORMED_MULTIPART"
    MISSING_BOUNDARY = "MISSING_BOUNDARY"
    TOOL_ERROR = "TOOL_ERROR"
    FILE_ERROR = "FILE_ERROR"
    CLIENT_DISCONNECTED = "CLIENT_DISCONNECTED"


# ---------------------------------------------------------------------------
# Client input errors (400)
# ---------------------------------------------------------------------------


class ClientInputError(BaseServiceError):
    """Raised when the uploaded request is missing or invalid."""


class MissingFileError(ClientInputError):
    """Raised when no part with the expected field name was uploaded."""

    def __init__(self, message: str = "No DWG file provided"):
        super().__init__(message, ErrorTypes.MISSING_FILE)


class MissingFilenameError(ClientInputError):
    """Raised when the file part carries no filename."""

    def __init__(self, message: str = "No filename provided"):
        super().__init__(message, ErrorTypes.MISSING_FILENAME)


class InvalidExtensionError(ClientInputError):
    """Raised when the uploaded filename has the wrong extension."""

    def __init__(self, filename: str, expected: str):
        super().__init__(
            f"File must be a {expected} file",
            ErrorTypes.INVALID_EXTENSION,
            {"filename": filename, "expected": expected},
        )


class UploadTooLargeError(ClientInputError):
    """Raised when the uploaded file exceeds the configured maximum size."""

    def __init__(self, max_size: int):
        super().__init__(
            f"File too large. Maximum size: {max_size} bytes",
            ErrorTypes.FILE_SIZE_EXCEEDED,
            {"max_size": max_size},
        )


class MalformedMultipartError(ClientInputError):
    """Raised when the multipart framing cannot be parsed."""

    def __init__(self, message: str, error_type: str = ErrorTypes.MALFORMED_MULTIPART):
        super().__init__(message, error_type)


class MissingBoundaryError(MalformedMultipartError):
    """Raised when the multipart boundary is absent or does not match the body."""

    def __init__(self, message: str = "multipart/form-data request requires a boundary"):
        super().__init__(message, ErrorTypes.MISSING_BOUNDARY)


# ---------------------------------------------------------------------------
# Server side errors (500)
# ---------------------------------------------------------------------------


class ExternalToolError(BaseServiceError):
    """Raised when the external converter fails."""

    def __init__(self, message: str, origin: str):
        super().__init__(message, ErrorTypes.TOOL_ERROR, {"origin": origin})
        self.origin = origin


class ArtifactIOError(BaseServiceError):
    """Raised when a temporary file cannot be written or read back."""

    def __init__(self, message: str, file_path: str):
        super().__init__(message, ErrorTypes.FILE_ERROR, {"file_path": file_path})


class ClientDisconnectedError(BaseServiceError):
    """Raised when the client goes away before the conversion finished."""

    def __init__(self, message: str = "Client disconnected before conversion completed"):
        super().__init__(message, ErrorTypes.CLIENT_DISCONNECTED)


# ---------------------------------------------------------------------------
# HTTP facing errors
# ---------------------------------------------------------------------------


class ApiError(Exception):
    """Terminal error rendered as a plain-text HTTP response."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ApiError):
    status_code = 400


class InternalServerError(ApiError):
    status_code = 500


def to_api_error(exc: BaseServiceError) -> ApiError:
    """
    Map an internal service error to its HTTP facing counterpart.

    Args:
        exc: Error raised somewhere in the request pipeline

    Returns:
        ApiError: BadRequest for client input problems, InternalServerError otherwise
    """
    if isinstance(exc, ClientInputError):
        return BadRequest(exc.message)
    return InternalServerError(exc.message)

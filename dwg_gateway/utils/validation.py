"""
Shared validation utilities for the DWG → DXF conversion gateway.

This module provides common validation functions used by the
settings validators and the upload ingestor.
"""


class ValidationUtils:
    """Shared validation utilities for common validation patterns."""

    @staticmethod
    def validate_file_size(size: int, max_size: int = 500 * 1024 * 1024) -> int:
        """
        Validate file size with common logic.

        Args:
            size: File size in bytes
            max_size: Maximum allowed file size in bytes

        Returns:
            Validated file size

        Raises:
            ValueError: If file size is invalid
        """
        if size <= 0:
            raise ValueError("File size must be positive")
        if size > max_size:
            raise ValueError(f"File size cannot exceed {max_size} bytes")
        return size

    @staticmethod
    def validate_timeout(timeout: int, max_timeout: int = 3600) -> int:
        """
        Validate timeout value with common logic.

        Args:
            timeout: Timeout in seconds
            max_timeout: Maximum allowed timeout in seconds

        Returns:
            Validated timeout

        Raises:
            ValueError: If timeout is invalid
        """
        if timeout <= 0:
            raise ValueError("Timeout must be positive")
        if timeout > max_timeout:
            raise ValueError(f"Timeout cannot exceed {max_timeout} seconds")
        return timeout

    @staticmethod
    def validate_extensions(extensions: list[str]) -> list[str]:
        """
        Validate file extensions with common logic.

        Args:
            extensions: List of file extensions

        Returns:
            Normalized extensions (lowercase, starting with a dot)

        Raises:
            ValueError: If extensions are invalid
        """
        if not extensions or not all(ext.strip(".") for ext in extensions):
            raise ValueError("At least one non-empty extension must be given")
        normalized = [ext.lower() for ext in extensions]
        return [ext if ext.startswith(".") else f".{ext}" for ext in normalized]

    @staticmethod
    def has_extension(filename: str, extension: str) -> bool:
        """Case-insensitive check of a filename's final extension."""
        return filename.lower().endswith(extension.lower())

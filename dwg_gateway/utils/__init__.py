"""
Utilities package for the DWG → DXF conversion gateway.

This package contains utility modules for common operations.
"""

from .shell import (
    CommandResult,
    CommandRunner,
    CommandTimeoutError,
    SubprocessRunner,
    check_command_available,
    run_command_safely,
)
from .validation import ValidationUtils

__all__ = [
    "run_command_safely", "check_command_available",
    "CommandResult", "CommandRunner", "CommandTimeoutError", "SubprocessRunner",
    "ValidationUtils"
]

"""
Conversion models for the DWG → DXF conversion gateway.

This module defines the data structures passed between the pipeline
stages: temporary artifacts and the outcome of one conversion attempt.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dwg_gateway.exceptions import ExternalToolError


class ArtifactRole(str, Enum):
    """Role of a temporary file within one request."""

    INPUT = "input"
    OUTPUT = "output"


class ConversionOrigin(str, Enum):
    """Where a failed conversion went wrong."""

    PROCESS_LAUNCH = "process_launch"
    NONZERO_EXIT = "nonzero_exit"
    MISSING_OUTPUT = "missing_output"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class UploadedFile:
    """Uploaded bytes and the filename the client sent."""

    filename: str
    data: bytes


@dataclass
class TempFile:
    """A request-owned file under the temp directory."""

    identifier: str
    role: ArtifactRole
    path: Path
    released: bool = False

    @property
    def filename(self) -> str:
        """Generated file name, safe to expose in response headers."""
        return self.path.name


@dataclass(frozen=True)
class ConversionSuccess:
    """The converter exited cleanly and produced its output file."""

    output: TempFile


@dataclass(frozen=True)
class ConversionFailure:
    """The converter could not produce a usable output file."""

    message: str
    origin: ConversionOrigin

    def to_error(self) -> ExternalToolError:
        return ExternalToolError(self.message, self.origin.value)


ConversionOutcome = ConversionSuccess | ConversionFailure

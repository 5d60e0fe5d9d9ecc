"""
Temporary artifact store.

Every uploaded drawing and every converted result lives in a file named
``<uuid4><extension>`` under the temp directory for the duration of a
single request. The store creates those files, reads and writes them off
the event loop, and deletes them. Deletion is best effort: failures are
logged and never surface to the caller.
"""

import uuid
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from loguru import logger

from dwg_gateway.exceptions import ArtifactIOError
from dwg_gateway.models.conversion import ArtifactRole, TempFile


class TempArtifactStore:
    """
    Creates, reads, writes and releases request-scoped temporary files.

    Uniqueness across concurrent requests comes from random identifiers,
    so no locking is needed.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the store.

        Args:
            root: Directory in which temporary files are created
        """
        self.root = Path(root)

    def allocate(self, role: ArtifactRole, extension: str) -> TempFile:
        """
        Reserve a fresh path for a temporary file.

        The file itself is not created; the converter creates output files
        and ``write`` creates input files.

        Args:
            role: Whether the file holds the upload or the conversion result
            extension: File extension including the leading dot

        Returns:
            TempFile: Handle that must eventually be passed to ``release``
        """
        identifier = str(uuid.uuid4())
        temp_file = TempFile(
            identifier=identifier,
            role=role,
            path=self.root / f"{identifier}{extension}",
        )
        logger.debug(f"Allocated {role.value} artifact: {temp_file.path}")
        return temp_file

    async def write(self, temp_file: TempFile, data: bytes) -> None:
        """
        Write the full content of a temporary file.

        Raises:
            ArtifactIOError: If the file cannot be created or written
        """
        try:
            await run_in_threadpool(temp_file.path.write_bytes, data)
        except OSError as exc:
            logger.error(f"Failed to write temp file {temp_file.path}: {exc}")
            raise ArtifactIOError(
                f"Failed to write temp file: {exc}", str(temp_file.path)
            ) from exc
        logger.debug(f"Wrote {len(data)} bytes to {temp_file.path}")

    async def read(self, temp_file: TempFile) -> bytes:
        """
        Read the full content of a temporary file.

        Raises:
            ArtifactIOError: If the file cannot be read
        """
        try:
            return await run_in_threadpool(temp_file.path.read_bytes)
        except OSError as exc:
            logger.error(f"Failed to read temp file {temp_file.path}: {exc}")
            raise ArtifactIOError(
                f"Failed to read converted file: {exc}", str(temp_file.path)
            ) from exc

    def release(self, temp_file: TempFile) -> None:
        """
        Delete a temporary file, at most once.

        A file that was never created is not an error. Any other failure is
        logged and swallowed.
        """
        if temp_file.released:
            return
        temp_file.released = True

        try:
            temp_file.path.unlink(missing_ok=True)
            logger.debug(f"Released {temp_file.role.value} artifact: {temp_file.path}")
        except OSError as exc:
            logger.warning(f"Failed to remove temp file {temp_file.path}: {exc}")

    def session(self) -> "ArtifactSession":
        """Open a request-scoped session that releases everything it allocates."""
        return ArtifactSession(self)


class ArtifactSession:
    """
    Request-scoped owner of temporary files.

    Use as a context manager; on exit every file allocated through the
    session that has not been released yet is released.
    """

    def __init__(self, store: TempArtifactStore):
        self.store = store
        self.files: list[TempFile] = []

    def allocate(self, role: ArtifactRole, extension: str) -> TempFile:
        temp_file = self.store.allocate(role, extension)
        self.files.append(temp_file)
        return temp_file

    def release_all(self) -> None:
        for temp_file in self.files:
            self.store.release(temp_file)

    def __enter__(self) -> "ArtifactSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release_all()

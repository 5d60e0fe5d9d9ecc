"""
Upload ingestion.

The request body is fed into the python-multipart push parser chunk by
chunk as it arrives. Parts are scanned in order until the first part named
after the upload field; its body is buffered (up to the configured maximum
size) and reading stops as soon as that part ends.
"""

from collections.abc import AsyncIterator

from loguru import logger
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from dwg_gateway.exceptions import (
    InvalidExtensionError,
    MalformedMultipartError,
    MissingBoundaryError,
    MissingFileError,
    MissingFilenameError,
    UploadTooLargeError,
)
from dwg_gateway.models.conversion import ArtifactRole, TempFile, UploadedFile
from dwg_gateway.services.artifacts import ArtifactSession, TempArtifactStore
from dwg_gateway.utils.validation import ValidationUtils


class _PartCollector:
    """Parser callbacks that pick the upload field out of the part stream."""

    def __init__(self, field_name: str, extension: str, max_size: int):
        self.field_name = field_name
        self.extension = extension
        self.max_size = max_size

        self.parts_started = 0
        self.capturing = False
        self.upload: UploadedFile | None = None

        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        self._filename = ""
        self._buffer = bytearray()

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_part_begin(self) -> None:
        self.parts_started += 1
        self._headers = {}

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        if self.upload is not None:
            return

        disposition = self._headers.get(b"content-disposition", b"")
        _, options = parse_options_header(disposition)
        name = options.get(b"name", b"").decode("utf-8", errors="replace")
        if name != self.field_name:
            logger.debug(f"Skipping multipart field: {name!r}")
            return

        raw_filename = options.get(b"filename")
        if raw_filename is None:
            raise MissingFilenameError()
        filename = raw_filename.decode("utf-8", errors="replace")
        if not ValidationUtils.has_extension(filename, self.extension):
            raise InvalidExtensionError(filename, self.extension)

        self._filename = filename
        self.capturing = True

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if not self.capturing:
            return
        if len(self._buffer) + (end - start) > self.max_size:
            raise UploadTooLargeError(self.max_size)
        self._buffer += data[start:end]

    def on_part_end(self) -> None:
        if not self.capturing:
            return
        self.capturing = False
        self.upload = UploadedFile(filename=self._filename, data=bytes(self._buffer))
        self._buffer = bytearray()


class UploadIngestor:
    """
    Extracts the uploaded drawing from a multipart request stream.

    Only the first part named ``field_name`` is used; later parts are never
    read.
    """

    def __init__(
        self,
        store: TempArtifactStore,
        field_name: str = "file",
        extension: str = ".dwg",
        max_size: int = 100 * 1024 * 1024,
    ):
        """
        Initialize the ingestor.

        Args:
            store: Artifact store the upload is written to
            field_name: Multipart field carrying the file
            extension: Required filename extension, matched case-insensitively
            max_size: Maximum accepted file size in bytes
        """
        self.store = store
        self.field_name = field_name
        self.extension = extension
        self.max_size = max_size

    async def ingest(
        self,
        content_type: str | None,
        stream: AsyncIterator[bytes],
        session: ArtifactSession,
    ) -> TempFile:
        """
        Read the upload and persist it as the request's input artifact.

        Args:
            content_type: Value of the request Content-Type header
            stream: Request body chunks
            session: Request-scoped artifact session

        Returns:
            TempFile: Input artifact holding the uploaded bytes

        Raises:
            ClientInputError: If the upload is missing, invalid or malformed
            ArtifactIOError: If the input file cannot be written
        """
        upload = await self.read_upload(content_type, stream)
        logger.info(f"Received upload {upload.filename!r} ({len(upload.data)} bytes)")

        input_file = session.allocate(ArtifactRole.INPUT, self.extension)
        await self.store.write(input_file, upload.data)
        return input_file

    async def read_upload(
        self, content_type: str | None, stream: AsyncIterator[bytes]
    ) -> UploadedFile:
        """Scan the multipart stream and return the first matching file part."""
        boundary = self._parse_boundary(content_type)
        collector = _PartCollector(self.field_name, self.extension, self.max_size)
        parser = MultipartParser(boundary, collector.callbacks())

        async for chunk in stream:
            self._feed(parser, collector, chunk)
            if collector.upload is not None:
                return collector.upload

        try:
            parser.finalize()
        except MultipartParseError as exc:
            raise self._framing_error(collector, exc) from exc

        if collector.upload is not None:
            return collector.upload
        if collector.capturing:
            raise MalformedMultipartError("Multipart body ended before the file part was complete")
        raise MissingFileError()

    def _feed(self, parser: MultipartParser, collector: _PartCollector, chunk: bytes) -> None:
        try:
            parser.write(chunk)
        except MultipartParseError as exc:
            raise self._framing_error(collector, exc) from exc

    @staticmethod
    def _framing_error(collector: _PartCollector, exc: MultipartParseError) -> MalformedMultipartError:
        logger.debug(f"Multipart parse error after {collector.parts_started} part(s): {exc}")
        # Nothing parsed yet means the body never matched the declared boundary.
        if collector.parts_started == 0:
            return MissingBoundaryError("multipart/form-data body does not match the declared boundary")
        return MalformedMultipartError(f"Malformed multipart body: {exc}")

    @staticmethod
    def _parse_boundary(content_type: str | None) -> bytes:
        if not content_type:
            raise MalformedMultipartError("Content-Type must be multipart/form-data")

        media_type, options = parse_options_header(content_type)
        if media_type.lower() != b"multipart/form-data":
            raise MalformedMultipartError("Content-Type must be multipart/form-data")

        boundary = options.get(b"boundary")
        if not boundary:
            raise MissingBoundaryError()
        return boundary

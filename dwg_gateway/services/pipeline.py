"""
Conversion request pipeline for the DWG → DXF conversion gateway.

This service orchestrates one conversion request:
Upload ingestion → External conversion → Response assembly

All temp files allocated along the way belong to a single artifact session
and are released whichever stage fails.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

from fastapi.responses import Response
from loguru import logger

from dwg_gateway.config import Settings
from dwg_gateway.exceptions import (
    BaseServiceError,
    ClientDisconnectedError,
    ClientInputError,
    to_api_error,
)
from dwg_gateway.models.conversion import (
    ConversionFailure,
    ConversionOutcome,
    TempFile,
)
from dwg_gateway.services.artifacts import ArtifactSession, TempArtifactStore
from dwg_gateway.services.assembler import ResponseAssembler
from dwg_gateway.services.converter import ConversionInvoker
from dwg_gateway.services.ingest import UploadIngestor
from dwg_gateway.utils.shell import CommandRunner, SubprocessRunner

DisconnectCheck = Callable[[], Awaitable[bool]]


class ConversionPipeline:
    """Main conversion request orchestrator."""

    def __init__(
        self,
        store: TempArtifactStore,
        ingestor: UploadIngestor,
        invoker: ConversionInvoker,
        assembler: ResponseAssembler,
        poll_interval: float = 0.5,
    ):
        self.store = store
        self.ingestor = ingestor
        self.invoker = invoker
        self.assembler = assembler
        self.poll_interval = poll_interval

    async def run(
        self,
        content_type: str | None,
        stream: AsyncIterator[bytes],
        is_disconnected: DisconnectCheck | None = None,
    ) -> Response:
        """
        Convert the drawing uploaded in a multipart request body.

        Args:
            content_type: Request Content-Type header
            stream: Request body chunks
            is_disconnected: Optional check polled while the converter runs;
                when it reports a disconnect the converter is killed

        Returns:
            Response: Binary download of the converted file

        Raises:
            ApiError: BadRequest for client input problems, InternalServerError
                for conversion and I/O failures
        """
        with self.store.session() as session:
            try:
                input_file = await self.ingestor.ingest(content_type, stream, session)
                outcome = await self._convert(input_file, session, is_disconnected)
                if isinstance(outcome, ConversionFailure):
                    raise outcome.to_error()
                return await self.assembler.assemble(outcome, session)

            except ClientInputError as exc:
                logger.warning(f"Rejected upload ({exc.error_type}): {exc.message}")
                raise to_api_error(exc) from exc
            except BaseServiceError as exc:
                logger.error(f"Conversion request failed ({exc.error_type}): {exc.message}")
                raise to_api_error(exc) from exc

    async def _convert(
        self,
        input_file: TempFile,
        session: ArtifactSession,
        is_disconnected: DisconnectCheck | None,
    ) -> ConversionOutcome:
        if is_disconnected is None:
            return await self.invoker.convert(input_file, session)

        task = asyncio.ensure_future(self.invoker.convert(input_file, session))
        try:
            while True:
                done, _ = await asyncio.wait({task}, timeout=self.poll_interval)
                if done:
                    return task.result()
                if await is_disconnected():
                    logger.warning(f"Client disconnected, cancelling conversion of {input_file.path}")
                    raise ClientDisconnectedError()
        finally:
            # The converter must be stopped before the session deletes its files.
            if not task.done():
                task.cancel()
                await asyncio.shield(asyncio.gather(task, return_exceptions=True))


def build_pipeline(settings: Settings, runner: CommandRunner | None = None) -> ConversionPipeline:
    """
    Wire a pipeline from application settings.

    Args:
        settings: Application settings
        runner: Process runner, defaults to real subprocesses

    Returns:
        ConversionPipeline: Ready to serve requests
    """
    store = TempArtifactStore(settings.temp_dir)
    return ConversionPipeline(
        store=store,
        ingestor=UploadIngestor(
            store,
            field_name=settings.UPLOAD_FIELD_NAME,
            extension=settings.SOURCE_EXTENSION,
            max_size=settings.MAX_UPLOAD_SIZE,
        ),
        invoker=ConversionInvoker(
            runner or SubprocessRunner(),
            tool_path=settings.CONVERTER_PATH,
            target_extension=settings.TARGET_EXTENSION,
            timeout=settings.CONVERSION_TIMEOUT,
        ),
        assembler=ResponseAssembler(store),
        poll_interval=settings.DISCONNECT_POLL_INTERVAL,
    )

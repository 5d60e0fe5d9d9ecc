"""
Response assembly for successful conversions.
"""

from fastapi.responses import Response
from loguru import logger

from dwg_gateway.models.conversion import ConversionSuccess
from dwg_gateway.services.artifacts import ArtifactSession, TempArtifactStore


class ResponseAssembler:
    """Turns a converted artifact into a binary download response."""

    media_type = "application/octet-stream"

    def __init__(self, store: TempArtifactStore):
        self.store = store

    async def assemble(self, outcome: ConversionSuccess, session: ArtifactSession) -> Response:
        """
        Read the converted file, release the request's temp files, and respond.

        The content is fully read into memory before any file is deleted.
        The download name is the generated output name, never the name the
        client uploaded.

        Raises:
            ArtifactIOError: If the output file cannot be read back
        """
        output_file = outcome.output
        content = await self.store.read(output_file)
        session.release_all()

        logger.debug(f"Returning {len(content)} bytes as {output_file.filename}")
        return Response(
            content=content,
            media_type=self.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{output_file.filename}"',
            },
        )

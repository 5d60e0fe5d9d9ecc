"""
DWG → DXF conversion service.

This module invokes the LibreDWG ``dwg2dxf`` executable on an uploaded
drawing and classifies what happened. A zero exit code alone is not taken
as success: the expected output file must also exist.
"""

from pathlib import Path

from loguru import logger

from dwg_gateway.models.conversion import (
    ArtifactRole,
    ConversionFailure,
    ConversionOrigin,
    ConversionOutcome,
    ConversionSuccess,
    TempFile,
)
from dwg_gateway.services.artifacts import ArtifactSession
from dwg_gateway.utils.shell import CommandRunner, CommandTimeoutError


class ConversionInvoker:
    """
    Runs the external converter for one input file.

    Invocation is always ``<tool> -o <output-path> <input-path>``.
    """

    def __init__(
        self,
        runner: CommandRunner,
        tool_path: str,
        target_extension: str = ".dxf",
        timeout: float | None = 300,
    ):
        """
        Initialize the invoker.

        Args:
            runner: Process execution seam
            tool_path: Path to the converter executable
            target_extension: Extension of the produced file
            timeout: Seconds before the converter is killed, None disables
        """
        self.runner = runner
        self.tool_path = tool_path
        self.target_extension = target_extension
        self.timeout = timeout

    @property
    def tool_name(self) -> str:
        return Path(self.tool_path).name

    def _build_command(self, input_file: TempFile, output_file: TempFile) -> list[str]:
        return [self.tool_path, "-o", str(output_file.path), str(input_file.path)]

    async def convert(self, input_file: TempFile, session: ArtifactSession) -> ConversionOutcome:
        """
        Convert ``input_file`` into a new output artifact.

        The output TempFile is allocated through ``session`` before the
        converter runs, so it is released with the rest of the request's
        files whatever the outcome.

        Args:
            input_file: Persisted upload
            session: Request-scoped artifact session

        Returns:
            ConversionOutcome: success with the output file, or a classified failure
        """
        output_file = session.allocate(ArtifactRole.OUTPUT, self.target_extension)
        cmd = self._build_command(input_file, output_file)

        logger.info(f"Converting: {input_file.path} -> {output_file.path}")

        try:
            result = await self.runner.run(cmd, timeout=self.timeout)
        except CommandTimeoutError as exc:
            logger.error(f"{self.tool_name} timed out after {exc.timeout_seconds}s")
            return ConversionFailure(
                f"Conversion timed out after {exc.timeout_seconds} seconds",
                ConversionOrigin.TIMEOUT,
            )
        except OSError as exc:
            logger.error(f"Failed to launch {self.tool_path}: {exc}")
            return ConversionFailure(
                f"Failed to execute {self.tool_name}: {exc}",
                ConversionOrigin.PROCESS_LAUNCH,
            )

        if result.returncode != 0:
            logger.error(
                f"{self.tool_name} exited with code {result.returncode}: {result.stderr.strip()}"
            )
            return ConversionFailure(
                f"Conversion failed: {result.stderr}",
                ConversionOrigin.NONZERO_EXIT,
            )

        if not output_file.path.is_file():
            logger.error(f"{self.tool_name} exited cleanly but wrote no output: {output_file.path}")
            return ConversionFailure(
                f"{self.target_extension.lstrip('.').upper()} file was not produced",
                ConversionOrigin.MISSING_OUTPUT,
            )

        logger.info(
            f"Conversion successful, input file path: {input_file.path} "
            f"output file path: {output_file.path}"
        )
        return ConversionSuccess(output_file)

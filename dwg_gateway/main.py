"""
FastAPI application entry point for the DWG → DXF conversion gateway.

This module initializes the FastAPI application with proper configuration,
middleware, and routing, and provides the ``dwg2dxf-api`` command line
entry point.
"""

import argparse
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger

from dwg_gateway.api import conversion, health
from dwg_gateway.config import settings
from dwg_gateway.exceptions import ApiError
from dwg_gateway.middleware import LoggingMiddleware
from dwg_gateway.utils.shell import check_command_available

BANNER = (
    "DWG to DXF Converter API\n\n"
    "Endpoints:\n"
    "- POST /convert - Upload DWG file to convert to DXF"
)


def validate_tool_paths() -> None:
    """Validate that the external converter is available."""
    tool_path = settings.CONVERTER_PATH

    if check_command_available(tool_path):
        logger.info(f"Tool validated: {tool_path}")
        return

    if settings.ENVIRONMENT == "production":
        raise RuntimeError(
            f"Required tool not found in production: {tool_path}. "
            "Please ensure LibreDWG is installed."
        )
    logger.warning(
        f"Converter not found (non-fatal in {settings.ENVIRONMENT}): {tool_path}"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} {settings.VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Temp directory: {settings.temp_dir}")

    try:
        validate_tool_paths()
    except RuntimeError as exc:
        logger.error(f"Tool validation failed: {exc}")
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")


async def api_error_handler(request: Request, exc: ApiError) -> PlainTextResponse:
    """Render an ApiError as its status code with the message as plain text."""
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Converts uploaded DWG drawings to DXF with LibreDWG's dwg2dxf",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)  # type: ignore

    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore

    # Include routers
    setup_routers(app)

    # Setup logging
    setup_logging()

    return app


def setup_routers(app: FastAPI) -> None:
    """
    Include API routers in the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def home() -> str:
        """Capability banner."""
        return BANNER

    app.include_router(conversion.router, tags=["conversion"])
    app.include_router(health.router, tags=["health"])


def setup_logging() -> None:
    """
    Configure logging with loguru.
    """
    logger.remove()  # Remove default handler

    # Add console handler
    logger.add(
        sink=sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.LOG_LEVEL,
        colorize=True
    )

    # Add file handler for production
    if settings.ENVIRONMENT == "production":
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)

        logger.add(
            "logs/app.log",
            rotation="1 day",
            retention="30 days",
            level=settings.LOG_LEVEL,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
        )


# Create the FastAPI application instance
app = create_app()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dwg2dxf-api", description=settings.APP_NAME)
    parser.add_argument("-H", "--host", default=settings.HOST, help="Address to listen on")
    parser.add_argument("-P", "--port", type=int, default=settings.PORT, help="Port to listen on")
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> None:
    """Command line entry point: serve the application with uvicorn."""
    args = parse_args(argv)
    logger.debug(f"Listening on {args.host}:{args.port}")
    uvicorn.run(
        "dwg_gateway.main:app",
        host=args.host,
        port=args.port,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()

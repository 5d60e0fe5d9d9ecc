"""
Conversion API endpoints for the DWG → DXF conversion gateway.

This module provides the upload-and-convert endpoint. The request body is
read as a raw stream and handed to the conversion pipeline, so the upload
is parsed incrementally instead of being spooled by the framework first.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from dwg_gateway.config import Settings, get_settings
from dwg_gateway.services.pipeline import ConversionPipeline, build_pipeline

router = APIRouter()

# The body is consumed manually, so describe it for the OpenAPI schema.
CONVERT_REQUEST_BODY = {
    "requestBody": {
        "required": True,
        "description": "DWG file to convert",
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "required": ["file"],
                    "properties": {
                        "file": {"type": "string", "format": "binary"},
                    },
                },
            },
        },
    },
}

CONVERT_RESPONSES = {
    200: {
        "description": "Successfully converted DXF file",
        "content": {"application/octet-stream": {"schema": {"type": "string", "format": "binary"}}},
    },
    400: {
        "description": "Bad request - invalid file or missing parameters",
        "content": {"text/plain": {"schema": {"type": "string"}}},
    },
    500: {
        "description": "Internal server error - conversion failed",
        "content": {"text/plain": {"schema": {"type": "string"}}},
    },
}


def get_pipeline(settings: Settings = Depends(get_settings)) -> ConversionPipeline:
    """
    Build the conversion pipeline for a request.

    Args:
        settings: Application settings

    Returns:
        ConversionPipeline: Pipeline wired to the configured converter
    """
    return build_pipeline(settings)


@router.post(
    "/convert",
    response_class=Response,
    responses=CONVERT_RESPONSES,
    openapi_extra=CONVERT_REQUEST_BODY,
    description="Convert DWG file to DXF format",
)
async def convert_dwg_to_dxf(
    request: Request,
    pipeline: ConversionPipeline = Depends(get_pipeline),
) -> Response:
    """
    Convert an uploaded DWG drawing to DXF.

    Args:
        request: Incoming multipart/form-data request with a ``file`` part
        pipeline: Conversion pipeline

    Returns:
        Response: The converted file as an attachment

    Raises:
        ApiError: Rendered as a plain-text 400 or 500 response
    """
    return await pipeline.run(
        request.headers.get("content-type"),
        request.stream(),
        is_disconnected=request.is_disconnected,
    )

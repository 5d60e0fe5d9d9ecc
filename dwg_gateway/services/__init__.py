"""
Services package for the DWG → DXF conversion gateway.

This package contains the request pipeline stages and the external
converter integration.
"""

from .artifacts import ArtifactSession, TempArtifactStore
from .assembler import ResponseAssembler
from .converter import ConversionInvoker
from .ingest import UploadIngestor
from .pipeline import ConversionPipeline, build_pipeline

__all__ = [
    "TempArtifactStore", "ArtifactSession",
    "UploadIngestor",
    "ConversionInvoker",
    "ResponseAssembler",
    "ConversionPipeline", "build_pipeline",
]

"""
Shared fixtures for the DWG → DXF conversion gateway tests.

External converter behaviour is simulated with small shell scripts that
take the same ``-o <output> <input>`` arguments as dwg2dxf.
"""

import stat
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dwg_gateway.config import Settings, get_settings
from dwg_gateway.main import app

BOUNDARY = "----dwg-gateway-test-boundary"

# Fake converter scripts; $2 is the output path and $3 the input path.
TOOL_WRITES_OUTPUT = "printf 'DXF-OUTPUT' > \"$2\""
TOOL_COPIES_INPUT = "cp \"$3\" \"$2\""
TOOL_WRITES_NOTHING = "exit 0"
TOOL_FAILS = "echo 'Invalid DWG header' >&2\nexit 1"
TOOL_HANGS = "exec sleep 30"


def build_multipart(parts: list[tuple[str, str | None, bytes]], boundary: str = BOUNDARY) -> bytes:
    """
    Encode multipart/form-data parts by hand.

    Args:
        parts: (field name, filename or None, content) tuples
        boundary: Boundary string

    Returns:
        bytes: Encoded request body
    """
    body = b""
    for name, filename, content in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        body += f"--{boundary}\r\nContent-Disposition: {disposition}\r\n".encode()
        if filename is not None:
            body += b"Content-Type: application/octet-stream\r\n"
        body += b"\r\n" + content + b"\r\n"
    body += f"--{boundary}--\r\n".encode()
    return body


async def stream_of(data: bytes, chunk_size: int = 16):
    """Yield ``data`` in small chunks, like a request body arriving over the network."""
    for start in range(0, len(data), chunk_size):
        yield data[start:start + chunk_size]


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Directory receiving the gateway's temporary artifacts."""
    directory = tmp_path / "artifacts"
    directory.mkdir()
    return directory


@pytest.fixture
def make_tool(tmp_path: Path):
    """Factory writing an executable fake converter script."""
    def _make(script_body: str, name: str = "fake-dwg2dxf") -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        tool = bin_dir / name
        tool.write_text(f"#!/bin/sh\n{script_body}\n")
        tool.chmod(tool.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return tool
    return _make


@pytest.fixture
def make_settings(temp_dir: Path):
    """Factory for settings pointing at the per-test temp directory."""
    def _make(**overrides) -> Settings:
        return Settings(TEMP_DIR=str(temp_dir), **overrides)
    return _make


@pytest.fixture
def client_for(make_settings):
    """Factory for a TestClient whose app uses the given settings overrides."""
    def _client(**overrides) -> TestClient:
        test_settings = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: test_settings
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()

"""Shared fixtures for the PlantLens test-suite."""
from __future__ import annotations

import asyncio
import hashlib
import io
import os
import struct
import tempfile
import zlib

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from PIL import Image

os.environ.setdefault("PLANTLENS_LOG_DIR", tempfile.mkdtemp(prefix="plantlens-logs-"))

from plantlens.config import Settings  # noqa: E402
from plantlens.main import create_app  # noqa: E402


class FakeAnalysisClient:
    """Stands in for Gemini; replies with a digest of the bytes it was given."""

    def __init__(self, reply: str | None = None, error: Exception | None = None, delay: float = 0.0) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[tuple[bytes, str]] = []

    async def analyze(self, image: bytes, mime_type: str) -> str:
        self.calls.append((image, mime_type))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply or f"Healthy fern. Digest {hashlib.sha256(image).hexdigest()}"


def make_png(size: tuple[int, int] = (32, 32), color: str = "green") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        upload_dir=str(tmp_path / "uploads"),
        reports_dir=str(tmp_path / "reports"),
        static_dir=str(tmp_path / "public"),
        log_dir=str(tmp_path / "logs"),
        gemini_api_key=None,
    )


@pytest.fixture
def fake_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def client(settings, fake_client):
    with TestClient(create_app(settings=settings, analysis_client=fake_client)) as test_client:
        yield test_client


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


def make_oversized_png(width: int = 20000, height: int = 20000) -> bytes:
    """A PNG whose header declares dimensions past Pillow's decompression-bomb limit."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IEND", b"")


@pytest.fixture
def log_messages():
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="INFO", format="{message}")
    yield messages
    logger.remove(sink_id)

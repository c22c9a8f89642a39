"""Plant image analysis backed by a multimodal Gemini model."""
from __future__ import annotations

import asyncio
from typing import Protocol

import google.generativeai as genai

from ..config import Settings
from ..errors import AnalysisFailed, AnalysisTimeout, ConfigurationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

ANALYSIS_PROMPT = (
    "Analyze this plant image and provide detailed analysis of its species, health, "
    "and care recommendations, its characteristics, care instructions, and any "
    "interesting facts. Please provide the response in plain text without using any "
    "markdown formatting"
)


class AnalysisClient(Protocol):
    async def analyze(self, image: bytes, mime_type: str) -> str:
        ...


class GeminiAnalysisClient:
    """Stateless wrapper around ``genai.GenerativeModel``.

    One instance is built at startup and shared by all requests. Each call
    is bounded by ``timeout`` seconds and never retried.
    """

    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash", timeout: float = 60.0) -> None:
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout = timeout
        self.model = genai.GenerativeModel(model_name)

    async def analyze(self, image: bytes, mime_type: str) -> str:
        contents = [ANALYSIS_PROMPT, {"mime_type": mime_type, "data": image}]
        logger.info("Sending image to {model} for analysis", model=self.model_name)
        try:
            response = await asyncio.wait_for(
                self.model.generate_content_async(contents),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise AnalysisTimeout(f"{self.model_name} did not answer within {self.timeout}s") from exc
        except Exception as exc:
            raise AnalysisFailed(f"{self.model_name} request failed: {exc}") from exc

        try:
            text = response.text
        except ValueError as exc:
            # raised by the SDK when the candidate was blocked or has no parts
            raise AnalysisFailed(f"{self.model_name} returned no usable text: {exc}") from exc
        if not text or not text.strip():
            raise AnalysisFailed(f"{self.model_name} returned an empty response")
        return text


def build_analysis_client(settings: Settings) -> GeminiAnalysisClient:
    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY is not set; image analysis is unavailable")
    return GeminiAnalysisClient(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        timeout=settings.analysis_timeout,
    )

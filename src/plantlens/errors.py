"""Error taxonomy shared by the PlantLens services and routes.

Every error carries the HTTP status it maps to and a public message that is
safe to return to clients. The underlying cause is only ever logged.
"""
from __future__ import annotations

from typing import Optional


class PlantLensError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class MissingInput(PlantLensError):
    status_code = 400
    public_message = "Please upload an image"


class AnalysisFailed(PlantLensError):
    status_code = 500
    public_message = "Error analyzing the image"


class AnalysisTimeout(AnalysisFailed):
    status_code = 504
    public_message = "Image analysis timed out"


class RenderFailed(PlantLensError):
    status_code = 500
    public_message = "Error generating PDF report"


class CleanupFailed(PlantLensError):
    """Scratch file could not be removed. Logged, never sent to clients."""


class ConfigurationError(PlantLensError):
    """Raised at startup when required settings are missing."""


__all__ = [
    "PlantLensError",
    "MissingInput",
    "AnalysisFailed",
    "AnalysisTimeout",
    "RenderFailed",
    "CleanupFailed",
    "ConfigurationError",
]

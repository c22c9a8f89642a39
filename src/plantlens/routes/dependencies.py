"""Request-scoped accessors for objects the application holds on ``app.state``."""
from fastapi import Request

from ..config import Settings
from ..services.analysis import AnalysisClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_analysis_client(request: Request) -> AnalysisClient:
    return request.app.state.analysis_client

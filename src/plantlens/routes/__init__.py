"""Route modules for FastAPI application."""
from . import analyze, report

__all__ = ["analyze", "report"]

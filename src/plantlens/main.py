"""FastAPI entrypoint for the PlantLens service."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import Settings, get_settings
from .errors import PlantLensError
from .routes import analyze, report
from .services.analysis import AnalysisClient, build_analysis_client
from .utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    for directory in (settings.upload_dir, settings.reports_dir):
        Path(directory).mkdir(parents=True, exist_ok=True)
    if app.state.analysis_client is None:
        try:
            app.state.analysis_client = build_analysis_client(settings)
        except PlantLensError as exc:
            logger.critical("Cannot start PlantLens: {error}", error=exc.detail)
            raise
    logger.info("PlantLens ready ({environment})", environment=settings.environment)
    yield


async def handle_plantlens_error(request: Request, exc: PlantLensError) -> JSONResponse:
    cause = exc.__cause__
    logger.error(
        "{method} {path} failed: {detail} (cause: {cause})",
        method=request.method,
        path=request.url.path,
        detail=exc.detail,
        cause=repr(cause) if cause else None,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


def create_app(
    settings: Optional[Settings] = None,
    analysis_client: Optional[AnalysisClient] = None,
) -> FastAPI:
    """Build the application; pass ``analysis_client`` to bypass the Gemini client."""
    settings = settings or get_settings()
    app = FastAPI(title="PlantLens API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.analysis_client = analysis_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PlantLensError, handle_plantlens_error)

    app.include_router(analyze.router, tags=["analysis"])
    app.include_router(report.router, tags=["report"])

    @app.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        """Simple readiness endpoint for orchestration and CI checks."""
        return {"status": "ok"}

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

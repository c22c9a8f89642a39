"""Endpoint for downloading an analysis as a PDF report."""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import FileResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ..config import Settings
from ..errors import PlantLensError, RenderFailed
from ..services.report import render_report, report_filename
from ..utils.logger import get_logger
from ..utils.scratch import remove_scratch, scratch_path
from .dependencies import get_app_settings

logger = get_logger(__name__)

router = APIRouter()


class DownloadRequest(BaseModel):
    result: str
    image: Optional[str] = None


@router.post("/download", response_class=FileResponse)
async def download_report(
    payload: DownloadRequest,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_app_settings),
) -> FileResponse:
    """Render the analysis into a PDF attachment; the file is removed once sent."""
    pdf_path = scratch_path(settings.reports_dir, ".pdf")
    try:
        pdf_bytes = await run_in_threadpool(render_report, payload.result, payload.image)
        await run_in_threadpool(pdf_path.write_bytes, pdf_bytes)
    except PlantLensError:
        remove_scratch(pdf_path)
        raise
    except Exception as exc:
        remove_scratch(pdf_path)
        raise RenderFailed(f"Could not write report: {exc}") from exc

    filename = report_filename()
    logger.info("Serving report {filename} ({size} bytes)", filename=filename, size=len(pdf_bytes))
    background_tasks.add_task(remove_scratch, pdf_path)
    return FileResponse(pdf_path, media_type="application/pdf", filename=filename)

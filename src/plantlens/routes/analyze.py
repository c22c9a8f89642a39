"""Endpoint for plant image analysis."""
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel

from ..config import Settings
from ..errors import AnalysisFailed, PlantLensError
from ..services import intake
from ..services.analysis import AnalysisClient
from ..utils.data_uri import encode_data_uri
from ..utils.logger import get_logger
from .dependencies import get_analysis_client, get_app_settings

logger = get_logger(__name__)

router = APIRouter()


class AnalysisResponse(BaseModel):
    results: str
    image: str


@router.post("/analyze", status_code=status.HTTP_200_OK, response_model=AnalysisResponse)
async def analyze_image(
    image: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_app_settings),
    client: AnalysisClient = Depends(get_analysis_client),
) -> AnalysisResponse:
    """Send the uploaded image to the analysis model and echo it back as a data-URI."""
    try:
        uploaded = await intake.read_upload(image, settings.upload_dir)
        results = await client.analyze(uploaded.data, uploaded.mime_type)
    except PlantLensError:
        raise
    except Exception as exc:
        raise AnalysisFailed(f"Unexpected analysis error: {exc}") from exc

    logger.info("Analysis complete ({chars} characters)", chars=len(results))
    return AnalysisResponse(
        results=results,
        image=encode_data_uri(uploaded.data, uploaded.mime_type),
    )

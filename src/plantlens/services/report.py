"""PDF report rendering for plant analyses."""
from __future__ import annotations

import io
import re
import time
from datetime import datetime
from typing import List, Optional
from xml.sax.saxutils import escape

from PIL import Image, UnidentifiedImageError
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Flowable, Image as RLImage, Paragraph, SimpleDocTemplate, Spacer

from ..errors import RenderFailed
from ..utils.data_uri import InvalidDataURI, decode_data_uri
from ..utils.logger import get_logger

logger = get_logger(__name__)

REPORT_TITLE = "Plant Analysis Report"
PAGE_MARGIN = 50
MAX_IMAGE_BOX = (500.0, 500.0)
# platypus frames pad their content by 6pt on every side
_FRAME_PADDING = 12

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def _styles() -> dict[str, ParagraphStyle]:
    sample = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle", parent=sample["Title"], fontSize=24, leading=30, alignment=TA_CENTER
        ),
        "date": ParagraphStyle("ReportDate", parent=sample["Normal"], fontSize=14, leading=18),
        "body": ParagraphStyle(
            "ReportBody", parent=sample["Normal"], fontSize=14, leading=18, alignment=TA_LEFT, spaceAfter=8
        ),
    }


def _body_paragraphs(text: str, style: ParagraphStyle) -> List[Flowable]:
    blocks = [block.strip("\n") for block in _PARAGRAPH_BREAK.split(text.replace("\r\n", "\n"))]
    return [Paragraph(escape(block).replace("\n", "<br/>"), style) for block in blocks if block.strip()]


def _fit_size(width: int, height: int, box: tuple[float, float]) -> tuple[float, float]:
    scale = min(box[0] / width, box[1] / height, 1.0)
    return width * scale, height * scale


def _image_flowable(image_data_uri: str, box: tuple[float, float]) -> Optional[Flowable]:
    """Decode the data-URI into a centered image, or ``None`` when it is unusable."""
    try:
        decoded = decode_data_uri(image_data_uri)
        with Image.open(io.BytesIO(decoded.data)) as source:
            source.load()
            width, height = source.size
            normalized = io.BytesIO()
            source.convert("RGB").save(normalized, format="PNG")
    except (InvalidDataURI, UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning("Omitting undecodable image from report: {error}", error=str(exc))
        return None
    if not width or not height:
        logger.warning("Omitting empty image from report")
        return None

    normalized.seek(0)
    draw_width, draw_height = _fit_size(width, height, box)
    flowable = RLImage(normalized, width=draw_width, height=draw_height)
    flowable.hAlign = "CENTER"
    return flowable


def render_report(
    text: str,
    image_data_uri: Optional[str] = None,
    *,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Render the analysis ``text`` and optional image into PDF bytes.

    Long bodies paginate automatically. A malformed image is left out of the
    report rather than failing it; any other rendering error raises
    ``RenderFailed``.
    """
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=REPORT_TITLE,
    )
    styles = _styles()

    story: List[Flowable] = [
        Paragraph(REPORT_TITLE, styles["title"]),
        Paragraph(f"Date: {generated_at:%B} {generated_at.day}, {generated_at.year}", styles["date"]),
        Spacer(1, 18),
    ]
    story.extend(_body_paragraphs(text, styles["body"]))

    if image_data_uri:
        box = (
            min(MAX_IMAGE_BOX[0], doc.width - _FRAME_PADDING),
            min(MAX_IMAGE_BOX[1], doc.height - _FRAME_PADDING),
        )
        image = _image_flowable(image_data_uri, box)
        if image is not None:
            story.append(Spacer(1, 18))
            story.append(image)

    try:
        doc.build(story)
    except Exception as exc:
        raise RenderFailed(f"PDF generation failed: {exc}") from exc
    return buffer.getvalue()


def report_filename(now: Optional[float] = None) -> str:
    """Download name for a report, stamped with epoch milliseconds."""
    stamp = int((time.time() if now is None else now) * 1000)
    return f"Plant_Analysis_Report_{stamp}.pdf"

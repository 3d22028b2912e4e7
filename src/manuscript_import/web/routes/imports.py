"""Manuscript import endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, status

from manuscript_import.core.structure_detector import InputError
from manuscript_import.web.detection import get_detector
from manuscript_import.web.schemas import DetectChaptersRequest, DetectChaptersResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/import", tags=["import"])


@router.post("/detect-chapters", response_model=DetectChaptersResponse)
def detect_chapters(request: DetectChaptersRequest) -> DetectChaptersResponse:
    """Detect chapters, acts and title of an uploaded manuscript.

    Runs in the threadpool: the optional AI call is blocking.
    """
    detector = get_detector()

    try:
        structure = detector.detect(request.content)
    except InputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    logger.info(
        "detect_chapters",
        chapters=len(structure.chapters),
        acts=len(structure.acts),
        words=structure.total_word_count,
    )

    return DetectChaptersResponse.from_structure(structure)

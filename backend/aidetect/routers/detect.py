from fastapi import APIRouter, Depends

from aidetect.api.deps import get_detection_service
from aidetect.schemas.detection import DetectRequest, DetectResponse
from aidetect.services.detection_service import DetectionService

router = APIRouter(prefix="/api", tags=["Detection"])


@router.post("/detect", response_model=DetectResponse)
async def detect(req: DetectRequest, svc: DetectionService = Depends(get_detection_service)):
    """Single detection when the text fits one chunk, chunked otherwise."""
    return await svc.detect(req)

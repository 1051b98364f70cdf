from fastapi import APIRouter, Depends

from aidetect.api.deps import get_pdf_backend
from aidetect.core.config import settings
from aidetect.pdf.backends import PdfBackend

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health(backend: PdfBackend = Depends(get_pdf_backend)):
    return {
        "status": "ok",
        "pdf_backend": backend.name,
        "detection_base_url": settings.DETECTION_BASE_URL,
    }

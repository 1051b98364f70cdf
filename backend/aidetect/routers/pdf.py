"""
pdf.py
- Purpose: API routes for PDF info, page previews and text extraction.
- Design: Keep router thin. Delegate business logic to services.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from aidetect.api.deps import get_extraction_service
from aidetect.schemas.pdf import ExtractResponse, PagePreviewsResponse, PdfInfoResponse
from aidetect.services.extraction_service import ExtractionService

router = APIRouter(prefix="/api/pdf", tags=["PDF"])


@router.post("/info", response_model=PdfInfoResponse)
async def pdf_info(
    pdf: UploadFile = File(...),
    svc: ExtractionService = Depends(get_extraction_service),
):
    return await svc.get_info(pdf)


@router.post("/previews", response_model=PagePreviewsResponse)
async def pdf_previews(
    pdf: UploadFile = File(...),
    max_pages: int | None = Form(None, ge=1, le=500),
    svc: ExtractionService = Depends(get_extraction_service),
):
    return await svc.get_previews(pdf, max_pages)


@router.post("/extract", response_model=ExtractResponse)
async def pdf_extract(
    pdf: UploadFile = File(...),
    pages: str | None = Form(None, description='Comma separated page numbers or ranges, e.g. "1,3,5-7"'),
    svc: ExtractionService = Depends(get_extraction_service),
):
    return await svc.extract(pdf, pages)

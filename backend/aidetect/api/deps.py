from typing import AsyncGenerator

import httpx
from fastapi import Depends, Request

from aidetect.detection.client import DetectionClient
from aidetect.detection.provider import DetectionProvider
from aidetect.pdf.backends import PdfBackend, resolve_backend
from aidetect.pdf.extract import PdfDocumentExtractor
from aidetect.services.detection_service import DetectionService
from aidetect.services.extraction_service import ExtractionService


def get_pdf_backend() -> PdfBackend:
    """
    Resolved once per process from settings.PDF_BACKENDS.
    Using Depends(get_pdf_backend) allows swapping in a fake parser in tests.
    """
    return resolve_backend()


def get_extraction_service(backend: PdfBackend = Depends(get_pdf_backend)) -> ExtractionService:
    return ExtractionService(extractor=PdfDocumentExtractor(backend))


async def get_http_client(request: Request) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Shares the app-wide client created in the lifespan when present,
    otherwise yields a per-request client that is closed afterwards.
    """
    shared = getattr(request.app.state, "http", None)
    if shared is not None:
        yield shared
        return
    async with httpx.AsyncClient() as client:
        yield client


def get_detection_client(http: httpx.AsyncClient = Depends(get_http_client)) -> DetectionClient:
    return DetectionClient(DetectionProvider(http=http))


def get_detection_service(client: DetectionClient = Depends(get_detection_client)) -> DetectionService:
    return DetectionService(client=client)

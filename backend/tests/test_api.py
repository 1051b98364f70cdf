import io

import httpx
import pytest
from fastapi.testclient import TestClient

from aidetect.api.deps import get_detection_client, get_pdf_backend
from aidetect.core.config import settings
from aidetect.detection.client import DetectionClient
from aidetect.detection.provider import DetectionProvider
from aidetect.main import app

from conftest import DETECTOR_URL, FakeBackend, FakeDetectionServer, text_page

LONG_TEXT = "Machine written prose tends to be smooth. " * 3


@pytest.fixture
def backend():
    return FakeBackend([text_page(f"Page {i} content.") for i in range(1, 6)], metadata={"title": "Quarterly"})


@pytest.fixture
def server():
    return FakeDetectionServer([{"status": "processing"}, {"status": "done", "result": 81}])


@pytest.fixture
def client(backend, server):
    async def no_sleep(seconds):
        return None

    def detection_client():
        http = httpx.AsyncClient(transport=httpx.MockTransport(server))
        return DetectionClient(DetectionProvider(base_url=DETECTOR_URL, http=http), sleep=no_sleep)

    app.dependency_overrides[get_pdf_backend] = lambda: backend
    app.dependency_overrides[get_detection_client] = detection_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def _pdf(name="doc.pdf", content_type="application/pdf", data=b"%PDF-1.7 fake body"):
    return {"pdf": (name, io.BytesIO(data), content_type)}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["pdf_backend"] == "fake"


def test_request_id_is_echoed(client):
    resp = client.get("/api/health", headers={"x-request-id": "req-123"})
    assert resp.headers["x-request-id"] == "req-123"


def test_extract_selected_pages(client):
    resp = client.post("/api/pdf/extract", files=_pdf(), data={"pages": "3,1"})
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["text"] == "Page 1 content.\n\nPage 3 content."
    assert body["pages"] == [1, 3]
    assert body["total_pages"] == 5
    assert body["stats"]["word_count"] == 6
    assert body["progress"][0]["step"] == "reading"
    assert body["progress"][-1]["step"] == "completed"


def test_extract_page_ranges(client):
    resp = client.post("/api/pdf/extract", files=_pdf(), data={"pages": "2-3"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["pages"] == [2, 3]


def test_extract_all_pages(client):
    resp = client.post("/api/pdf/extract", files=_pdf())
    assert resp.status_code == 200, resp.text
    assert resp.json()["pages"] == [1, 2, 3, 4, 5]


def test_extract_rejects_unparseable_pages(client):
    resp = client.post("/api/pdf/extract", files=_pdf(), data={"pages": "one,two"})
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_SELECTION"


def test_extract_rejects_pages_out_of_range(client):
    resp = client.post("/api/pdf/extract", files=_pdf(), data={"pages": "9"})
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "INVALID_SELECTION"


def test_upload_rejects_wrong_content_type(client):
    resp = client.post("/api/pdf/extract", files=_pdf(name="doc.pdf", content_type="text/plain"))
    assert resp.status_code == 415
    err = resp.json()["error"]
    assert err["code"] == "INVALID_FILE_TYPE"
    assert err["category"] == "INPUT"


def test_upload_rejects_wrong_extension(client):
    resp = client.post("/api/pdf/extract", files=_pdf(name="doc.txt"))
    assert resp.status_code == 415
    assert resp.json()["error"]["code"] == "INVALID_FILE_TYPE"


def test_upload_rejects_empty_file(client):
    resp = client.post("/api/pdf/extract", files=_pdf(data=b""))
    assert resp.status_code == 422
    assert resp.json()["error"]["reason"] == "PDF file is empty"


def test_upload_rejects_oversized_file(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE_BYTES", 8)
    resp = client.post("/api/pdf/extract", files=_pdf(data=b"%PDF-1.7 this is too long"))
    assert resp.status_code == 413
    assert resp.json()["error"]["code"] == "FILE_TOO_LARGE"


def test_info(client):
    resp = client.post("/api/pdf/info", files=_pdf())
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["num_pages"] == 5
    assert body["title"] == "Quarterly"
    assert body["file_name"] == "doc.pdf"
    assert body["is_likely_scanned"] is True  # fifteen characters per page
    assert body["warning"]


def test_previews_start_with_everything_selected(backend, client):
    backend.pages = [text_page(f"Page {i} content.") for i in range(1, 31)]
    resp = client.post("/api/pdf/previews", files=_pdf(), data={"max_pages": "5"})
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["total_pages"] == 30
    assert len(body["previews"]) == 5
    assert body["selected_pages"] == list(range(1, 31))
    assert body["select_all"] is True
    assert body["has_more_pages"] is True


def test_detect_single(client, server):
    resp = client.post("/api/detect", json={"text": LONG_TEXT})
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["mode"] == "single"
    assert body["result"]["ai_probability"] == 81
    assert body["result"]["human_probability"] == 19
    assert body["result"]["message"] == "AI: 81%, Human: 19%"
    assert [p["step"] for p in body["progress"]] == ["submitting", "processing", "completed"]
    assert server.polls == 2


def test_detect_chunked(client):
    resp = client.post("/api/detect", json={"text": LONG_TEXT, "max_words_per_chunk": 10})
    assert resp.status_code == 200, resp.text

    body = resp.json()
    assert body["mode"] == "chunked"
    assert [c["chunk_index"] for c in body["chunks"]] == [1, 2, 3]
    assert [c["word_count"] for c in body["chunks"]] == [10, 10, 1]
    # trailing one-word chunk is too short to analyze
    assert body["chunks"][2]["error"]["code"] == "TEXT_TOO_SHORT"
    assert body["summary"]["succeeded"] == 2
    assert body["summary"]["failed"] == 1


def test_detect_short_text(client):
    resp = client.post("/api/detect", json={"text": "tiny"})
    assert resp.status_code == 422
    err = resp.json()["error"]
    assert err["code"] == "TEXT_TOO_SHORT"
    assert err["category"] == "INPUT"


def test_detect_poll_timeout(client, server):
    server.results = [{"status": "processing"}]
    resp = client.post("/api/detect", json={"text": LONG_TEXT})
    assert resp.status_code == 504
    err = resp.json()["error"]
    assert err["code"] == "POLL_TIMEOUT"
    assert err["category"] == "TRANSIENT"

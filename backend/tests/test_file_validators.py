import pytest

from aidetect.core import AppError, ErrorCode
from aidetect.core.config import settings
from aidetect.validations.file_validators import format_file_size, validate_pdf_size


@pytest.mark.parametrize(
    "size,label",
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (50 * 1024 * 1024, "50 MB"),
        (3 * 1024 ** 3, "3 GB"),
    ],
)
def test_format_file_size(size, label):
    assert format_file_size(size) == label


def test_size_limit_boundary(monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE_BYTES", 100)
    validate_pdf_size(100)
    with pytest.raises(AppError) as exc:
        validate_pdf_size(101)
    assert exc.value.code == ErrorCode.FILE_TOO_LARGE
    assert exc.value.status_code == 413

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so we can import exam_importer
ROOT = Path(__file__).resolve().parent.parent
if ROOT.as_posix() not in sys.path:
    sys.path.insert(0, ROOT.as_posix())

from exam_importer.storage import ExamStore, KeyValueStore  # noqa: E402


@pytest.fixture
def mixed_exam_text():
    """Đề 3 phần như giáo viên dán từ Word."""
    return "\n".join([
        "SỞ GD&ĐT ... ĐỀ KIỂM TRA CUỐI KÌ",
        "I. TRẮC NGHIỆM NHIỀU LỰA CHỌN",
        "1. Nhận biết",
        "Câu 1: Việt Nam nằm ở đâu? A. Đông Nam Á. B. Châu Âu.",
        "C. Châu Phi. D. Châu Mỹ.",
        "Câu 2. Thủ đô của Việt Nam là",
        "A. Hà Nội",
        "B. Huế",
        "C. Đà Nẵng",
        "D. TP Hồ Chí Minh",
        "II. TRẮC NGHIỆM ĐÚNG SAI",
        "Câu 3: Cho thông tin sau về sông Hồng.",
        "a) Sông Hồng chảy qua Hà Nội.",
        "b) Sông Hồng đổ ra biển Đông.",
        "c) Sông Hồng bắt nguồn từ Lào.",
        "d) Sông Hồng có nhiều phù sa.",
        "III. TRẢ LỜI NGẮN",
        "Câu 4: Diện tích Việt Nam khoảng bao nhiêu nghìn km2?",
    ])


@pytest.fixture
def exam_store(tmp_path: Path):
    return ExamStore(KeyValueStore(tmp_path / "store"))

from __future__ import annotations
import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from exam_importer.config import STORE_DIR
from exam_importer.models import Question

logger = logging.getLogger(__name__)

EXAMS_KEY = "exams"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(RuntimeError):
    pass


class KeyValueStore:
    """
    Lưu text theo tên khoá logic, mỗi khoá 1 file <root>/<key>.json.
    Không có logic nghiệp vụ, không version schema.
    """

    def __init__(self, root: Path = STORE_DIR):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key or ""):
            raise ValueError(f"Tên khoá không hợp lệ: {key!r}")
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, text: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise StorageError(f"Không ghi được dữ liệu '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Không xoá được dữ liệu '{key}': {e}") from e


class ExamStore:
    """Danh sách đề đã lưu (mới nhất đứng đầu)."""

    def __init__(self, kv: Optional[KeyValueStore] = None):
        self.kv = kv or KeyValueStore()

    def get_exams(self) -> List[Dict[str, Any]]:
        try:
            data = self.kv.get_item(EXAMS_KEY)
            exams = json.loads(data) if data else []
        except (OSError, ValueError) as e:
            logger.error("Lỗi đọc danh sách đề: %s", e)
            return []
        if not isinstance(exams, list):
            logger.error("Dữ liệu đề không phải danh sách, bỏ qua")
            return []
        valid = [
            e for e in exams
            if isinstance(e, dict) and isinstance(e.get("id"), str) and isinstance(e.get("questions", []), list)
        ]
        if len(valid) != len(exams):
            logger.error("Bỏ %d mục đề hỏng (không phải object, thiếu id hoặc questions sai kiểu)", len(exams) - len(valid))
        return valid

    def get_exam(self, exam_id: str) -> Optional[Dict[str, Any]]:
        for exam in self.get_exams():
            if exam.get("id") == exam_id:
                return exam
        return None

    def save_exam(self, name: str, questions: Sequence[Question]) -> Dict[str, Any]:
        name = (name or "").strip()
        if not name:
            raise ValueError("Thiếu tên đề.")
        exam = {
            "id": uuid.uuid4().hex,
            "name": name,
            "savedAt": datetime.now(timezone.utc).isoformat(),
            "questions": [q.to_dict() for q in questions],
        }
        self._write([exam, *self.get_exams()])
        logger.info("Đã lưu đề %s (%d câu)", exam["id"], len(exam["questions"]))
        return exam

    def delete_exam(self, exam_id: str) -> None:
        self._write([e for e in self.get_exams() if e.get("id") != exam_id])

    def clear_all(self) -> None:
        self.kv.remove_item(EXAMS_KEY)

    def _write(self, exams: List[Dict[str, Any]]) -> None:
        self.kv.set_item(EXAMS_KEY, json.dumps(exams, ensure_ascii=False, indent=2))

from __future__ import annotations
import logging
import os
from pathlib import Path

APP_TITLE = "Nhập câu hỏi từ văn bản (Beta) • Streamlit"

DATA_DIR = Path(os.environ.get("EXAM_IMPORTER_DATA_DIR") or Path(__file__).resolve().parents[1] / "data")
STORE_DIR = DATA_DIR / "store"

LOG_LEVEL = os.environ.get("EXAM_IMPORTER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Cấu hình root logger 1 lần (Streamlit chạy lại script mỗi lần tương tác).
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)

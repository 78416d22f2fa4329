from __future__ import annotations
import io
import logging
from pathlib import Path
from typing import List

from docx import Document
from pypdf import PdfReader

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".txt", ".docx", ".pdf")


def _text_from_docx(data: bytes) -> str:
    """
    Lấy chữ theo thứ tự đoạn văn, sau đó tới các ô bảng (đề hay để phương án trong bảng).
    """
    doc = Document(io.BytesIO(data))
    lines: List[str] = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                lines.append(cell.text)
    return "\n".join(lines)


def _text_from_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    texts = []
    for page in reader.pages:
        t = page.extract_text() or ""
        if t:
            texts.append(t)
    return "\n".join(texts)


def text_from_upload(filename: str, data: bytes) -> str:
    """
    Đổi file upload (.txt/.docx/.pdf) thành văn bản thuần để đưa vào bộ nhập câu hỏi.
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix == ".txt":
        text = data.decode("utf-8-sig")
    elif suffix == ".docx":
        text = _text_from_docx(data)
    elif suffix == ".pdf":
        text = _text_from_pdf(data)
    else:
        raise ValueError("Chỉ hỗ trợ .txt, .docx hoặc .pdf")
    logger.debug("Đọc %d ký tự từ %s", len(text), filename)
    return text

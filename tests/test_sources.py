"""
Tests for exam_importer.sources

Test Coverage:
- text_from_upload(): .txt, .docx (paragraphs + tables), .pdf, unsupported types
"""
import io

import pytest
from docx import Document
from pypdf import PdfWriter

from exam_importer.parser import parse_exam_text
from exam_importer.sources import text_from_upload


def _docx_bytes() -> bytes:
    doc = Document()
    doc.add_paragraph("I. TRẮC NGHIỆM NHIỀU LỰA CHỌN")
    doc.add_paragraph("Câu 1: Thủ đô của Việt Nam là")
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "A. Hà Nội"
    table.cell(0, 1).text = "B. Huế"
    table.cell(1, 0).text = "C. Đà Nẵng"
    table.cell(1, 1).text = "D. Cần Thơ"
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def test_txt_with_bom():
    data = "\ufeffCâu 1: Hỏi?".encode("utf-8")

    assert text_from_upload("de.TXT", data) == "Câu 1: Hỏi?"


def test_docx_paragraphs_then_table_cells():
    text = text_from_upload("de.docx", _docx_bytes())

    assert [ln for ln in text.splitlines() if ln.strip()] == [
        "I. TRẮC NGHIỆM NHIỀU LỰA CHỌN",
        "Câu 1: Thủ đô của Việt Nam là",
        "A. Hà Nội",
        "B. Huế",
        "C. Đà Nẵng",
        "D. Cần Thơ",
    ]
    q = parse_exam_text(text)[0]
    assert q.options == ("Hà Nội", "Huế", "Đà Nẵng", "Cần Thơ")


def test_pdf_without_text_gives_empty_string():
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)

    assert text_from_upload("scan.pdf", buf.getvalue()) == ""


@pytest.mark.parametrize("name", ["de.doc", "de", "", "anh.png"])
def test_unsupported_file_type(name):
    with pytest.raises(ValueError, match="Chỉ hỗ trợ"):
        text_from_upload(name, b"")

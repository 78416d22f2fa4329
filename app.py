from __future__ import annotations
import logging
from typing import List

import streamlit as st

from exam_importer.config import APP_TITLE, setup_logging
from exam_importer.models import (
    QTYPE_LABELS,
    MultipleChoiceQuestion,
    Question,
    TrueFalseQuestion,
    question_from_dict,
)
from exam_importer.preview import preview_import, questions_to_frame, questions_to_json
from exam_importer.sources import SUPPORTED_SUFFIXES, text_from_upload
from exam_importer.storage import ExamStore, StorageError
from exam_importer.validators import review_notes

setup_logging()
logger = logging.getLogger("exam_importer.app")

EXAMPLE_TEXT = """Ví dụ:

I. TRẮC NGHIỆM NHIỀU LỰA CHỌN
Câu 1: Việt Nam nằm ở đâu?
A. Đông Nam Á. B. Châu Âu.
C. Châu Phi. D. Châu Mỹ.

II. TRẮC NGHIỆM ĐÚNG SAI
Câu 2: Cho thông tin sau...
a) Đúng
b) Sai
..."""


def init_state():
    st.session_state.setdefault("source_text", "")
    st.session_state.setdefault("preview", [])  # list[Question]


def run_import(text: str) -> List[Question]:
    questions, error = preview_import(text)
    if error:
        st.error(error)
    return questions


def render_question(idx: int, q: Question):
    label = QTYPE_LABELS.get(q.kind, q.kind)
    with st.expander(f"#{idx} • {label}", expanded=False):
        if isinstance(q, TrueFalseQuestion):
            st.write(q.context_text)
            for s in q.statements:
                st.write(f"**{s.label})** {s.text}")
        elif isinstance(q, MultipleChoiceQuestion):
            st.write(q.question_text)
            for k, opt in zip("ABCD", q.options):
                st.write(f"**{k}.** {opt}")
            st.caption(f"Đáp án: {q.correct_answer}")
        else:
            st.write(q.question_text)
        for note in review_notes(q):
            st.warning(note)


# ---------------- UI ----------------
st.set_page_config(page_title=APP_TITLE, layout="wide")
init_state()
store = ExamStore()
st.title(APP_TITLE)
st.caption("Sao chép nội dung từ File Word/PDF và dán vào đây. Ứng dụng sẽ tự động nhận diện câu hỏi.")

with st.sidebar:
    st.subheader("Đề đã lưu")
    exams = store.get_exams()
    if not exams:
        st.caption("Chưa có đề nào.")
    for exam in exams:
        st.write(f"**{exam.get('name', '')}** • {len(exam.get('questions', []))} câu")
        st.caption(exam.get("savedAt", ""))
        c1, c2 = st.columns([1, 1])
        with c1:
            if st.button("Mở", key=f"open_{exam['id']}"):
                try:
                    st.session_state.preview = [question_from_dict(q) for q in exam.get("questions", [])]
                except ValueError as e:
                    st.error(str(e))
        with c2:
            if st.button("Xoá", key=f"del_{exam['id']}"):
                try:
                    store.delete_exam(exam["id"])
                except StorageError as e:
                    st.error(str(e))
                st.rerun()

up = st.file_uploader("Hoặc tải file (.txt/.docx/.pdf)", type=[s.lstrip(".") for s in SUPPORTED_SUFFIXES])
if up is not None and st.button("Lấy nội dung từ file"):
    try:
        st.session_state.source_text = text_from_upload(up.name, up.getvalue())
    except Exception as e:
        logger.exception("Không đọc được file %s", up.name)
        st.warning(f"Không đọc được file: {e}")

text = st.text_area("Dán nội dung câu hỏi:", key="source_text", height=320, placeholder=EXAMPLE_TEXT)

if st.button("Phân tích & Xem trước", type="primary", disabled=not text.strip()):
    with st.spinner("Đang xử lý..."):
        st.session_state.preview = run_import(text)

preview: List[Question] = st.session_state.preview
if preview:
    st.markdown(f"### Kết quả ({len(preview)} câu)")
    if any(isinstance(q, TrueFalseQuestion) for q in preview):
        st.info("Câu Đúng/Sai: văn bản dán không cho biết ý nào Đúng (khi nhập mới, tất cả để Sai). Cần kiểm tra lại từng ý.")
    st.dataframe(questions_to_frame(preview), use_container_width=True, hide_index=True)
    for idx, q in enumerate(preview, 1):
        render_question(idx, q)

    st.divider()
    colx1, colx2 = st.columns([1, 1])
    with colx1:
        exam_name = st.text_input("Tên đề", value="Đề nhập từ văn bản")
        if st.button(f"Nhập {len(preview)} câu hỏi"):
            try:
                exam = store.save_exam(exam_name, preview)
                st.success(f"Đã lưu đề '{exam['name']}'.")
            except (ValueError, StorageError) as e:
                st.error(str(e))
    with colx2:
        st.download_button("⬇️ Tải JSON", data=questions_to_json(preview),
                           file_name="cau_hoi.json", mime="application/json")

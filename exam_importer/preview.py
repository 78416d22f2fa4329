from __future__ import annotations
import json
import logging
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from exam_importer.models import QTYPE_LABELS, MultipleChoiceQuestion, Question, TrueFalseQuestion
from exam_importer.parser import parse_exam_text
from exam_importer.validators import review_notes, validate_question

logger = logging.getLogger(__name__)

PREVIEW_COLUMNS = ["STT", "Dạng", "Nội dung", "Đáp án / Ý", "Kiểm tra", "Cần rà soát"]

MSG_EMPTY = "Không tìm thấy câu hỏi nào. Vui lòng kiểm tra định dạng (ví dụ: 'Câu 1: ...')."
MSG_FAILED = "Lỗi khi xử lý văn bản."


def preview_import(text: str) -> Tuple[List[Question], Optional[str]]:
    """
    Gọi bộ nhập cho màn xem trước. Trả (questions, error_message);
    lỗi bất ngờ chỉ trả thông báo chung, chi tiết ghi log.
    """
    try:
        questions = parse_exam_text(text)
    except Exception:
        logger.exception("Lỗi khi phân tích văn bản dán")
        return [], MSG_FAILED
    if not questions:
        return [], MSG_EMPTY
    return questions, None


def _stem(q: Question) -> str:
    return q.context_text if isinstance(q, TrueFalseQuestion) else q.question_text


def _details(q: Question) -> str:
    if isinstance(q, MultipleChoiceQuestion):
        return " | ".join(f"{k}. {opt}" for k, opt in zip("ABCD", q.options))
    if isinstance(q, TrueFalseQuestion):
        return " | ".join(f"{s.label}) {s.text}" for s in q.statements)
    return q.correct_answer


def questions_to_frame(questions: Sequence[Question]) -> pd.DataFrame:
    """
    Bảng xem trước: mỗi câu 1 dòng, kèm kết quả validator và ghi chú cần rà soát.
    """
    rows = []
    for i, q in enumerate(questions, 1):
        _, msg = validate_question(q.to_dict())
        rows.append({
            "STT": i,
            "Dạng": QTYPE_LABELS.get(q.kind, q.kind),
            "Nội dung": _stem(q),
            "Đáp án / Ý": _details(q),
            "Kiểm tra": msg,
            "Cần rà soát": " ".join(review_notes(q)),
        })
    return pd.DataFrame(rows, columns=PREVIEW_COLUMNS)


def questions_to_json(questions: Sequence[Question]) -> str:
    return json.dumps([q.to_dict() for q in questions], ensure_ascii=False, indent=2)

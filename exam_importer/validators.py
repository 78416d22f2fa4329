from __future__ import annotations
from typing import Any, Dict, List, Tuple

from exam_importer.models import (
    OPTION_PLACEHOLDER,
    QTYPE_MC,
    QTYPE_SHORT,
    QTYPE_TF,
    STATEMENT_PLACEHOLDER,
    TF_LABELS,
    MultipleChoiceQuestion,
    Question,
    TrueFalseQuestion,
)


def validate_question(obj: Dict[str, Any]) -> Tuple[bool, str]:
    """
    Trả (ok, message). Kiểm tra cấu trúc tối thiểu của 1 câu hỏi (JSON đã lưu/nhập).
    """
    if not isinstance(obj, dict):
        return False, "Nội dung câu hỏi không phải JSON object."

    qtype = obj.get("type")

    if qtype == QTYPE_MC:
        if not (obj.get("question") or "").strip():
            return False, "MCQ: thiếu 'question' (nội dung câu hỏi)."
        options = obj.get("options")
        if not isinstance(options, list) or len(options) != 4:
            return False, "MCQ: 'options' phải là danh sách đúng 4 phương án."
        for k, opt in zip("ABCD", options):
            if not isinstance(opt, str) or not opt.strip():
                return False, f"MCQ: thiếu phương án {k}."
        if not (obj.get("correct_answer") or "").strip():
            return False, "MCQ: thiếu 'correct_answer'."
        return True, "OK"

    if qtype == QTYPE_TF:
        if not (obj.get("context") or "").strip():
            return False, "Đúng/Sai: thiếu 'context' (đoạn dẫn)."
        stmts = obj.get("statements")
        if not isinstance(stmts, list) or len(stmts) != 4:
            return False, "Đúng/Sai: cần đúng 4 ý trong 'statements'."
        for label, it in zip(TF_LABELS, stmts):
            if not isinstance(it, dict):
                return False, f"Đúng/Sai: ý {label}) không hợp lệ."
            if it.get("id") != label:
                return False, f"Đúng/Sai: ý thứ {TF_LABELS.index(label) + 1} phải có id '{label}'."
            if not (it.get("text") or "").strip():
                return False, f"Đúng/Sai: thiếu nội dung ý {label})."
            if not isinstance(it.get("is_true"), bool):
                return False, f"Đúng/Sai: is_true ở ý {label}) phải là true/false."
        return True, "OK"

    if qtype == QTYPE_SHORT:
        if not (obj.get("question") or "").strip():
            return False, "Trả lời ngắn: thiếu 'question'."
        if not isinstance(obj.get("correct_answer", ""), str):
            return False, "Trả lời ngắn: 'correct_answer' phải là chuỗi."
        return True, "OK"

    return False, f"Không hỗ trợ dạng câu hỏi: {qtype}"


def review_notes(question: Question) -> List[str]:
    """
    Liệt kê những chỗ có thể do bộ nhập văn bản "đoán" (placeholder, giá trị mặc định)
    để giáo viên rà soát lại.
    """
    notes: List[str] = []
    if isinstance(question, MultipleChoiceQuestion):
        missing = [k for k, opt in zip("ABCD", question.options) if opt == OPTION_PLACEHOLDER]
        if missing:
            notes.append(f"Chưa xác định phương án {', '.join(missing)}.")
        if question.options and question.correct_answer == question.options[0]:
            notes.append("Đáp án đúng đang là A, cần kiểm tra.")
    elif isinstance(question, TrueFalseQuestion):
        missing = [s.label for s in question.statements if s.text == STATEMENT_PLACEHOLDER]
        if missing:
            notes.append(f"Chưa xác định ý {', '.join(missing)}.")
        # nhập từ văn bản luôn để tất cả là Sai
        if not any(s.is_true for s in question.statements):
            notes.append("Tất cả các ý đang là Sai, cần kiểm tra.")
    else:
        if not question.correct_answer.strip():
            notes.append("Chưa có đáp án cho câu trả lời ngắn.")
    return notes

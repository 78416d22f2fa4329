from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple, Union

QTYPE_MC = "multiple_choice"
QTYPE_TF = "true_false"
QTYPE_SHORT = "short_answer"

# Tên hiển thị cho giáo viên
QTYPE_LABELS = {
    QTYPE_MC: "TN 1 lựa chọn",
    QTYPE_TF: "Đúng/Sai",
    QTYPE_SHORT: "Trả lời ngắn",
}

TF_LABELS = ("a", "b", "c", "d")
MC_LETTERS = ("A", "B", "C", "D")

# Giá trị "đoán" khi không khôi phục được nội dung. Không bao giờ là chuỗi rỗng.
OPTION_PLACEHOLDER = "(Chưa xác định nội dung đáp án)"
STATEMENT_PLACEHOLDER = "(Chưa xác định ý)"


class Section(str, Enum):
    """Phần đề mà bộ phân tích đang đọc."""
    MULTIPLE_CHOICE = "MCQ"
    TRUE_FALSE = "TF"
    SHORT_ANSWER = "SHORT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class MultipleChoiceQuestion:
    question_text: str
    options: Tuple[str, ...]
    correct_answer: str

    kind: ClassVar[str] = QTYPE_MC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "question": self.question_text,
            "options": list(self.options),
            "correct_answer": self.correct_answer,
        }


@dataclass(frozen=True)
class TrueFalseStatement:
    label: str
    text: str
    is_true: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.label, "text": self.text, "is_true": self.is_true}


@dataclass(frozen=True)
class TrueFalseQuestion:
    """
    Câu Đúng/Sai: 1 đoạn dẫn + đúng 4 ý a, b, c, d.
    is_true do giáo viên đặt lại sau khi nhập (bộ nhập văn bản luôn để False).
    """
    context_text: str
    statements: Tuple[TrueFalseStatement, ...]

    kind: ClassVar[str] = QTYPE_TF

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "context": self.context_text,
            "statements": [s.to_dict() for s in self.statements],
        }


@dataclass(frozen=True)
class ShortAnswerQuestion:
    question_text: str
    correct_answer: str = ""

    kind: ClassVar[str] = QTYPE_SHORT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "question": self.question_text,
            "correct_answer": self.correct_answer,
        }


Question = Union[MultipleChoiceQuestion, TrueFalseQuestion, ShortAnswerQuestion]


def question_from_dict(obj: Dict[str, Any]) -> Question:
    """
    Dựng lại câu hỏi từ JSON đã lưu (schema của to_dict). Không sửa dữ liệu:
    kiểm tra hợp lệ là việc của validators.
    """
    if not isinstance(obj, dict):
        raise ValueError("Câu hỏi đã lưu không phải JSON object.")
    qtype = obj.get("type")
    if qtype == QTYPE_MC:
        options = obj.get("options") or []
        if not isinstance(options, list):
            raise ValueError("MCQ: 'options' phải là danh sách.")
        return MultipleChoiceQuestion(
            question_text=obj.get("question") or "",
            options=tuple(str(o) for o in options),
            correct_answer=obj.get("correct_answer") or "",
        )
    if qtype == QTYPE_TF:
        raw = obj.get("statements") or []
        if not isinstance(raw, list) or not all(isinstance(s, dict) for s in raw):
            raise ValueError("Đúng/Sai: 'statements' phải là danh sách object.")
        statements = tuple(
            TrueFalseStatement(
                label=str(s.get("id", "")),
                text=s.get("text") or "",
                is_true=bool(s.get("is_true", False)),
            )
            for s in raw
        )
        return TrueFalseQuestion(context_text=obj.get("context") or "", statements=statements)
    if qtype == QTYPE_SHORT:
        return ShortAnswerQuestion(
            question_text=obj.get("question") or "",
            correct_answer=obj.get("correct_answer") or "",
        )
    raise ValueError(f"Không hỗ trợ dạng câu hỏi: {qtype}")

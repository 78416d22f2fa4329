from __future__ import annotations
import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from exam_importer.models import (
    MC_LETTERS,
    OPTION_PLACEHOLDER,
    STATEMENT_PLACEHOLDER,
    TF_LABELS,
    MultipleChoiceQuestion,
    Question,
    Section,
    ShortAnswerQuestion,
    TrueFalseQuestion,
    TrueFalseStatement,
)

logger = logging.getLogger(__name__)

# Thứ tự kiểm tra mỗi dòng:
#   1) tiêu đề phần (I/II/III), khớp ở bất kỳ vị trí nào trong dòng
#   2) tiêu đề phụ "1. Nhận biết", "2. Thông hiểu"... -> bỏ qua
#   3) "Câu N:" / "Câu N." -> bắt đầu câu mới
#   4) nội dung của câu đang dở (phương án A-D / ý a-d / nối tiếp)
SECTION_HEADERS: Tuple[Tuple[Section, re.Pattern], ...] = (
    (Section.MULTIPLE_CHOICE, re.compile(
        r"I\.\s*(?:CÂU\s+)?TRẮC\s+NGHIỆM\s+NHIỀU\s+(?:PHƯƠNG\s+ÁN\s+)?LỰA\s+CHỌN", re.I)),
    (Section.TRUE_FALSE, re.compile(
        r"II\.\s*(?:CÂU\s+)?TRẮC\s+NGHIỆM\s+ĐÚNG", re.I)),
    (Section.SHORT_ANSWER, re.compile(
        r"III\.\s*(?:CÂU\s+)?(?:TRẮC\s+NGHIỆM\s+)?TRẢ\s+LỜI\s+NGẮN", re.I)),
)
SUBHEADING = re.compile(r"^\d+\.\s*(Nhận biết|Thông hiểu|Vận dụng)", re.I)
QUESTION_START = re.compile(r"^(Câu\s+\d+[:.])(.*)", re.I)
OPTION_LINE = re.compile(r"^([A-D])[.)](.*)")
STATEMENT_LINE = re.compile(r"^([a-d])[.)](.*)")

# Tách phương án dính liền: "... đâu? A. x B. y" -> ["... đâu?", "A. x", "B. y"]
INLINE_OPTION_BOUNDARY = re.compile(r"\s(?=[A-D]\.)")
OPTION_LINE_BOUNDARY = re.compile(r"\s+(?=[A-D]\.)")
# Lần thử cuối khi chốt câu: cắt theo dấu "A." trần, kể cả khi không có khoảng trắng phía trước.
# Dễ nhầm với chữ viết tắt ("vitamin D.", "nhóm máu A.") nhưng vẫn giữ nguyên cách cắt này.
BARE_OPTION_MARKER = re.compile(r"([A-D]\.)")
QUESTION_LABEL = re.compile(r"^(Câu\s+\d+:[^A-D]*)", re.I)


@dataclass
class _MultipleChoiceDraft:
    question_text: str
    options: List[str] = field(default_factory=list)
    correct_answer: str = ""


@dataclass
class _TrueFalseDraft:
    context_text: str
    statements: List[TrueFalseStatement] = field(default_factory=list)


@dataclass
class _ShortAnswerDraft:
    question_text: str


_Draft = Union[_MultipleChoiceDraft, _TrueFalseDraft, _ShortAnswerDraft]


def _join(head: str, tail: str) -> str:
    return f"{head} {tail}" if head else tail


def _option_texts(fragments: List[str]) -> List[str]:
    texts = []
    for frag in fragments:
        m = OPTION_LINE.match(frag.strip())
        if m:
            texts.append(m.group(2).strip())
    return texts


def _resplit_glued_options(text: str) -> Tuple[str, List[str]]:
    """
    Tách lại toàn bộ phần câu hỏi đã gom khi chưa bắt được phương án nào
    (VD: "Câu 3: ...?A. x B.y"). Trả (stem, options); options rỗng nếu không tách được.
    """
    parts = [p for p in BARE_OPTION_MARKER.split(text) if p.strip()]
    if len(parts) <= 1:
        return text, []

    if not BARE_OPTION_MARKER.match(parts[0]):
        stem = parts[0].strip()
        start = 1
    else:
        m = QUESTION_LABEL.match(text)
        stem = m.group(1).strip() if m else text
        start = 0

    # parts = [stem, "A.", " x ", "B.", "y"] -> cặp (dấu, nội dung)
    options = [parts[i + 1].strip() for i in range(start, len(parts) - 1, 2)]
    return stem, options


def _clean_lines(raw_text: str) -> List[str]:
    text = unicodedata.normalize("NFC", raw_text or "")
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


class _ExamTextParser:
    """
    Trạng thái của một lần phân tích: phần đề hiện tại, câu đang dở, danh sách kết quả.
    Mỗi lần gọi parse_exam_text tạo một đối tượng mới.
    """

    def __init__(self) -> None:
        self.section = Section.UNKNOWN
        self.pending: Optional[_Draft] = None
        self.questions: List[Question] = []

    def feed(self, line: str) -> None:
        for section, pattern in SECTION_HEADERS:
            if pattern.search(line):
                self._finalize()
                self.section = section
                logger.debug("Chuyển sang phần %s", section.value)
                return

        if SUBHEADING.match(line):
            return

        if QUESTION_START.match(line):
            self._finalize()
            self.pending = self._start_question(line)
            return

        draft = self.pending
        if draft is None:
            # văn bản trước câu đầu tiên (tiêu đề đề, thông tin HS...)
            return
        if isinstance(draft, _MultipleChoiceDraft):
            self._continue_multiple_choice(draft, line)
        elif isinstance(draft, _TrueFalseDraft):
            self._continue_true_false(draft, line)
        else:
            draft.question_text = _join(draft.question_text, line)

    def finish(self) -> List[Question]:
        self._finalize()
        return self.questions

    # ---- bắt đầu / nối tiếp câu hỏi ----
    def _start_question(self, line: str) -> _Draft:
        if self.section == Section.TRUE_FALSE:
            return _TrueFalseDraft(context_text=line)
        if self.section == Section.SHORT_ANSWER:
            return _ShortAnswerDraft(question_text=line)

        # MCQ hoặc chưa rõ phần -> mặc định trắc nghiệm nhiều lựa chọn
        draft = _MultipleChoiceDraft(question_text=line)
        parts = INLINE_OPTION_BOUNDARY.split(line)
        if len(parts) > 1:
            draft.question_text = parts[0].strip()
            draft.options.extend(_option_texts(parts[1:]))
        return draft

    @staticmethod
    def _continue_multiple_choice(draft: _MultipleChoiceDraft, line: str) -> None:
        if OPTION_LINE.match(line):
            draft.options.extend(_option_texts(OPTION_LINE_BOUNDARY.split(line)))
            return

        if not draft.options:
            parts = INLINE_OPTION_BOUNDARY.split(line)
            if len(parts) > 1:
                draft.question_text = _join(draft.question_text, parts[0].strip())
                draft.options.extend(_option_texts(parts[1:]))
            else:
                draft.question_text = _join(draft.question_text, line)
            return

        # phương án bị xuống dòng
        draft.options[-1] = _join(draft.options[-1], line)

    @staticmethod
    def _continue_true_false(draft: _TrueFalseDraft, line: str) -> None:
        m = STATEMENT_LINE.match(line)
        if m:
            label = m.group(1)
            if any(s.label == label for s in draft.statements):
                logger.debug("Bỏ ý %s) lặp lại", label)
                return
            draft.statements.append(TrueFalseStatement(label=label, text=m.group(2).strip(), is_true=False))
        elif not draft.statements:
            draft.context_text = _join(draft.context_text, line)
        # đã có ý mà dòng không khớp -> rác định dạng, bỏ qua

    # ---- chốt câu ----
    def _finalize(self) -> None:
        draft = self.pending
        if draft is None:
            return
        if isinstance(draft, _MultipleChoiceDraft):
            question: Question = _finalize_multiple_choice(draft)
        elif isinstance(draft, _TrueFalseDraft):
            question = _finalize_true_false(draft)
        else:
            question = ShortAnswerQuestion(question_text=draft.question_text, correct_answer="")
        self.questions.append(question)
        self.pending = None
        logger.debug("Chốt câu %d (%s)", len(self.questions), question.kind)


def _finalize_multiple_choice(draft: _MultipleChoiceDraft) -> MultipleChoiceQuestion:
    question_text = draft.question_text
    options = list(draft.options)
    if not options and question_text:
        question_text, options = _resplit_glued_options(question_text)

    n = len(MC_LETTERS)
    if len(options) > n:
        logger.warning("Câu có %d phương án, chỉ giữ %d phương án đầu", len(options), n)
        options = options[:n]
    options = [o if o else OPTION_PLACEHOLDER for o in options]
    while len(options) < n:
        options.append(OPTION_PLACEHOLDER)

    # văn bản dán không có đáp án -> mặc định A
    correct = draft.correct_answer or options[0]
    return MultipleChoiceQuestion(question_text=question_text, options=tuple(options), correct_answer=correct)


def _finalize_true_false(draft: _TrueFalseDraft) -> TrueFalseQuestion:
    by_label = {s.label: s for s in draft.statements}
    statements = []
    for label in TF_LABELS:
        s = by_label.get(label)
        if s is None or not s.text:
            s = TrueFalseStatement(label=label, text=STATEMENT_PLACEHOLDER, is_true=False)
        statements.append(s)
    return TrueFalseQuestion(context_text=draft.context_text, statements=tuple(statements))


def parse_exam_text(raw_text: str) -> List[Question]:
    """
    Dựng lại danh sách câu hỏi từ văn bản dán (copy từ Word/PDF).

    - Nhận diện phần I (nhiều lựa chọn), II (đúng/sai), III (trả lời ngắn);
      chưa gặp tiêu đề phần thì coi là nhiều lựa chọn.
    - Không bao giờ ném lỗi với dữ liệu lộn xộn: thiếu phương án/ý thì điền
      OPTION_PLACEHOLDER / STATEMENT_PLACEHOLDER.
    - Không suy ra đáp án: MCQ mặc định đáp án A, ý Đúng/Sai luôn is_true=False,
      trả lời ngắn để trống đáp án. Giáo viên phải rà soát lại.

    Trả danh sách rỗng nếu không có dòng "Câu N:" nào.
    """
    parser = _ExamTextParser()
    for line in _clean_lines(raw_text):
        parser.feed(line)
    questions = parser.finish()
    logger.info("Nhận diện được %d câu hỏi", len(questions))
    return questions

"""
Tests for exam_importer.storage

Test Coverage:
- KeyValueStore: get/set/remove, invalid keys
- ExamStore: save (newest first), get, delete, clear, corrupt data
- ExamStore: drops stored entries that are not objects or lack an id
"""
import json

import pytest

from exam_importer.parser import parse_exam_text
from exam_importer.storage import EXAMS_KEY, ExamStore, KeyValueStore, StorageError


def test_key_value_roundtrip(tmp_path):
    kv = KeyValueStore(tmp_path / "store")

    assert kv.get_item("exams") is None
    kv.set_item("exams", "[1, 2]")
    assert kv.get_item("exams") == "[1, 2]"
    kv.remove_item("exams")
    assert kv.get_item("exams") is None
    # xoá khoá không tồn tại không lỗi
    kv.remove_item("exams")


@pytest.mark.parametrize("key", ["", "../evil", "a/b", "có dấu"])
def test_key_value_rejects_bad_keys(tmp_path, key):
    kv = KeyValueStore(tmp_path)

    with pytest.raises(ValueError):
        kv.get_item(key)


def test_set_item_wraps_os_errors(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    kv = KeyValueStore(blocker)  # root là file -> không tạo được thư mục

    with pytest.raises(StorageError):
        kv.set_item("exams", "[]")


def test_save_exam_newest_first(exam_store, mixed_exam_text):
    questions = parse_exam_text(mixed_exam_text)

    first = exam_store.save_exam("Đề 1", questions)
    second = exam_store.save_exam("  Đề 2  ", questions[:1])

    exams = exam_store.get_exams()
    assert [e["id"] for e in exams] == [second["id"], first["id"]]
    assert exams[1]["name"] == "Đề 1"
    assert exams[0]["name"] == "Đề 2"
    assert exams[1]["questions"] == [q.to_dict() for q in questions]
    assert first["savedAt"]


def test_save_exam_requires_name(exam_store):
    with pytest.raises(ValueError):
        exam_store.save_exam("   ", [])


def test_get_and_delete_exam(exam_store):
    questions = parse_exam_text("Câu 1: Hỏi?")
    exam = exam_store.save_exam("Đề", questions)

    assert exam_store.get_exam(exam["id"]) == exam
    exam_store.delete_exam(exam["id"])
    assert exam_store.get_exam(exam["id"]) is None
    assert exam_store.get_exams() == []


def test_clear_all(exam_store):
    exam_store.save_exam("Đề", parse_exam_text("Câu 1: Hỏi?"))

    exam_store.clear_all()

    assert exam_store.get_exams() == []


@pytest.mark.parametrize("raw", ["{không phải json", '{"a": 1}'])
def test_corrupt_data_reads_as_empty(tmp_path, raw):
    kv = KeyValueStore(tmp_path)
    kv.set_item(EXAMS_KEY, raw)

    assert ExamStore(kv).get_exams() == []


def test_non_object_entries_are_dropped(tmp_path):
    kv = KeyValueStore(tmp_path)
    kv.set_item(EXAMS_KEY, "[1, 2]")
    store = ExamStore(kv)

    assert store.get_exams() == []
    assert store.get_exam("x") is None
    store.delete_exam("x")
    assert kv.get_item(EXAMS_KEY) == "[]"


def test_entries_without_id_or_question_list_are_dropped(tmp_path):
    good = {"id": "e1", "name": "Đề", "questions": []}
    raw = [good, {"name": "thiếu id"}, {"id": 7}, {"id": "e2", "questions": "x"}, "chuỗi"]
    kv = KeyValueStore(tmp_path)
    kv.set_item(EXAMS_KEY, json.dumps(raw))

    assert ExamStore(kv).get_exams() == [good]

# /tests/test_classroom_tools.py

import random

import pytest

from teacherboard.core.exceptions import ContentNotFoundError, NoStudentsAvailableError, ValidationError
from teacherboard.services import classroom_tools_service, prompt_service, timetable_service
from teacherboard.models.timetable_model import PERIODS


def test_parse_missing_numbers():
    assert classroom_tools_service.parse_missing_numbers("3, 7,x,40, 7", total=30) == [3, 7]
    assert classroom_tools_service.parse_missing_numbers("", total=30) == []


def test_pick_never_repeats_a_student():
    rng = random.Random(42)
    picked = []
    while True:
        try:
            result = classroom_tools_service.pick_students(5, 2, already_picked=picked, rng=rng)
        except NoStudentsAvailableError:
            break
        assert not set(result["picked"]) & set(picked)
        picked.extend(result["picked"])

    assert sorted(picked) == [1, 2, 3, 4, 5]


def test_pick_more_than_remaining_returns_everyone_left():
    result = classroom_tools_service.pick_students(4, 10, already_picked=[1, 2], rng=random.Random(1))
    assert sorted(result["picked"]) == [3, 4]
    assert result["remaining"] == 0


def test_groups_exclude_absent_students_and_stay_balanced():
    result = classroom_tools_service.make_groups(10, 3, missing_numbers="2, 9", rng=random.Random(7))

    members = [n for group in result["groups"] for n in group]
    assert sorted(members) == [1, 3, 4, 5, 6, 7, 8, 10]
    assert result["excluded"] == [2, 9]
    sizes = [len(group) for group in result["groups"]]
    assert max(sizes) - min(sizes) <= 1


def test_groups_need_students_and_a_positive_count():
    with pytest.raises(NoStudentsAvailableError):
        classroom_tools_service.make_groups(2, 2, missing_numbers="1,2")
    with pytest.raises(ValueError):
        classroom_tools_service.make_groups(10, 0)


# --- Timetable ---

def test_empty_timetable_has_every_period(store):
    timetable = timetable_service.get_timetable(store, "t1")
    assert timetable["periods"] == {period: "" for period in PERIODS}
    assert timetable["updatedAt"] is None


def test_save_timetable_fills_missing_periods(store):
    saved = timetable_service.save_timetable(store, "t1", {"1교시": " 국어 ", "3교시": "수학"})

    assert saved["periods"]["1교시"] == "국어"
    assert saved["periods"]["3교시"] == "수학"
    assert saved["periods"]["2교시"] == ""
    assert saved["updatedAt"]


def test_save_timetable_validates(store):
    with pytest.raises(ValidationError):
        timetable_service.save_timetable(store, "t1", {"7교시": "체육"})
    with pytest.raises(ValidationError):
        timetable_service.save_timetable(store, "t1", {"1교시": "가" * 21})


# --- Prompts ---

def test_default_prompts_are_seeded_once(store):
    assert prompt_service.initialize_default_prompts(store, "t1") == len(prompt_service.DEFAULT_PROMPTS)
    assert prompt_service.initialize_default_prompts(store, "t1") == 0
    assert len(prompt_service.list_prompts(store, "t1")) == len(prompt_service.DEFAULT_PROMPTS)


def test_most_used_prompt_is_listed_first(store):
    first = prompt_service.create_prompt(store, "t1", "A", "내용 A", "수업 준비")
    second = prompt_service.create_prompt(store, "t1", "B", "내용 B", "수업 준비")
    prompt_service.use_prompt(store, "t1", first["id"])
    prompt_service.use_prompt(store, "t1", first["id"])
    prompt_service.use_prompt(store, "t1", second["id"])

    listed = prompt_service.list_prompts(store, "t1")

    assert [p["title"] for p in listed] == ["A", "B"]
    assert listed[0]["usage"] == 2


def test_update_and_delete_prompt(store):
    prompt = prompt_service.create_prompt(store, "t1", " 제목 ", " 내용 ", "기타")
    assert prompt["title"] == "제목"

    updated = prompt_service.update_prompt(store, "t1", prompt["id"], {"content": " 새 내용 ", "category": None})
    assert updated["content"] == "새 내용"
    assert updated["category"] == "기타"

    prompt_service.delete_prompt(store, "t1", prompt["id"])
    with pytest.raises(ContentNotFoundError):
        prompt_service.get_prompt(store, "t1", prompt["id"])

# /teacherboard/services/prompt_service.py

"""Saved AI prompts: CRUD, a usage counter, and the starter set for new teachers."""

import logging
from typing import Any, Dict, List

from ..core.exceptions import ContentNotFoundError, DocumentNotFoundError
from .document_store import SERVER_TIMESTAMP, DocumentStore, document_path, join_path

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS = [
    {"title": "오늘 배운 내용 정리", "content": "오늘 배운 내용을 정리해주세요", "category": "수업 준비"},
    {"title": "숙제 공지 작성", "content": "학생들에게 숙제를 내주는 공지를 작성해주세요", "category": "숙제 관리"},
    {"title": "내일 수업 계획", "content": "내일 수업 계획을 세워주세요", "category": "계획 수립"},
    {"title": "학부모 상담 정리", "content": "학부모 상담 내용을 정리해주세요", "category": "소통 문서"},
    {"title": "교실 규칙 생성", "content": "교실 규칙을 만들어주세요", "category": "수업 준비"},
    {"title": "평가 기준표 작성", "content": "이번 단원에 대한 평가 기준표를 작성해주세요", "category": "평가 관련"},
]


def _prompts_path(teacher_id: str) -> str:
    return join_path("users", teacher_id, "prompts")


def _prompt_path(teacher_id: str, prompt_id: str) -> str:
    try:
        return document_path(_prompts_path(teacher_id), prompt_id)
    except ValueError:
        raise ContentNotFoundError("Prompt", prompt_id)


def list_prompts(store: DocumentStore, teacher_id: str) -> List[Dict[str, Any]]:
    """Most used first; ties go to the most recently touched."""
    return store.query(_prompts_path(teacher_id), order_by=[("usage", True), ("updatedAt", True)])


def get_prompt(store: DocumentStore, teacher_id: str, prompt_id: str) -> Dict[str, Any]:
    prompt = store.get(_prompt_path(teacher_id, prompt_id))
    if prompt is None:
        raise ContentNotFoundError("Prompt", prompt_id)
    return prompt


def create_prompt(store: DocumentStore, teacher_id: str, title: str, content: str, category: str) -> Dict[str, Any]:
    prompt_id = store.add(_prompts_path(teacher_id), {
        "title": title.strip(),
        "content": content.strip(),
        "category": category,
        "usage": 0,
        "createdAt": SERVER_TIMESTAMP,
        "updatedAt": SERVER_TIMESTAMP,
    })
    return get_prompt(store, teacher_id, prompt_id)


def update_prompt(store: DocumentStore, teacher_id: str, prompt_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    data = {k: v.strip() if isinstance(v, str) else v for k, v in patch.items() if v is not None}
    data["updatedAt"] = SERVER_TIMESTAMP
    try:
        store.update(_prompt_path(teacher_id, prompt_id), data)
    except DocumentNotFoundError:
        raise ContentNotFoundError("Prompt", prompt_id)
    return get_prompt(store, teacher_id, prompt_id)


def use_prompt(store: DocumentStore, teacher_id: str, prompt_id: str) -> Dict[str, Any]:
    prompt = get_prompt(store, teacher_id, prompt_id)
    store.update(_prompt_path(teacher_id, prompt_id), {
        "usage": int(prompt.get("usage") or 0) + 1,
        "updatedAt": SERVER_TIMESTAMP,
    })
    return get_prompt(store, teacher_id, prompt_id)


def delete_prompt(store: DocumentStore, teacher_id: str, prompt_id: str) -> None:
    if not store.delete(_prompt_path(teacher_id, prompt_id)):
        raise ContentNotFoundError("Prompt", prompt_id)


def initialize_default_prompts(store: DocumentStore, teacher_id: str) -> int:
    """Seeds the starter prompts for a teacher who has none yet. Returns how many were added."""
    if store.query(_prompts_path(teacher_id), limit=1):
        return 0
    with store.transaction() as batch:
        for prompt in DEFAULT_PROMPTS:
            batch.add(_prompts_path(teacher_id), {
                **prompt,
                "usage": 0,
                "createdAt": SERVER_TIMESTAMP,
                "updatedAt": SERVER_TIMESTAMP,
            })
    logger.info("Seeded %d default prompts for teacher %s", len(DEFAULT_PROMPTS), teacher_id)
    return len(DEFAULT_PROMPTS)

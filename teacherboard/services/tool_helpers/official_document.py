# /teacherboard/services/tool_helpers/official_document.py

"""
Template-based official document (공문서) generator. No AI involved: the
layout follows the standard Korean public-document structure of a header,
a numbered body and a closing.
"""

import random
from datetime import date
from typing import Callable, List, Optional

DOC_TYPES = ["공문", "보고서", "계획서", "요청서", "안내문", "협조요청"]

DEFAULT_SENDER = "학교장"
DEFAULT_DEPARTMENT = "교무부"
DEFAULT_PURPOSE = "교육활동 지원 및 업무 효율성 제고를 위함"
DEFAULT_DEADLINE = "공문 시행일로부터 7일 이내"

# Korean sub-item markers: 가, 나, 다, ...
SUB_ITEM_MARKERS = ["가", "나", "다", "라", "마", "바", "사", "아", "자", "차", "카", "타", "파", "하"]


def format_korean_date(value: date) -> str:
    """2024.12.25. style, no zero padding."""
    return f"{value.year}.{value.month}.{value.day}."


def make_document_number(department: str, rand: Callable[[int, int], int] = random.randint) -> str:
    return f"{department}-{rand(0, 9999):04d}"


def _sub_items(lines: List[str]) -> List[str]:
    items = []
    for index, line in enumerate(lines):
        marker = SUB_ITEM_MARKERS[index] if index < len(SUB_ITEM_MARKERS) else str(index + 1)
        items.append(f"  {marker}. {line}")
    return items


def build_official_document(
    doc_type: str,
    title: str,
    recipient: str,
    main_content: str,
    sender: Optional[str] = None,
    department: Optional[str] = None,
    purpose: Optional[str] = None,
    deadline: Optional[str] = None,
    attachment: Optional[str] = None,
    today: Optional[date] = None,
    rand: Callable[[int, int], int] = random.randint,
) -> str:
    if doc_type not in DOC_TYPES:
        raise ValueError(f"Unknown document type '{doc_type}'. Expected one of: {', '.join(DOC_TYPES)}")
    for label, value in (("title", title), ("recipient", recipient), ("mainContent", main_content)):
        if not value or not value.strip():
            raise ValueError(f"'{label}' is required.")

    today = today or date.today()
    formatted_date = format_korean_date(today)
    sender = sender or DEFAULT_SENDER
    department = department or DEFAULT_DEPARTMENT
    content_lines = [line.strip() for line in main_content.splitlines() if line.strip()]

    lines = [
        doc_type,
        "",
        f"문서번호: {make_document_number(department, rand)}",
        f"시행일자: {formatted_date}",
        "",
        f"수신: {recipient.strip()}",
        f"발신: {sender}",
        "",
        f"제목: {title.strip()}",
        "",
        "1. 목적",
        f"  {purpose or DEFAULT_PURPOSE}",
        "",
        "2. 주요 내용",
        *_sub_items(content_lines),
        "",
        "3. 추진 일정",
        f"  가. 추진 기한: {deadline or DEFAULT_DEADLINE}",
        "  나. 세부 일정은 별도 협의",
        "",
        "4. 기대 효과",
        "  가. 교육활동의 원활한 진행",
        "  나. 업무 효율성 향상",
        "  다. 교육 목표 달성 기여",
        "",
        f"붙임: {attachment or '없음'}",
        "",
        "끝.",
        "",
        formatted_date,
        "",
        sender,
        "(직인생략)",
        "",
        f"담당자: {department}",
    ]
    return "\n".join(lines)

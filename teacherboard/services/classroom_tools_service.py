# /teacherboard/services/classroom_tools_service.py

"""
The random student picker and the group maker. Students are identified by
their class number, 1..total. Both tools take a `random.Random` so tests can
seed them.
"""

import random
from typing import Dict, Iterable, List, Optional

from ..core.exceptions import NoStudentsAvailableError

_system_random = random.SystemRandom()


def parse_missing_numbers(raw: str, total: int) -> List[int]:
    """'3, 7,x,40' with total=30 -> [3, 7]. Non-numbers and out-of-range entries are ignored."""
    missing = set()
    for part in (raw or "").split(","):
        part = part.strip()
        if part.isdigit() and 1 <= int(part) <= total:
            missing.add(int(part))
    return sorted(missing)


def pick_students(total: int, count: int, already_picked: Iterable[int] = (), rng: Optional[random.Random] = None) -> Dict:
    """
    Draws `count` students without replacement from those not picked yet.
    Asking for more than are left returns everyone who is left.
    """
    rng = rng or _system_random
    picked = set(already_picked)
    pool = [n for n in range(1, total + 1) if n not in picked]
    if not pool:
        raise NoStudentsAvailableError("모든 학생이 이미 뽑혔습니다.")

    chosen = rng.sample(pool, min(count, len(pool)))
    return {"picked": chosen, "remaining": len(pool) - len(chosen)}


def make_groups(total: int, group_count: int, missing_numbers: str = "", rng: Optional[random.Random] = None) -> Dict:
    """Shuffles the students who are present and deals them round-robin into `group_count` groups."""
    rng = rng or _system_random
    if group_count < 1:
        raise ValueError("Group count must be at least 1.")

    excluded = parse_missing_numbers(missing_numbers, total)
    students = [n for n in range(1, total + 1) if n not in excluded]
    if not students:
        raise NoStudentsAvailableError("모둠을 만들 학생이 없습니다.")

    rng.shuffle(students)
    groups: List[List[int]] = [[] for _ in range(group_count)]
    for index, student in enumerate(students):
        groups[index % group_count].append(student)
    return {"groups": groups, "excluded": excluded}

"""
Data model shared by the resolver, the grade engine, the attendance
projector, persistence and the Streamlit views.

Static data (schedule, transcript) is frozen. User data (assignments,
grades, chat messages) is decoded from stored JSON through ``from_dict``,
which raises ``ValueError``/``TypeError`` on malformed rows so that loaders
can skip them.
"""

from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


STATUS_ACTIVE = "active"
STATUS_UPCOMING = "upcoming"
STATUS_FREE = "free"

ASSIGNMENT_PENDING = "pending"
ASSIGNMENT_COMPLETED = "completed"

ASSIGNMENT_TYPES = ["Assignment", "Exam", "Project", "Quiz"]


def _require_str(row: Dict[str, Any], key: str) -> str:
    val = row.get(key)
    if not isinstance(val, str):
        raise TypeError(f"{key!r} must be a string, got {type(val).__name__}")
    return val


def _require_number(row: Dict[str, Any], key: str) -> float:
    val = row.get(key)
    # bool is an int subclass; a stored true/false is not a score
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise TypeError(f"{key!r} must be a number, got {type(val).__name__}")
    return float(val)


def _require_dict(row: Any) -> Dict[str, Any]:
    if not isinstance(row, dict):
        raise TypeError(f"expected an object, got {type(row).__name__}")
    return row


@dataclass(frozen=True)
class ScheduleItem:
    id: str
    day: int  # 0 = Sunday ... 6 = Saturday
    day_name: str
    start_time: str  # "HH:MM", 24h, zero padded
    end_time: str
    code: str
    title: str
    room: str
    faculty: str
    color: str
    credits: float


@dataclass(frozen=True)
class TranscriptCourse:
    code: str
    title: str
    credits: float
    grade: str
    gp: float
    tgp: float


@dataclass(frozen=True)
class CurrentStatus:
    type: str
    item: Optional[ScheduleItem] = None
    minutes_until: Optional[int] = None


@dataclass
class Assignment:
    id: str
    title: str
    course_code: str
    due_date: str
    type: str = "Assignment"
    status: str = ASSIGNMENT_PENDING

    @property
    def is_completed(self) -> bool:
        return self.status == ASSIGNMENT_COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, row: Any) -> "Assignment":
        row = _require_dict(row)
        status = row.get("status", ASSIGNMENT_PENDING)
        if status not in (ASSIGNMENT_PENDING, ASSIGNMENT_COMPLETED):
            raise ValueError(f"Unknown assignment status: {status!r}")
        kind = row.get("type") or "Assignment"
        if kind not in ASSIGNMENT_TYPES:
            raise ValueError(f"Unknown assignment type: {kind!r}")
        due = _require_str(row, "due_date").strip()
        # validates the format; the stored string is kept as-is
        datetime.date.fromisoformat(due)
        return cls(
            id=_require_str(row, "id"),
            title=_require_str(row, "title"),
            course_code=_require_str(row, "course_code"),
            due_date=due,
            type=kind,
            status=status,
        )


@dataclass
class Grade:
    id: str
    course_code: str
    title: str
    score: float
    weight: float
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, row: Any) -> "Grade":
        row = _require_dict(row)
        return cls(
            id=_require_str(row, "id"),
            course_code=_require_str(row, "course_code"),
            title=_require_str(row, "title"),
            score=_require_number(row, "score"),
            weight=_require_number(row, "weight"),
            type=_require_str(row, "type"),
        )


@dataclass
class ChatMessage:
    id: str
    role: str
    content: str
    image: Optional[str] = None
    timestamp: datetime.datetime = field(default_factory=datetime.datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "image": self.image,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, row: Any) -> "ChatMessage":
        row = _require_dict(row)
        role = _require_str(row, "role")
        if role not in ("user", "assistant"):
            raise ValueError(f"Unknown chat role: {role!r}")
        image = row.get("image")
        if image is not None and not isinstance(image, str):
            raise TypeError("'image' must be a data URL string")
        return cls(
            id=_require_str(row, "id"),
            role=role,
            content=_require_str(row, "content"),
            image=image or None,
            timestamp=datetime.datetime.fromisoformat(_require_str(row, "timestamp")),
        )

"""
Application state: everything the dashboard remembers between runs.

Loaded from the key-value store once per session and written back, key by
key, after every mutation.
"""

from __future__ import annotations

import datetime
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from studyhub import attendance as att
from studyhub.constants import (
    CHAT_FALLBACK_TEMPLATE,
    DEFAULT_PERSONAL_NOTE_TEMPLATE,
    KEY_ASSIGNMENTS,
    KEY_ATTENDANCE,
    KEY_CHAT_HISTORY,
    KEY_DARK_MODE,
    KEY_GRADES,
    KEY_PERSONAL_NOTE,
)
from studyhub.grades import assessment_max
from studyhub.models import (
    ASSIGNMENT_COMPLETED,
    ASSIGNMENT_PENDING,
    ASSIGNMENT_TYPES,
    Assignment,
    ChatMessage,
    Grade,
)
from studyhub.storage import KeyValueStore, load_json, save_json

logger = logging.getLogger(__name__)

ChatSender = Callable[[str, Optional[str]], str]


def generate_id() -> str:
    return uuid.uuid4().hex[:12]


# -------------------------------
# Decoders (bad rows are dropped, never raised)
# -------------------------------

def _decode_rows(raw: Any, decoder: Callable[[Any], Any], key: str) -> List[Any]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Stored %r is not a list; starting empty", key)
        return []
    out = []
    for row in raw:
        try:
            out.append(decoder(row))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping malformed %s row: %s", key, e)
    return out


def decode_attendance(raw: Any) -> Dict[str, bool]:
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Stored attendance is not an object; starting empty")
        return {}
    return {str(k): v for k, v in raw.items() if isinstance(v, bool)}


@dataclass
class AppState:
    store: KeyValueStore
    student_name: str = "Ishana"
    assignments: List[Assignment] = field(default_factory=list)
    grades: List[Grade] = field(default_factory=list)
    attendance: Dict[str, bool] = field(default_factory=dict)
    chat_history: List[ChatMessage] = field(default_factory=list)
    dark_mode: bool = False
    personal_note: str = ""
    save_error: Optional[str] = None

    @classmethod
    def load(cls, store: KeyValueStore, student_name: str = "Ishana") -> "AppState":
        note = load_json(store, KEY_PERSONAL_NOTE, None)
        if not isinstance(note, str):
            note = None
        return cls(
            store=store,
            student_name=student_name,
            assignments=_decode_rows(load_json(store, KEY_ASSIGNMENTS, []), Assignment.from_dict, KEY_ASSIGNMENTS),
            grades=_decode_rows(load_json(store, KEY_GRADES, []), Grade.from_dict, KEY_GRADES),
            attendance=decode_attendance(load_json(store, KEY_ATTENDANCE, {})),
            chat_history=_decode_rows(load_json(store, KEY_CHAT_HISTORY, []), ChatMessage.from_dict, KEY_CHAT_HISTORY),
            dark_mode=load_json(store, KEY_DARK_MODE, False) is True,
            personal_note=note if note else DEFAULT_PERSONAL_NOTE_TEMPLATE.format(name=student_name),
        )

    def _persist(self, key: str, value: Any) -> None:
        try:
            save_json(self.store, key, value)
        except OSError as e:
            logger.error("Saving %r failed: %s", key, e)
            self.save_error = f"Error saving data: {e}"

    # -------------------------------
    # Assignments
    # -------------------------------

    def add_assignment(self, title: str, course_code: str, due_date: datetime.date, type_: str = "Assignment") -> Assignment:
        title = (title or "").strip()
        if not title:
            raise ValueError("Assignment title is required.")
        if type_ not in ASSIGNMENT_TYPES:
            raise ValueError(f"Unknown assignment type: {type_!r}")
        a = Assignment(
            id=generate_id(),
            title=title,
            course_code=course_code,
            due_date=due_date.isoformat(),
            type=type_,
        )
        self.assignments.append(a)
        self._persist(KEY_ASSIGNMENTS, [x.to_dict() for x in self.assignments])
        return a

    def toggle_assignment(self, assignment_id: str) -> None:
        for a in self.assignments:
            if a.id == assignment_id:
                a.status = ASSIGNMENT_PENDING if a.is_completed else ASSIGNMENT_COMPLETED
                break
        self._persist(KEY_ASSIGNMENTS, [x.to_dict() for x in self.assignments])

    def delete_assignment(self, assignment_id: str) -> None:
        self.assignments = [a for a in self.assignments if a.id != assignment_id]
        self._persist(KEY_ASSIGNMENTS, [x.to_dict() for x in self.assignments])

    def assignments_by_due(self) -> List[Assignment]:
        return sorted(self.assignments, key=lambda a: a.due_date)

    def next_pending_assignment(self) -> Optional[Assignment]:
        pending = [a for a in self.assignments_by_due() if not a.is_completed]
        return pending[0] if pending else None

    # -------------------------------
    # Grades
    # -------------------------------

    def add_grade(self, course_code: str, title: str, score: float, type_: str) -> Grade:
        g = Grade(
            id=generate_id(),
            course_code=course_code,
            title=(title or "").strip() or type_,
            score=float(score),
            weight=assessment_max(type_),
            type=type_,
        )
        self.grades.append(g)
        self._persist(KEY_GRADES, [x.to_dict() for x in self.grades])
        return g

    def delete_grade(self, grade_id: str) -> None:
        self.grades = [g for g in self.grades if g.id != grade_id]
        self._persist(KEY_GRADES, [x.to_dict() for x in self.grades])

    # -------------------------------
    # Attendance
    # -------------------------------

    def mark_attendance(self, code: str, present: bool, day: datetime.date) -> None:
        self.attendance = att.mark_attendance(self.attendance, code, present, day)
        self._persist(KEY_ATTENDANCE, self.attendance)

    def adjust_attendance(self, code: str, increment: bool, is_present: bool, now_ms: Optional[int] = None) -> bool:
        """Returns False when a decrement found nothing to remove."""
        before = len(self.attendance)
        self.attendance = att.adjust_attendance_manual(self.attendance, code, increment, is_present, now_ms)
        if len(self.attendance) == before:
            return False
        self._persist(KEY_ATTENDANCE, self.attendance)
        return True

    # -------------------------------
    # Preferences
    # -------------------------------

    def set_dark_mode(self, enabled: bool) -> None:
        self.dark_mode = bool(enabled)
        self._persist(KEY_DARK_MODE, self.dark_mode)

    def set_personal_note(self, text: str) -> None:
        if not (text or "").strip():
            text = DEFAULT_PERSONAL_NOTE_TEMPLATE.format(name=self.student_name)
        self.personal_note = text
        self._persist(KEY_PERSONAL_NOTE, self.personal_note)

    # -------------------------------
    # Chat
    # -------------------------------

    def _append_chat(self, msg: ChatMessage) -> None:
        self.chat_history.append(msg)
        self._persist(KEY_CHAT_HISTORY, [m.to_dict() for m in self.chat_history])

    def send_chat_message(self, query: str, image: Optional[str], sender: ChatSender) -> Optional[ChatMessage]:
        """
        Record the user's message, ask the model, record the reply.
        Any failure of `sender` becomes a friendly assistant message.
        """
        query = (query or "").strip()
        if not query and not image:
            return None

        stamp = int(time.time() * 1000)
        self._append_chat(ChatMessage(id=str(stamp), role="user", content=query, image=image or None))

        try:
            reply = sender(query, image or None)
        except Exception:
            logger.exception("Chat request failed")
            reply = CHAT_FALLBACK_TEMPLATE.format(name=self.student_name)

        answer = ChatMessage(id=str(stamp + 10), role="assistant", content=reply)
        self._append_chat(answer)
        return answer

    def clear_chat(self) -> None:
        self.chat_history = []
        try:
            self.store.remove(KEY_CHAT_HISTORY)
        except OSError as e:
            logger.error("Clearing chat history failed: %s", e)
            self.save_error = f"Error saving data: {e}"

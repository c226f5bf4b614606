from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from studyhub.constants import (
    ASSESSMENT_MAX,
    BASELINE_GPA,
    DEFAULT_CREDITS,
    FAILING_LETTER,
    FAILING_POINTS,
    GRADE_BANDS,
    PAST_TRANSCRIPT,
    SCHEDULE,
)
from studyhub.models import Grade, ScheduleItem, TranscriptCourse
from studyhub.schedule import find_course


# -------------------------------
# Marks -> letter / grade point
# -------------------------------

def _band_for(marks: float) -> Tuple[str, float]:
    for lower, letter, points in GRADE_BANDS:
        if marks >= lower:
            return letter, points
    return FAILING_LETTER, FAILING_POINTS


def grade_point_from_marks(marks: float) -> float:
    return _band_for(float(marks))[1]


def letter_from_marks(marks: float) -> str:
    return _band_for(float(marks))[0]


def assessment_max(assessment_type: str) -> float:
    try:
        return ASSESSMENT_MAX[assessment_type]
    except KeyError:
        raise ValueError(f"Unknown assessment type: {assessment_type!r}") from None


# -------------------------------
# Current term
# -------------------------------

def course_credits(code: str, schedule: Sequence[ScheduleItem] = SCHEDULE) -> float:
    item = find_course(code, schedule)
    # a zero-credit schedule entry also falls back to the default
    return float(item.credits) if item is not None and item.credits else DEFAULT_CREDITS


def grades_by_course(grades: Iterable[Grade]) -> Dict[str, List[Grade]]:
    out: Dict[str, List[Grade]] = {}
    for g in grades:
        out.setdefault(g.course_code, []).append(g)
    return out


def course_total(grades: Iterable[Grade]) -> float:
    # assessments are summed, not averaged: 30 + 30 + 40 = 100
    return sum(float(g.score) for g in grades)


def course_summaries(grades: Iterable[Grade]) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for code, course_grades in grades_by_course(grades).items():
        total = course_total(course_grades)
        rows.append({
            "code": code,
            "total": total,
            "letter": letter_from_marks(total),
            "gp": grade_point_from_marks(total),
            "grades": course_grades,
        })
    return rows


# -------------------------------
# Transcript & cumulative GPA
# -------------------------------

def transcript_totals(transcript: Sequence[TranscriptCourse] = PAST_TRANSCRIPT) -> Tuple[float, float]:
    credits = sum(float(c.credits) for c in transcript)
    tgp = sum(float(c.tgp) for c in transcript)
    return credits, tgp


def lifetime_cgpa(transcript: Sequence[TranscriptCourse] = PAST_TRANSCRIPT) -> str:
    credits, tgp = transcript_totals(transcript)
    return f"{tgp / (credits or 1):.3f}"


def compute_cumulative_gpa(
    grades: Iterable[Grade],
    transcript: Sequence[TranscriptCourse] = PAST_TRANSCRIPT,
    schedule: Sequence[ScheduleItem] = SCHEDULE,
) -> str:
    past_credits, past_tgp = transcript_totals(transcript)

    current_tgp = 0.0
    current_credits = 0.0
    for code, course_grades in grades_by_course(grades).items():
        credits = course_credits(code, schedule)
        gp = grade_point_from_marks(course_total(course_grades))
        current_tgp += gp * credits
        current_credits += credits

    total_credits = past_credits + current_credits
    if total_credits == 0:
        return BASELINE_GPA

    return f"{(past_tgp + current_tgp) / total_credits:.3f}"


def transcript_table(transcript: Sequence[TranscriptCourse] = PAST_TRANSCRIPT) -> pd.DataFrame:
    rows = [
        {
            "#": idx + 1,
            "Course Code": c.code,
            "Course Title": c.title,
            "Cr. Hour": round(float(c.credits), 1),
            "Grade": c.grade,
            "GP": round(float(c.gp), 2),
            "TGP": round(float(c.tgp), 2),
        }
        for idx, c in enumerate(transcript)
    ]
    return pd.DataFrame(rows, columns=["#", "Course Code", "Course Title", "Cr. Hour", "Grade", "GP", "TGP"])

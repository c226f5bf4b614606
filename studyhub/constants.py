from typing import Dict, List, Tuple

from studyhub.models import ScheduleItem, TranscriptCourse


# -------------------------------
# Weekly schedule (day 0 = Sunday)
# -------------------------------

SCHEDULE: Tuple[ScheduleItem, ...] = (
    ScheduleItem("1", 0, "Sunday", "11:00", "12:30", "MKT 2127", "Principles of Marketing", "006 (MB)", "SKG 2", "blue", 3.0),
    ScheduleItem("2", 0, "Sunday", "13:00", "14:30", "GED 1117", "History of Bangladesh", "217 (MB)", "GED 2 DMA", "green", 3.0),
    ScheduleItem("3", 0, "Sunday", "16:00", "17:30", "BIS 2122", "Computer Applications", "501 (MB)", "MZT 1", "purple", 3.0),

    ScheduleItem("4", 1, "Monday", "11:00", "12:30", "MAT 1110", "Basic Math", "501 (MB)", "MSB 2", "orange", 3.0),

    ScheduleItem("5", 2, "Tuesday", "11:00", "12:30", "MKT 2127", "Principles of Marketing", "006 (MB)", "SKG 2", "blue", 3.0),
    ScheduleItem("6", 2, "Tuesday", "13:00", "14:30", "GED 1117", "History of Bangladesh", "217 (MB)", "GED 2 DMA", "green", 3.0),
    ScheduleItem("7", 2, "Tuesday", "16:00", "17:30", "BIS 2122", "Computer Applications", "501 (MB)", "MZT 1", "purple", 3.0),

    ScheduleItem("8", 3, "Wednesday", "11:00", "12:30", "MAT 1110", "Basic Math", "501 (MB)", "MSB 2", "orange", 3.0),
)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Streamlit has no utility classes, so colors map straight to hex values
COLOR_MAP: Dict[str, str] = {
    "blue": "#f43f5e",
    "green": "#ec4899",
    "purple": "#d946ef",
    "orange": "#f97316",
    "red": "#ef4444",
}


# -------------------------------
# Past semesters
# -------------------------------

PAST_TRANSCRIPT: Tuple[TranscriptCourse, ...] = (
    TranscriptCourse("ACT 2124", "Financial Accounting-I", 3.0, "A", 3.75, 11.25),
    TranscriptCourse("BBA 2121", "Introduction to Business", 3.0, "A+", 4.0, 12.0),
    TranscriptCourse("BUS 2123", "Business Communication", 3.0, "A", 3.75, 11.25),
    TranscriptCourse("ENG 1100", "English Language-I : Sentence and their Elements", 0.0, "B+", 3.25, 0.0),
    TranscriptCourse("ENG 1111", "Business English I (Listening and Speaking)", 3.0, "A-", 3.5, 10.5),
    TranscriptCourse("ENG 1113", "Business English II (Reading and Writing)", 3.0, "A-", 3.5, 10.5),
    TranscriptCourse("GED 1213", "Health & Environment", 3.0, "A", 3.75, 11.25),
    TranscriptCourse("MGT 2125", "Principles of Management", 3.0, "A+", 4.0, 12.0),
)


# -------------------------------
# Grading rules
# -------------------------------

# (inclusive lower bound, letter, grade point), highest band first
GRADE_BANDS: List[Tuple[float, str, float]] = [
    (80.0, "A+", 4.00),
    (75.0, "A", 3.75),
    (70.0, "A-", 3.50),
    (65.0, "B+", 3.25),
    (60.0, "B", 3.00),
    (55.0, "B-", 2.75),
    (50.0, "C+", 2.50),
    (45.0, "C", 2.25),
    (40.0, "D", 2.00),
]
FAILING_LETTER = "F"
FAILING_POINTS = 0.0

ASSESSMENT_MAX: Dict[str, float] = {
    "Continuous": 30.0,
    "Mid-term": 30.0,
    "Final": 40.0,
}

DEFAULT_CREDITS = 3.0
BASELINE_GPA = "3.750"


# -------------------------------
# Attendance rules
# -------------------------------

ATTENDANCE_THRESHOLD = 0.8
SKIP_MARGIN_CAP = 10
MANUAL_MARKER = "MANUAL"


# -------------------------------
# Storage keys
# -------------------------------

KEY_ASSIGNMENTS = "assignments"
KEY_GRADES = "grades"
KEY_ATTENDANCE = "attendance"
KEY_CHAT_HISTORY = "chatHistory"
KEY_DARK_MODE = "darkMode"
KEY_PERSONAL_NOTE = "personalNote"


# -------------------------------
# Assistant persona & canned replies
# -------------------------------

PERSONA_TEMPLATE = (
    "You are the 'Academic Concierge', a warm, sophisticated, and brilliant mentor for {name}, "
    "a {program} student.\n"
    "Your tone is premium, encouraging, and deeply knowledgeable about business topics "
    "(Marketing, Finance, Management, BIS).\n"
    "When {name} asks questions:\n"
    "1. Be concise but insightful.\n"
    "2. Use business terminology correctly but explain it simply if they're stuck.\n"
    "3. If a photo is uploaded, analyze the business context or math problem immediately.\n"
    "4. Always end with a personalized, high-energy encouragement like "
    "'Your potential is limitless, {name}!' or 'Keep building your empire!'"
)

STUDY_TIPS_TEMPLATE = (
    'Provide 3 very sweet, encouraging and high-impact study tips for the {program} course "{subject}".\n'
    "Focus on professional growth and academic excellence.\n"
    "The tone should be supportive, professional yet warm.\n"
    "Format as a clean markdown list."
)

EMPTY_REPLY_TEXT = "I'm having a little trouble, but you're smart enough to solve this! Try asking again."
CHAT_FALLBACK_TEMPLATE = "{name}, I hit a glitch. Try again! 💖"
TIPS_EMPTY_TEXT = "I couldn't generate tips at this moment. You're still going to do great!"
TIPS_FALLBACK_TEXT = "The AI advisor is taking a quick break. Believe in yourself!"

DEFAULT_PERSONAL_NOTE_TEMPLATE = "You're doing amazing, {name}! Keep shining! 💖"

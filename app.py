import datetime
import logging
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from studyhub.attendance import (
    course_attendance_details,
    date_window,
    is_low,
    safe_skip_margin,
    total_attendance_stats,
)
from studyhub.chat import get_study_tips, send_chat, to_data_url
from studyhub.config import Settings, load_settings
from studyhub.constants import ASSESSMENT_MAX, COLOR_MAP, DAY_NAMES
from studyhub.grades import (
    compute_cumulative_gpa,
    course_summaries,
    lifetime_cgpa,
    transcript_table,
    transcript_totals,
)
from studyhub.logging_utils import configure_logging
from studyhub.models import ASSIGNMENT_TYPES, STATUS_ACTIVE, STATUS_UPCOMING
from studyhub.schedule import (
    classes_on,
    course_codes,
    day_of_week,
    format_time,
    greeting,
    minute_of_day,
    next_class_after,
    resolve_status_at,
)
from studyhub.state import AppState
from studyhub.storage import KeyValueStore

logger = logging.getLogger("studyhub.app")


# -------------------------------
# Session state
# -------------------------------

def init_app_state() -> Settings:
    if "settings" not in st.session_state:
        settings = load_settings()
        configure_logging(settings.log_level, settings.log_file)
        st.session_state.settings = settings
        logger.info("Loading dashboard data from %s", settings.data_file)
        st.session_state.app = AppState.load(KeyValueStore(settings.data_file), settings.student_name)

    st.session_state.setdefault("attendance_date", datetime.date.today())
    st.session_state.setdefault("uploader_nonce", 0)
    return st.session_state.settings


def get_state() -> AppState:
    return st.session_state.app


def notify(message: str, icon: str = "💖") -> None:
    try:
        st.toast(message, icon=icon)
    except Exception:
        pass


def report_save_errors(app: AppState) -> None:
    if app.save_error:
        st.error(app.save_error)
        app.save_error = None


def apply_theme(dark: bool) -> None:
    if not dark:
        return
    st.markdown(
        """
        <style>
        .stApp { background-color: #1A0B0E; color: #fdf2f8; }
        </style>
        """,
        unsafe_allow_html=True,
    )


# -------------------------------
# UI: Home
# -------------------------------

def status_card(app: AppState) -> None:
    now = datetime.datetime.now()
    day = day_of_week(now)
    minute = minute_of_day(now)

    status = resolve_status_at(day, minute)
    nxt = next_class_after(status, day, minute)

    st.caption(now.strftime("%I:%M %p").lstrip("0"))
    st.markdown("**Next engagement**")

    if status.type == STATUS_ACTIVE and status.item is not None:
        st.subheader(status.item.title)
        st.write(f"In Room {status.item.room} Now")
    elif status.type == STATUS_UPCOMING and status.item is not None:
        st.subheader(status.item.title)
        st.write(
            f"Starts in {status.minutes_until} min · "
            f"{format_time(status.item.start_time)} · Room {status.item.room}"
        )
    elif nxt is not None:
        st.subheader(nxt.title)
        st.write(f"{DAY_NAMES[nxt.day]} {format_time(nxt.start_time)} · Room {nxt.room}")
    else:
        st.subheader("No more classes today!")
        st.write(f"Time for self-care, {app.student_name}.")

    if status.item is not None and nxt is not None:
        st.caption(f"After that: {nxt.code} · {DAY_NAMES[nxt.day]} {format_time(nxt.start_time)}")


def home_view(app: AppState, settings: Settings):
    K = "home"

    st.header(greeting(app.student_name, datetime.datetime.now().hour))
    st.caption(f"Ready to rule {settings.program} today?")

    left, right = st.columns([2, 1])

    with left:
        with st.container(border=True):
            # the single periodic refresh of the dashboard
            st.fragment(run_every=settings.refresh_seconds)(status_card)(app)

        with st.container(border=True):
            st.markdown("**Next deadline**")
            nxt = app.next_pending_assignment()
            if nxt is None:
                st.subheader("All clear for now!")
                st.write("No urgent tasks pending.")
            else:
                st.subheader(nxt.title)
                st.write(f"{nxt.course_code} · Due on {nxt.due_date}")

    with right:
        with st.container(border=True):
            st.markdown(f"**{app.student_name}'s Vision**")
            st.markdown(f"_\"{app.personal_note}\"_")
            with st.expander("Update vision"):
                note = st.text_area("Daily affirmation", value=app.personal_note, key=f"{K}_note")
                if st.button("Save affirmation", key=f"{K}_note_save"):
                    app.set_personal_note(note)
                    notify("Vision updated.")
                    st.rerun()

        with st.container(border=True):
            gpa = compute_cumulative_gpa(app.grades)
            st.metric("Estimated CGPA", gpa)
            st.progress(min(1.0, float(gpa) / 4.0))


# -------------------------------
# UI: Academic (schedule, attendance log, goals)
# -------------------------------

def academic_view(app: AppState):
    K = "academic"

    stats = total_attendance_stats(app.attendance)
    c1, c2, c3 = st.columns(3)
    c1.metric("Total Present", stats["present"])
    c2.metric("Total Absent", stats["absent"])
    c3.metric("Logged Count", stats["total"])

    st.write("---")

    st.subheader("Daily Attendance")
    today = datetime.date.today()
    window = date_window(today)
    picked = st.select_slider(
        "Date",
        options=window,
        value=st.session_state.attendance_date if st.session_state.attendance_date in window else today,
        format_func=lambda d: d.strftime("%a %d %b"),
        key=f"{K}_date",
    )
    st.session_state.attendance_date = picked

    # Sunday = 0, same convention as the schedule
    day_classes = classes_on(picked.isoweekday() % 7)
    if not day_classes:
        st.caption("No classes today")
    for item in day_classes:
        key = f"{item.code}-{picked.isoformat()}"
        recorded = app.attendance.get(key)
        color = COLOR_MAP.get(item.color, "#f43f5e")

        cols = st.columns([4, 1, 1])
        cols[0].markdown(
            f"<span style='color:{color}'>●</span> **{item.code}** {item.title} · "
            f"{format_time(item.start_time)} · Room {item.room}",
            unsafe_allow_html=True,
        )
        present_label = "✅ Present" if recorded is True else "Present"
        absent_label = "❌ Absent" if recorded is False else "Absent"
        if cols[1].button(present_label, key=f"{K}_p_{key}"):
            app.mark_attendance(item.code, True, picked)
            notify(f"Logged Present for {item.code}" if recorded is not True else f"Cleared attendance for {item.code}")
            st.rerun()
        if cols[2].button(absent_label, key=f"{K}_a_{key}"):
            app.mark_attendance(item.code, False, picked)
            notify(f"Logged Absent for {item.code}" if recorded is not False else f"Cleared attendance for {item.code}")
            st.rerun()

    st.write("---")

    st.subheader("Challenge Vault")
    with st.expander("➕ New goal"):
        with st.form(key=f"{K}_new_goal", clear_on_submit=True):
            title = st.text_input("Task title")
            course = st.selectbox("Course", course_codes())
            due = st.date_input("Due date", value=today)
            kind = st.selectbox("Type", ASSIGNMENT_TYPES)
            if st.form_submit_button("Commit"):
                try:
                    app.add_assignment(title, course, due, kind)
                    notify("Goal set. Go get it!")
                except ValueError as e:
                    st.error(str(e))

    assignments = app.assignments_by_due()
    if not assignments:
        st.info("No active goals")
        return

    for a in assignments:
        cols = st.columns([5, 1])
        done = cols[0].checkbox(
            f"{a.title} · {a.course_code} · {a.type} · Due {a.due_date}",
            value=a.is_completed,
            key=f"{K}_done_{a.id}",
        )
        if done != a.is_completed:
            app.toggle_assignment(a.id)
            st.rerun()
        if cols[1].button("🗑️", key=f"{K}_del_{a.id}"):
            app.delete_assignment(a.id)
            st.rerun()


# -------------------------------
# UI: Performance (attendance counter, transcript, current term)
# -------------------------------

def _attendance_card(app: AppState, code: str, K: str) -> None:
    details = course_attendance_details(app.attendance, code)
    skips = safe_skip_margin(app.attendance, code)
    low = is_low(app.attendance, code)

    with st.container(border=True):
        st.markdown(f"**{code}**")
        st.metric("Attendance", f"{details['percentage']}%", f"{details['present']}/{details['total']} present")
        st.progress(details["percentage"] / 100)
        if skips > 0:
            st.success(f"🛡️ {skips} Skips Safe")
        elif low:
            st.error("CRITICAL STANDING")
        else:
            st.warning("No skips left")

        st.caption("Manual tracking")
        c1, c2 = st.columns(2)
        if c1.button("+ Present", key=f"{K}_mp_{code}"):
            app.adjust_attendance(code, True, True)
            notify(f"Added manual Present for {code}")
            st.rerun()
        if c2.button("+ Absent", key=f"{K}_ma_{code}"):
            app.adjust_attendance(code, True, False)
            notify(f"Added manual Absent for {code}")
            st.rerun()
        c3, c4 = st.columns(2)
        if c3.button("− Present", key=f"{K}_rp_{code}"):
            if app.adjust_attendance(code, False, True):
                notify(f"Removed manual entry for {code}", icon="ℹ️")
            st.rerun()
        if c4.button("− Absent", key=f"{K}_ra_{code}"):
            if app.adjust_attendance(code, False, False):
                notify(f"Removed manual entry for {code}", icon="ℹ️")
            st.rerun()


def performance_view(app: AppState, settings: Settings):
    K = "perf"

    st.header("Attendance Counter")
    codes = course_codes()
    cols = st.columns(min(4, len(codes)) or 1)
    for idx, code in enumerate(codes):
        with cols[idx % len(cols)]:
            _attendance_card(app, code, K)

    st.write("---")

    st.header("Transcript Copy")
    st.dataframe(transcript_table(), use_container_width=True, hide_index=True)
    credits, tgp = transcript_totals()
    c1, c2, c3 = st.columns(3)
    c1.metric("Credits Completed", f"{credits:.1f}")
    c2.metric("Total TGP", f"{tgp:.2f}")
    c3.metric("Lifetime CGPA", lifetime_cgpa())

    st.write("---")

    st.header("Current Semester Vault")
    with st.expander("➕ Performance log"):
        with st.form(key=f"{K}_new_grade", clear_on_submit=True):
            course = st.selectbox("Course", codes)
            kind = st.selectbox("Assessment", list(ASSESSMENT_MAX.keys()), format_func=lambda t: f"{t} (Max {ASSESSMENT_MAX[t]:.0f})")
            title = st.text_input("Title", placeholder="Quiz 1")
            score = st.number_input("Score", min_value=0.0, max_value=100.0, value=0.0, step=0.5)
            if st.form_submit_button("Save performance"):
                app.add_grade(course, title, score, kind)
                notify(f"{kind} assessment updated.")

    summaries = course_summaries(app.grades)
    if not summaries:
        st.caption("Start logging marks to track current semester performance.")
    for s in summaries:
        with st.container(border=True):
            c1, c2 = st.columns([3, 1])
            c1.markdown(f"### {s['code']}")
            c1.caption(f"Score: {s['total']:g}/100")
            c2.metric(s["letter"], f"GP {s['gp']:.2f}")
            rows: List[Dict[str, Any]] = [
                {"Type": g.type, "Title": g.title, "Score": f"{g.score:g}/{g.weight:g}"} for g in s["grades"]
            ]
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
            for g in s["grades"]:
                if st.button(f"🗑️ {g.type} ({g.title})", key=f"{K}_gdel_{g.id}"):
                    app.delete_grade(g.id)
                    st.rerun()

    st.metric("Estimated Final CGPA", compute_cumulative_gpa(app.grades))

    st.write("---")

    st.subheader("Study tips")
    tip_course = st.selectbox("Course", codes, key=f"{K}_tips_course")
    if st.button("Get study tips", key=f"{K}_tips_btn", disabled=not settings.chat_enabled):
        with st.spinner("Thinking..."):
            st.markdown(get_study_tips(tip_course, settings=settings))
    if not settings.chat_enabled:
        st.caption("Add GEMINI_API_KEY to secrets to enable study tips.")


# -------------------------------
# UI: Ask Me
# -------------------------------

def ask_view(app: AppState, settings: Settings):
    K = "ask"

    st.header(f"{app.student_name}'s Study Buddy")
    st.caption("Analyze BBA concepts or solve Math problems. I'm here for you! ✨")

    if not settings.chat_enabled:
        st.info("Add GEMINI_API_KEY to secrets to enable the assistant.")

    for msg in app.chat_history:
        with st.chat_message(msg.role):
            if msg.image:
                st.image(msg.image, width=240)
            st.markdown(msg.content)
            st.caption(msg.timestamp.strftime("%I:%M %p").lstrip("0"))

    upload = st.file_uploader(
        "Attach an image",
        type=["png", "jpg", "jpeg", "webp"],
        key=f"{K}_upload_{st.session_state.uploader_nonce}",
    )

    c1, c2 = st.columns([4, 1])
    image_only = upload is not None and c1.button("Send image", key=f"{K}_send_image")
    with c2:
        if app.chat_history and st.button("Clear history", key=f"{K}_clear"):
            app.clear_chat()
            st.rerun()

    query = st.chat_input("Ask anything...")
    if query is None and not image_only:
        return

    image = to_data_url(upload.getvalue(), upload.type or "image/png") if upload is not None else None

    def _sender(prompt: str, img):
        return send_chat(prompt, img, settings=settings)

    # chat_input stays blocked for the whole rerun, one request at a time
    with st.spinner("Thinking..."):
        app.send_chat_message(query or "", image, _sender)

    st.session_state.uploader_nonce += 1
    st.rerun()


# -------------------------------
# Main
# -------------------------------

def main():
    st.set_page_config(page_title="StudyHub", page_icon="💖", layout="wide")
    settings = init_app_state()
    app = get_state()

    st.sidebar.title(f"{app.student_name} Hub 💖")
    dark = st.sidebar.toggle("Dark mode", value=app.dark_mode, key="dark_mode_toggle")
    if dark != app.dark_mode:
        app.set_dark_mode(dark)
    apply_theme(app.dark_mode)

    report_save_errors(app)

    tabs = st.tabs(["Home", "Academic", "Performance", "Ask Me"])

    with tabs[0]:
        home_view(app, settings)
    with tabs[1]:
        academic_view(app)
    with tabs[2]:
        performance_view(app, settings)
    with tabs[3]:
        ask_view(app, settings)

    report_save_errors(app)


if __name__ == "__main__":
    main()

import os
from typing import Any, Dict, List

import requests
import streamlit as st


API_BASE_URL = os.environ.get("API_BASE_URL", "http://127.0.0.1:8000")


def _url(path: str) -> str:
    return f"{st.session_state.get('api_base_url', API_BASE_URL)}{path}"


def api_get(path: str, params: Dict[str, Any] | None = None) -> Any:
    resp = requests.get(_url(path), params=params, timeout=60)
    resp.raise_for_status()
    return resp.json()


def api_post(path: str, json: Dict[str, Any] | None = None) -> Any:
    resp = requests.post(_url(path), json=json, timeout=60)
    resp.raise_for_status()
    return resp.json()


def ensure_session_state() -> None:
    if "user" not in st.session_state:
        st.session_state.user = None
    if "dream" not in st.session_state:
        st.session_state.dream = None
    if "api_base_url" not in st.session_state:
        st.session_state.api_base_url = API_BASE_URL


def user_id() -> str:
    return st.session_state.user["id"]


def sidebar_controls() -> str:
    st.sidebar.header("Settings")
    st.sidebar.text_input("API Base URL", value=API_BASE_URL, key="api_base_url")
    view = st.sidebar.radio("View", ["Dashboard", "Assessment", "Log Sleep", "Dream Scape", "Sleep Lab", "History"])
    if st.sidebar.button("Sign out"):
        try:
            api_post(f"/api/auth/{user_id()}/logout")
        except Exception as e:
            st.sidebar.warning(f"Sign-out error: {e}")
        st.session_state.user = None
        st.session_state.dream = None
        st.rerun()
    return view


def auth_section() -> None:
    st.title("SleepTrack AI")
    st.caption("Master your sleep with intelligent insights.")
    col_demo, col_guest = st.columns(2)
    if col_demo.button("Continue with demo account"):
        st.session_state.user = api_post("/api/auth/demo")
        st.rerun()
    if col_guest.button("Continue as Guest"):
        st.session_state.user = api_post("/api/auth/guest")
        st.rerun()


def refresh_user() -> None:
    st.session_state.user = api_get(f"/api/users/{user_id()}")


def chart_rows(chart: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """One row per chart point; labels repeat when several fall on the same day."""
    width = len(str(len(chart)))
    return [
        {"point": f"{i:0{width}d}. {p['label']}", "duration_minutes": p["duration_minutes"], "quality": p["quality"]}
        for i, p in enumerate(chart, start=1)
    ]


def dashboard_section() -> None:
    data = api_get(f"/api/dashboard/{user_id()}")
    st.subheader(f"Welcome back, {data['greeting_name']}")
    metrics = data["metrics"]
    cols = st.columns(4)
    cols[0].metric("Sleep Quality", metrics["quality"])
    cols[1].metric("Avg Duration", metrics["duration"])
    cols[2].metric("Deep Sleep", metrics["deep_sleep"])
    cols[3].metric("Efficiency", metrics["efficiency"])

    chart: List[Dict[str, Any]] = data["chart"]
    if chart:
        title = "Assessment Trend" if data["is_assessment_data"] else "Sleep Duration"
        st.caption(title)
        st.bar_chart(chart_rows(chart), x="point", y="duration_minutes")
    else:
        st.info("No data yet. Take the sleep assessment or log a night.")

    profile = data.get("profile")
    if profile and profile.get("ai_analysis"):
        st.subheader("Sleep Hygiene Prescription")
        st.write(profile["ai_analysis"])

    coach_section()


def coach_section() -> None:
    st.subheader("Dr. Somnus")
    for turn in api_get(f"/api/coach/{user_id()}"):
        role = "assistant" if turn["role"] == "model" else "user"
        with st.chat_message(role):
            st.markdown(turn["text"])

    message = st.chat_input("Ask your sleep coach...")
    if message:
        with st.chat_message("user"):
            st.markdown(message)
        try:
            data = api_post(f"/api/coach/{user_id()}/chat", {"message": message})
            with st.chat_message("assistant"):
                st.markdown(data["reply"]["text"])
        except Exception as e:
            st.error(f"Chat error: {e}")


def assessment_section() -> None:
    st.subheader("Sleep Assessment")
    try:
        state = api_get(f"/api/onboarding/{user_id()}")
    except requests.HTTPError:
        variant = st.radio("Questionnaire", ["baseline", "extended"], horizontal=True)
        if st.button("Start assessment"):
            api_post(f"/api/onboarding/{user_id()}/start", {"variant": variant})
            st.rerun()
        return

    question = state["question"]
    profile = state["profile"]
    st.progress((state["step"] + 1) / state["total"], text=f"Question {state['step'] + 1} of {state['total']}")
    st.markdown(f"### {question['title']}")
    render_question(question, profile)

    col_back, col_next, col_cancel = st.columns(3)
    if col_back.button("Back", disabled=state["step"] == 0):
        api_post(f"/api/onboarding/{user_id()}/back")
        st.rerun()
    label = "Complete Assessment" if state["is_last"] else "Next"
    if col_next.button(label, disabled=not state["can_advance"]):
        with st.spinner("Dr. Somnus is analyzing your profile..."):
            result = api_post(f"/api/onboarding/{user_id()}/next")
        if result["result"] == "completed":
            st.session_state.user = result["user"]
            st.success("Assessment saved.")
        st.rerun()
    if col_cancel.button("Cancel"):
        api_post(f"/api/onboarding/{user_id()}/cancel")
        st.rerun()


def render_question(question: Dict[str, Any], profile: Dict[str, Any]) -> None:
    kind = question["kind"]
    if kind == "text":
        for field in question["fields"]:
            value = st.text_input(field.replace("_", " ").capitalize(), value=profile.get(field) or "", key=f"q-{field}")
            if value and value != (profile.get(field) or ""):
                api_post(f"/api/onboarding/{user_id()}/answer", {"field": field, "value": value})
                st.rerun()
    elif kind == "multi":
        selected = profile.get(question["key"]) or []
        for option in question["options"]:
            marker = "✓ " if option in selected else ""
            if st.button(f"{marker}{option}", key=f"q-{question['key']}-{option}"):
                api_post(f"/api/onboarding/{user_id()}/toggle", {"field": question["key"], "item": option})
                st.rerun()
    else:
        render_single(question, profile)
        if kind == "conditional" and profile.get(question["key"]) == question["unlock"]:
            for follow_up in question["follow_ups"]:
                st.markdown(f"**{follow_up['title']}**")
                render_single(follow_up, profile)


def render_single(question: Dict[str, Any], profile: Dict[str, Any]) -> None:
    current = profile.get(question["key"])
    for option in question["options"]:
        marker = "● " if option == current else ""
        if st.button(f"{marker}{option}", key=f"q-{question['key']}-{option}"):
            api_post(f"/api/onboarding/{user_id()}/answer", {"field": question["key"], "value": option})
            st.rerun()


def log_sleep_section() -> None:
    st.subheader("Log Last Night's Sleep")
    with st.form("log_form"):
        duration = st.slider("Duration (hours)", 0.0, 14.0, 7.5, step=0.5)
        quality = st.slider("Quality Score", 0, 100, 75)
        caffeine = st.radio("Caffeine Yesterday", ["None", "1-2 cups", "3+ cups"], index=None, horizontal=True)
        activities = st.multiselect("Before Bed", ["Screen Time", "Reading", "Late Meal", "Workout"])
        dream_notes = st.text_area("Dream Notes (Optional)")
        submitted = st.form_submit_button("Save Log")
    if submitted:
        payload: Dict[str, Any] = {
            "duration_hours": duration,
            "quality": quality,
            "caffeine_intake": caffeine,
            "pre_sleep_activity": activities,
            "dream_notes": dream_notes.strip() or None,
        }
        try:
            with st.spinner("Analyzing Sleep..."):
                session = api_post(f"/api/sessions/{user_id()}", payload)
            st.success("Session saved.")
            st.write(session.get("ai_analysis", ""))
        except Exception as e:
            st.error(f"Log error: {e}")


def dream_section() -> None:
    st.subheader("Dream Scape")
    dream_text = st.text_area("Describe your dream")
    duration = st.slider("Hours slept", 0.0, 14.0, 7.5, step=0.5, key="dream-duration")
    if st.button("Interpret", disabled=not dream_text.strip()):
        with st.spinner("Interpreting..."):
            st.session_state.dream = api_post(f"/api/dreams/{user_id()}/interpret", {"dream_text": dream_text})

    result = st.session_state.dream
    if result:
        st.write(result["interpretation"])
        st.caption(" · ".join(result["themes"]))
        if st.button("Save to sleep log"):
            api_post(
                f"/api/dreams/{user_id()}",
                {"dream_text": dream_text, "duration_hours": duration, "dream_analysis": result},
            )
            st.session_state.dream = None
            st.success("Dream saved.")


def lab_section() -> None:
    st.subheader("Sleep Lab")
    wake_time = st.text_input("Wake up at (HH:MM)", value="07:00")
    if st.button("Calculate bedtimes"):
        try:
            data = api_get("/api/lab/bedtimes", {"wake_time": wake_time})
            for suggestion in data["suggestions"]:
                st.write(f"{suggestion['bedtime']} ({suggestion['cycles']} cycles, {suggestion['sleep_hours']:g}h)")
        except Exception as e:
            st.error(f"Calculator error: {e}")

    needed = st.number_input("Sleep needed (hours)", 0.0, 24.0, 8.0, step=0.5)
    actual = st.number_input("Sleep last night (hours)", 0.0, 24.0, 6.0, step=0.5)
    if st.button("Calculate sleep debt"):
        data = api_post("/api/lab/sleep-debt", {"needed_hours": needed, "actual_hours": actual})
        st.info(data["message"])


def history_section() -> None:
    st.subheader("Assessment History")
    refresh_user()
    history = st.session_state.user["assessment_history"]
    if not history:
        st.caption("Complete your first sleep assessment to see your history here.")
        return
    for record in history:
        with st.expander(record.get("date") or "Unknown Date"):
            st.write(f"Caffeine: {record['daily_caffeine'] or '-'} · Avg sleep: {record['average_sleep_duration'] or '-'}")
            st.write(f"Issues: {', '.join(record['sleep_issues'])}")
            if record.get("ai_analysis"):
                st.write(record["ai_analysis"])


def main() -> None:
    st.set_page_config(page_title="SleepTrack AI", page_icon="🌙", layout="wide")
    p = {
        "app": "#ffffff",
        "text": "#0f172a",
        "sidebar": "#f1f5f9",
        "accent": "#6366f1",
    }
    st.markdown(
        f"""
        <style>
        .stApp {{ background-color: {p['app']}; color: {p['text']}; }}
        section[data-testid="stSidebar"] {{ background-color: {p['sidebar']}; }}
        h1, h2, h3 {{ color: {p['text']}; }}
        div[data-testid="stMetricValue"] {{ color: {p['accent']}; }}
        </style>
        """,
        unsafe_allow_html=True,
    )
    ensure_session_state()
    if st.session_state.user is None:
        auth_section()
        return

    view = sidebar_controls()
    sections = {
        "Dashboard": dashboard_section,
        "Assessment": assessment_section,
        "Log Sleep": log_sleep_section,
        "Dream Scape": dream_section,
        "Sleep Lab": lab_section,
        "History": history_section,
    }
    sections[view]()


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from sleeptrack.api.schemas.coach import ChatMessage
from sleeptrack.api.schemas.profile import UserProfile
from sleeptrack.api.schemas.session import DreamAnalysis, SleepSession

from .config import Settings
from .errors import (
    AdvisoryServiceFailure,
    CredentialMissing,
    MalformedAdvisoryResponse,
)
from .units import format_duration


logger = logging.getLogger(__name__)


PROFILE_CONFIG_ERROR = "Configuration Error: API Key is missing. Please check your environment variables."
PROFILE_SERVICE_ERROR = "Service Error: The AI service is currently experiencing issues. Please try again later."
PROFILE_EMPTY_REPLY = "Unable to generate profile analysis."
SESSION_FALLBACK = "Analysis unavailable. Please ensure your API key is valid."
SESSION_EMPTY_REPLY = "Unable to generate analysis at this time."
CHAT_FALLBACK = "I am currently offline due to a connection issue. Please check your API key."
CHAT_EMPTY_REPLY = "I'm having trouble thinking right now. Try again later."
DREAM_FALLBACK_INTERPRETATION = "Could not interpret dream at this moment."
# Dreams that could not be read are still tagged, so theme lists are never empty.
DREAM_FALLBACK_THEMES = ("Unknown",)

PLAIN_TEXT_RULE = "IMPORTANT: Do not use asterisks (*) or markdown bolding in your response. Use plain text only."

DREAM_RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "dream_interpretation",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "interpretation": {"type": "string"},
                "themes": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["interpretation", "themes"],
            "additionalProperties": False,
        },
    },
}


def initialize_env() -> None:
    """Load environment variables from .env if present."""
    load_dotenv()


def strip_asterisks(text: str) -> str:
    return text.replace("*", "")


def dream_fallback() -> DreamAnalysis:
    return DreamAnalysis(interpretation=DREAM_FALLBACK_INTERPRETATION, themes=list(DREAM_FALLBACK_THEMES))


def _get_openai_client(settings: Settings) -> OpenAI:
    if not settings.openai_api_key:
        raise CredentialMissing("OPENAI_API_KEY is not set")
    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.advisor_timeout_seconds,
        max_retries=settings.advisor_max_retries,
    )


def _complete(messages: List[Dict[str, str]], **options: Any) -> str:
    """Run one chat completion and return its text ('' when the reply is empty)."""
    settings = Settings.from_env()
    client = _get_openai_client(settings)
    try:
        response = client.chat.completions.create(
            model=settings.advisor_model,
            messages=messages,
            **options,
        )
    except OpenAIError as exc:
        raise AdvisoryServiceFailure(str(exc)) from exc
    return response.choices[0].message.content or ""


def _join(items: Sequence[str] | None) -> str:
    return ", ".join(items or [])


def _profile_lines(profile: UserProfile) -> List[str]:
    lines = [
        f"- Age/Gender: {profile.age}, {profile.gender}",
        f"- Daily Caffeine: {profile.daily_caffeine or 'Not recorded'}",
        f"- Screen Time Before Bed: {profile.screen_time}",
        f"- Typical Routine: {_join(profile.typical_bedtime_routine)}",
        f"- Average Sleep: {profile.average_sleep_duration or 'Not recorded'}",
        f"- Reported Issues: {_join(profile.sleep_issues)}",
    ]
    if profile.sleep_last_night_hours:
        minutes = profile.sleep_last_night_minutes or "0"
        lines.append(f"- Sleep Last Night: {profile.sleep_last_night_hours}h {minutes}m")
    if profile.sleep_quality:
        lines.append(f"- Self-rated Sleep Quality: {profile.sleep_quality}/10")
    if profile.current_feeling:
        lines.append(f"- Feeling Now: {profile.current_feeling}")
    if profile.caffeine_yesterday:
        detail = ""
        if profile.caffeine_last_cup:
            detail = f" (last cup: {profile.caffeine_last_cup}, total: {profile.caffeine_total_intake})"
        lines.append(f"- Caffeine Yesterday: {profile.caffeine_yesterday}{detail}")
    if profile.alcohol_yesterday:
        detail = f" ({profile.alcohol_close_to_bed})" if profile.alcohol_close_to_bed else ""
        lines.append(f"- Alcohol Yesterday: {profile.alcohol_yesterday}{detail}")
    if profile.ate_within_3_hours:
        detail = f" ({profile.meal_type})" if profile.meal_type else ""
        lines.append(f"- Ate Within 3 Hours of Bed: {profile.ate_within_3_hours}{detail}")
    if profile.workout_today:
        detail = ""
        if profile.workout_intensity:
            detail = f" ({profile.workout_intensity}, {profile.workout_timing})"
        lines.append(f"- Workout Today: {profile.workout_today}{detail}")
    if profile.sleep_environment:
        lines.append(f"- Sleep Environment: {_join(profile.sleep_environment)}")
    return lines


def _build_profile_prompt(profile: UserProfile) -> str:
    return (
        "You are an expert Sleep Scientist. Review the following user profile assessment "
        "and provide a personalized sleep solution plan.\n\n"
        "User Profile:\n"
        + "\n".join(_profile_lines(profile))
        + "\n\n"
        "Task:\n"
        'Provide a "Sleep Hygiene Prescription" in 3 concise bullet points.\n'
        "1. Address their specific caffeine or screen time habits if negative.\n"
        "2. Suggest a modification to their routine based on their reported issues.\n"
        "3. Provide one long-term habit change recommendation.\n\n"
        "Keep the tone professional, encouraging, and medical but accessible.\n"
        f"{PLAIN_TEXT_RULE}"
    )


def _build_session_prompt(session: SleepSession, profile: UserProfile | None) -> str:
    if profile is not None:
        profile_context = "User Context:\n" + "\n".join(_profile_lines(profile))
        chronic = ",".join(profile.sleep_issues) or "none"
    else:
        profile_context = "User Profile: Unknown"
        chronic = "none"

    return (
        "Analyze this sleep session. Provide a concise, 3-sentence summary:\n"
        "1. Evaluation of quality based on duration/score.\n"
        "2. How their daily factors (caffeine/activity) likely impacted it.\n"
        f"3. One personalized actionable tip based on their chronic issues ({chronic}).\n\n"
        f"{profile_context}\n\n"
        "Session Data:\n"
        f"- Duration: {format_duration(session.duration_minutes)}\n"
        f"- Quality Score: {session.quality}/100\n"
        f"- Dream Notes: {session.dream_notes or 'None'}\n\n"
        "Today's Session:\n"
        f"- Caffeine: {session.caffeine_intake or 'Not recorded'}\n"
        f"- Before Bed: {_join(session.pre_sleep_activity) or 'Not recorded'}\n\n"
        f"{PLAIN_TEXT_RULE}"
    )


def _build_coach_instruction(last_session: SleepSession | None) -> str:
    context = ""
    if last_session is not None:
        context = (
            f"\nContext - Last night's sleep: {last_session.quality}/100 score, "
            f"{last_session.duration_minutes // 60}h duration."
        )
    return (
        "You are Dr. Somnus, an expert AI Sleep Coach.\n"
        "Your goal is to help the user improve their sleep hygiene using scientific principles (CBT-I).\n"
        "Be empathetic, encouraging, and concise.\n"
        "Keep your response strictly to 2-3 sentences maximum.\n"
        "Do not use asterisks (*) or markdown bolding in your response."
        f"{context}"
    )


def analyze_user_profile(profile: UserProfile) -> str:
    try:
        text = _complete(
            [{"role": "user", "content": _build_profile_prompt(profile)}],
            temperature=0.4,
        )
    except CredentialMissing:
        logger.warning("Profile analysis skipped: API key missing")
        return PROFILE_CONFIG_ERROR
    except Exception:
        logger.exception("Error analyzing profile")
        return PROFILE_SERVICE_ERROR
    return strip_asterisks(text or PROFILE_EMPTY_REPLY)


def analyze_sleep_session(session: SleepSession, profile: UserProfile | None = None) -> str:
    try:
        text = _complete(
            [{"role": "user", "content": _build_session_prompt(session, profile)}],
            temperature=0.4,
        )
    except CredentialMissing:
        logger.warning("Session analysis skipped: API key missing")
        return SESSION_FALLBACK
    except Exception:
        logger.exception("Error analyzing sleep session %s", session.id)
        return SESSION_FALLBACK
    return strip_asterisks(text or SESSION_EMPTY_REPLY)


def get_sleep_coach_chat(
    history: Sequence[ChatMessage],
    new_message: str,
    last_session: SleepSession | None = None,
) -> str:
    """Reply to ``new_message`` with the earlier turns replayed in order."""
    messages: List[Dict[str, str]] = [{"role": "system", "content": _build_coach_instruction(last_session)}]
    for turn in history:
        role = "assistant" if turn.role == "model" else "user"
        messages.append({"role": role, "content": turn.text})
    messages.append({"role": "user", "content": new_message})

    try:
        text = _complete(messages, temperature=0.7)
    except CredentialMissing:
        logger.warning("Coach chat skipped: API key missing")
        return CHAT_FALLBACK
    except Exception:
        logger.exception("Coach chat error")
        return CHAT_FALLBACK
    return strip_asterisks(text or CHAT_EMPTY_REPLY)


def _parse_dream(content: str) -> DreamAnalysis:
    if not content:
        raise MalformedAdvisoryResponse("No response text")
    try:
        parsed = DreamAnalysis.model_validate_json(content)
    except ValidationError as exc:
        raise MalformedAdvisoryResponse(str(exc)) from exc
    return DreamAnalysis(
        interpretation=strip_asterisks(parsed.interpretation),
        themes=[strip_asterisks(theme) for theme in parsed.themes],
    )


def interpret_dream(dream_text: str) -> DreamAnalysis:
    prompt = (
        "Interpret this dream from a psychological perspective (Jungian/Freudian mix) "
        "but keep it light and insightful. Also extract 3 key themes.\n\n"
        f'Dream: "{dream_text}"'
    )
    try:
        content = _complete(
            [{"role": "user", "content": prompt}],
            temperature=0.7,
            response_format=DREAM_RESPONSE_FORMAT,
        )
        return _parse_dream(content)
    except CredentialMissing:
        logger.warning("Dream interpretation skipped: API key missing")
    except MalformedAdvisoryResponse as exc:
        logger.warning("Dream interpretation unreadable: %s", exc)
    except Exception:
        logger.exception("Dream interpretation error")
    return dream_fallback()

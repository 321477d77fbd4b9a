# rehab_backend/llm_agent.py   LLM calls for coaching tips and session summaries

import logging
import os
from functools import lru_cache
from typing import Optional, Tuple

import dotenv
dotenv.load_dotenv()

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_groq import ChatGroq

from rehab_backend.models import SessionStatsModel

logger = logging.getLogger(__name__)

GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
LLM_PROVIDER = os.getenv("COACH_LLM_PROVIDER", "groq").lower()
LLM_MODEL = os.getenv("COACH_LLM_MODEL")

DEFAULT_MODELS = {
    "groq": "llama-3.3-70b-versatile",
    "google": "gemini-2.5-flash",
}

FALLBACK_TIP = "Take your time. Breathe deeply."
FALLBACK_SUMMARY = "Session Complete. Wonderful effort today. Rest well."

SYSTEM_PROMPT = (
    "You are **MEDHASHA**, a gentle, patient and encouraging medical "
    "rehabilitation assistant inside a camera-based therapy app.\n\n"
    "The user is an elderly person or a patient recovering from neurological issues.\n\n"
    "Important style rules:\n"
    "- Use soothing, calm language. No high-energy fitness slang.\n"
    "- Talk directly to the user as \"you\".\n"
    "- Focus on slow movement, breathing, and doing your best.\n"
    "- No emojis, no hashtags, no markdown.\n"
    "- Never mention data, numbers formats, or that you are an AI.\n"
    "- Reply with the spoken text only.\n"
)


@lru_cache(maxsize=1)
def get_llm() -> BaseChatModel:
    """Build the chat model once, on first use."""
    if LLM_PROVIDER == "google":
        return ChatGoogleGenerativeAI(
            api_key=GOOGLE_API_KEY,
            model=LLM_MODEL or DEFAULT_MODELS["google"],
            temperature=0.4,
            max_retries=0,
            timeout=4.0,
        )
    return ChatGroq(
        api_key=GROQ_API_KEY,
        model=LLM_MODEL or DEFAULT_MODELS["groq"],
        temperature=0.4,
        max_retries=0,
        timeout=4.0,
    )


def _clean_llm_text(raw: str) -> str:
    """Strip code fences / quotes the model sometimes wraps around the answer."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.strip("`")
        first, sep, rest = text.partition("\n")
        # ```text / ```json style language tag on the opening fence
        if sep and (not first.strip() or first.strip().isalnum()):
            text = rest
    return text.strip().strip('"').strip()


def _ask_llm(prompt: str) -> Optional[str]:
    messages = [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(content=prompt),
    ]
    try:
        resp = get_llm().invoke(messages)
    except Exception as e:
        logger.error("[LLM ERROR] Exception calling %s: %s", LLM_PROVIDER, e)
        return None

    raw = resp.content if hasattr(resp, "content") else str(resp)
    if not isinstance(raw, str):
        raw = str(raw)
    text = _clean_llm_text(raw)
    if not text:
        logger.error("[LLM ERROR] Empty reply from %s", LLM_PROVIDER)
        return None
    return text


def coaching_tip_prompt(exercise: str, stats: SessionStatsModel) -> str:
    return (
        f"Current Exercise: {exercise}.\n"
        f"Reps completed: {stats.reps}.\n\n"
        "Provide a very short, kind, and clear encouragement.\n"
        "Max 10 words."
    )


def session_summary_prompt(exercise: str, stats: SessionStatsModel) -> str:
    return (
        f"The user just finished a therapy session of {exercise}.\n"
        f"Stats: {stats.reps} repetitions performed.\n"
        f"Stability Score: {round(stats.accuracy)}%.\n\n"
        "Write a 2-sentence summary. Be extremely positive, validating their "
        "effort regardless of the numbers.\n"
        "Mention that consistent movement is key to recovery."
    )


def generate_coaching_tip(exercise: str, stats: SessionStatsModel) -> Tuple[str, bool]:
    """Returns (message, used_fallback)."""
    text = _ask_llm(coaching_tip_prompt(exercise, stats))
    if text is None:
        return FALLBACK_TIP, True
    return text, False


def generate_session_summary(exercise: str, stats: SessionStatsModel) -> Tuple[str, bool]:
    """Returns (message, used_fallback)."""
    text = _ask_llm(session_summary_prompt(exercise, stats))
    if text is None:
        return FALLBACK_SUMMARY, True
    return text, False

# rehab_client/coach_client.py

import logging
from typing import Optional

import requests

from rehab_client import config
from rehab_client.exercises import ExerciseType
from rehab_client.rep_logic import SessionStats

logger = logging.getLogger(__name__)

FALLBACK_TIP = "Take your time. Breathe deeply."
FALLBACK_SUMMARY = "Session Complete. Wonderful effort today. Rest well."


class CoachClient:
    """
    Talks to the coaching backend. Every call makes a single attempt and
    returns the fallback text on any transport or payload problem, so
    callers always get a string back.
    """

    def __init__(
        self,
        base_url: str = config.BACKEND_URL,
        timeout: float = config.REQUEST_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    def request_coaching_tip(self, exercise: ExerciseType, stats: SessionStats) -> str:
        return self._post("/coaching_tip", exercise, stats, FALLBACK_TIP)

    def request_session_summary(self, exercise: ExerciseType, stats: SessionStats) -> str:
        return self._post("/session_summary", exercise, stats, FALLBACK_SUMMARY)

    def _post(self, path: str, exercise: ExerciseType, stats: SessionStats, fallback: str) -> str:
        payload = {"exercise": ExerciseType(exercise).value, "stats": stats.to_dict()}
        try:
            resp = self.http.post(self.base_url + path, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            message = resp.json().get("message", "")
        except requests.RequestException as e:
            logger.warning("[COACH] backend request %s failed: %s", path, e)
            return fallback
        except (ValueError, AttributeError) as e:
            logger.warning("[COACH] bad payload from %s: %s", path, e)
            return fallback

        if not isinstance(message, str) or not message.strip():
            return fallback
        return message.strip()

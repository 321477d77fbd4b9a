# rehab_client/coaching.py

import logging
import threading
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Callable, List, Optional, Protocol

from rehab_client.coach_client import FALLBACK_SUMMARY, FALLBACK_TIP
from rehab_client.exercises import ExerciseType
from rehab_client.rep_logic import SessionStats

logger = logging.getLogger(__name__)

TIP = "tip"
SUMMARY = "summary"


class CoachingCollaborator(Protocol):
    def request_coaching_tip(self, exercise: ExerciseType, stats: SessionStats) -> str: ...

    def request_session_summary(self, exercise: ExerciseType, stats: SessionStats) -> str: ...


@dataclass(frozen=True)
class CoachingIntent:
    kind: str                 # TIP or SUMMARY
    session_id: str
    exercise: ExerciseType
    stats: SessionStats


@dataclass(frozen=True)
class CoachingMessage:
    kind: str
    session_id: str
    text: str


MessageSink = Callable[[CoachingMessage], None]


class CoachingScheduler:
    """
    Runs coaching requests off the frame thread.

    The frame loop only calls `submit()`, which returns instantly. A single
    background worker sends each intent to the collaborator once and hands
    the text to the sink. Replies are tagged with the session they were
    asked for:
      - a tip is delivered only while that session is still running
      - a summary is delivered unless a newer session has started
    """

    def __init__(self, collaborator: CoachingCollaborator, sink: MessageSink):
        self.collaborator = collaborator
        self.sink = sink
        self._queue: Queue = Queue()
        self._lock = threading.RLock()
        self._session_id: Optional[str] = None
        self._session_open = False
        self._worker: Optional[threading.Thread] = None

    # ---------- session tagging ----------

    def open_session(self, session_id: str) -> None:
        with self._lock:
            self._session_id = session_id
            self._session_open = True

    def close_session(self, session_id: str) -> None:
        with self._lock:
            if self._session_id == session_id:
                self._session_open = False

    def accepts(self, message: CoachingMessage) -> bool:
        with self._lock:
            if message.session_id != self._session_id:
                return False
            return self._session_open or message.kind == SUMMARY

    # ---------- worker ----------

    def start(self) -> None:
        if self._worker is None or not self._worker.is_alive():
            self._worker = threading.Thread(target=self._run, name="coaching-worker", daemon=True)
            self._worker.start()

    def stop(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            self._queue.put(None)
            self._worker.join()
        self._worker = None

    def submit(self, intent: CoachingIntent) -> None:
        self._queue.put(intent)   # returns instantly

    def join(self) -> None:
        """Block until every submitted intent has been handled."""
        self._queue.join()

    def drain(self) -> List[CoachingMessage]:
        """Handle everything queued so far on the calling thread (no worker needed)."""
        delivered = []
        while True:
            try:
                intent = self._queue.get_nowait()
            except Empty:
                return delivered
            try:
                if intent is not None:
                    message = self.handle(intent)
                    if message is not None:
                        delivered.append(message)
            finally:
                self._queue.task_done()

    def _run(self) -> None:
        while True:
            intent = self._queue.get()
            try:
                if intent is None:
                    return
                self.handle(intent)
            finally:
                self._queue.task_done()

    def handle(self, intent: CoachingIntent) -> Optional[CoachingMessage]:
        """Serve one intent; returns the delivered message, or None if it went stale."""
        text = self._request(intent)
        message = CoachingMessage(kind=intent.kind, session_id=intent.session_id, text=text)
        # Check and deliver under one lock so a session can't close in between.
        with self._lock:
            if not self.accepts(message):
                logger.info("[COACH] dropping %s for ended session %s", intent.kind, intent.session_id)
                return None
            try:
                self.sink(message)
            except Exception:
                logger.exception("[COACH] message sink failed")
        return message

    def _request(self, intent: CoachingIntent) -> str:
        if intent.kind == SUMMARY:
            call, fallback = self.collaborator.request_session_summary, FALLBACK_SUMMARY
        else:
            call, fallback = self.collaborator.request_coaching_tip, FALLBACK_TIP
        try:
            text = call(intent.exercise, intent.stats)
        except Exception as e:
            logger.error("[COACH] %s request failed: %s", intent.kind, e)
            return fallback
        return text or fallback

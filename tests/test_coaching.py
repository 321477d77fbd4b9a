import threading

from rehab_client.coach_client import FALLBACK_SUMMARY, FALLBACK_TIP
from rehab_client.coaching import SUMMARY, TIP, CoachingIntent, CoachingScheduler
from rehab_client.exercises import ExerciseType
from rehab_client.rep_logic import SessionStats

from helpers import FakeCollaborator


def _intent(kind=TIP, session_id="s1"):
    return CoachingIntent(kind, session_id, ExerciseType.LEG_LIFT, SessionStats(reps=3))


def test_tip_delivered_to_sink(scheduler, collaborator, messages):
    scheduler.open_session("s1")
    scheduler.submit(_intent())
    delivered = scheduler.drain()

    assert [m.text for m in messages] == ["Lovely and slow."]
    assert delivered == messages
    assert collaborator.calls[0][0] == "tip"
    assert collaborator.calls[0][2].reps == 3


def test_failure_uses_fallback_once_without_retry(messages):
    failing = FakeCollaborator(fail=True)
    scheduler = CoachingScheduler(failing, messages.append)
    scheduler.open_session("s1")
    scheduler.submit(_intent(TIP))
    scheduler.close_session("s1")
    scheduler.submit(_intent(SUMMARY))
    scheduler.drain()

    assert [m.text for m in messages] == [FALLBACK_SUMMARY]
    assert len(failing.calls) == 2


def test_failure_fallback_for_tip(messages):
    scheduler = CoachingScheduler(FakeCollaborator(fail=True), messages.append)
    scheduler.open_session("s1")
    scheduler.submit(_intent(TIP))
    scheduler.drain()
    assert [m.text for m in messages] == [FALLBACK_TIP]


def test_empty_reply_uses_fallback(messages):
    scheduler = CoachingScheduler(FakeCollaborator(tip=""), messages.append)
    scheduler.open_session("s1")
    scheduler.submit(_intent(TIP))
    scheduler.drain()
    assert messages[0].text == FALLBACK_TIP


def test_tip_for_ended_session_is_dropped(scheduler, messages):
    scheduler.open_session("s1")
    scheduler.submit(_intent(TIP, "s1"))
    scheduler.close_session("s1")
    scheduler.open_session("s2")
    assert scheduler.drain() == []
    assert messages == []


def test_summary_survives_end_but_not_a_new_session(scheduler, messages):
    scheduler.open_session("s1")
    scheduler.close_session("s1")
    scheduler.submit(_intent(SUMMARY, "s1"))
    scheduler.drain()
    assert [m.kind for m in messages] == [SUMMARY]

    scheduler.submit(_intent(SUMMARY, "s1"))
    scheduler.open_session("s2")
    scheduler.drain()
    assert len(messages) == 1


def test_sink_errors_do_not_escape(collaborator):
    def broken_sink(message):
        raise ValueError("ui gone")

    scheduler = CoachingScheduler(collaborator, broken_sink)
    scheduler.open_session("s1")
    scheduler.submit(_intent())
    assert len(scheduler.drain()) == 1


def test_background_worker(scheduler, messages):
    scheduler.open_session("s1")
    scheduler.start()
    try:
        scheduler.submit(_intent())
        scheduler.join()
    finally:
        scheduler.stop()
    assert [m.text for m in messages] == ["Lovely and slow."]


def test_session_cannot_close_while_tip_is_being_delivered(collaborator):
    closer_done = threading.Event()
    observed = {}

    def sink(message):
        closer = threading.Thread(target=lambda: (scheduler.close_session("s1"), closer_done.set()))
        closer.start()
        # close_session has to wait until delivery finishes
        observed["closed_during_delivery"] = closer_done.wait(timeout=0.2)
        observed["closer"] = closer

    scheduler = CoachingScheduler(collaborator, sink)
    scheduler.open_session("s1")
    scheduler.submit(_intent())
    delivered = scheduler.drain()

    observed["closer"].join(timeout=2)
    assert len(delivered) == 1
    assert observed["closed_during_delivery"] is False
    assert closer_done.is_set()

    # once closed, the next tip for that session is dropped
    scheduler.submit(_intent())
    assert scheduler.drain() == []

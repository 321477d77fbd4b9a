import pytest

from rehab_client.exercises import Phase
from rehab_client.rep_logic import (
    RepState,
    SessionStats,
    should_request_coaching,
    update_rep_state,
)


def test_first_phase_1_counts_immediately():
    state = RepState()
    event = update_rep_state(state, Phase.PHASE_1, now=10.0)
    assert event is not None and event.rep_id == 1 and event.timestamp == 10.0
    assert state.phase == Phase.PHASE_1
    assert state.last_rep_time == 10.0


def test_debounce_drops_observation_entirely():
    state = RepState()
    update_rep_state(state, Phase.PHASE_1, now=10.0)
    # PHASE_2 inside the window is ignored too, so nothing re-arms
    assert update_rep_state(state, Phase.PHASE_2, now=10.5) is None
    assert state.phase == Phase.PHASE_1
    assert update_rep_state(state, Phase.PHASE_1, now=11.9) is None
    assert state.rep_id == 1


def test_phase_2_rearms_after_debounce():
    state = RepState()
    update_rep_state(state, Phase.PHASE_1, now=0.0)
    assert update_rep_state(state, Phase.PHASE_2, now=2.0) is None
    assert state.phase == Phase.PHASE_2
    event = update_rep_state(state, Phase.PHASE_1, now=2.1)
    assert event.rep_id == 2


def test_holding_phase_1_or_neutral_never_recounts():
    state = RepState()
    update_rep_state(state, Phase.PHASE_1, now=0.0)
    for t in range(3, 30):
        assert update_rep_state(state, Phase.PHASE_1, now=float(t)) is None
        assert update_rep_state(state, Phase.NEUTRAL, now=t + 0.5) is None
    assert state.rep_id == 1
    assert state.phase == Phase.PHASE_1


def test_neutral_from_start_does_nothing():
    state = RepState()
    assert update_rep_state(state, Phase.NEUTRAL, now=1.0) is None
    assert state == RepState()


def test_record_rep_good_form_clamps_at_100():
    stats = SessionStats().record_rep(good_form=True)
    assert stats.reps == 1
    assert stats.accuracy == 100.0
    assert stats.calories == pytest.approx(0.1)


def test_record_rep_bad_form_penalises_and_clamps_at_0():
    stats = SessionStats(accuracy=0.5)
    stats = stats.record_rep(good_form=False)
    assert stats.accuracy == 0.0
    stats = stats.record_rep(good_form=False)
    assert stats.accuracy == 0.0
    assert stats.reps == 2


def test_stats_bounds_over_mixed_sequence():
    stats = SessionStats()
    previous_reps = 0
    previous_calories = 0.0
    for i in range(300):
        stats = stats.record_rep(good_form=(i % 3 != 0))
        assert 0.0 <= stats.accuracy <= 100.0
        assert stats.reps > previous_reps
        assert stats.calories > previous_calories
        previous_reps, previous_calories = stats.reps, stats.calories


def test_stats_are_immutable_snapshots():
    before = SessionStats()
    after = before.record_rep()
    assert before.reps == 0
    with pytest.raises(Exception):
        before.reps = 5
    assert after.to_dict()["reps"] == 1


def test_coaching_gate():
    state = RepState()
    assert should_request_coaching(state, now=1.0)
    assert state.last_coaching_time == 1.0
    assert not should_request_coaching(state, now=6.0)
    assert state.last_coaching_time == 1.0
    assert should_request_coaching(state, now=13.0)

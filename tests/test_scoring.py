from datetime import datetime, timedelta

import pytest

from dinematch.domain.matching.scoring import (
    ScoreWeights,
    find_best_match,
    rank_events,
    score_event,
    select_candidates,
    time_overlap_score,
)
from dinematch.models import Event, EventParticipation, Profile

NOW = datetime(2024, 6, 1, 12, 0)
WEIGHTS = ScoreWeights()
HOME = (6.5244, 3.3792)


def build_event(id, title="Supper club", description="Dinner", start=None, hours=2, **overrides):
    start = start or NOW + timedelta(days=1)
    data = dict(
        id=id,
        title=title,
        description=description,
        start_date=start,
        end_date=start + timedelta(hours=hours),
        status="published",
        no_of_attendees=5,
        slots=5,
        attendees=[],
    )
    data.update(overrides)
    return Event(**data)


def build_profile(**overrides):
    data = dict(id=1, full_name="Ada", interests=[], goals=[])
    data.update(overrides)
    return Profile(**data)


def test_time_overlap_thresholds():
    start = NOW
    end = NOW + timedelta(hours=2)
    assert time_overlap_score(start, end, start - timedelta(hours=1), end + timedelta(hours=3), WEIGHTS) == 2
    # Half the event is covered, not strictly more than half
    assert time_overlap_score(start, end, start + timedelta(hours=1), end, WEIGHTS) == 1
    # A quarter is not enough for any bonus
    assert time_overlap_score(start, end, start + timedelta(minutes=90), end, WEIGHTS) == 0
    assert time_overlap_score(start, end, None, None, WEIGHTS) == 0


def test_more_matching_interests_never_lower_the_score():
    event = build_event(1, title="Italian pasta night", description="Fresh pasta and wine")
    fewer = build_profile(interests=["pasta"])
    more = build_profile(interests=["pasta", "wine"])
    assert score_event(more, event, WEIGHTS).total >= score_event(fewer, event, WEIGHTS).total


def test_location_bonus_only_inside_radius():
    profile = build_profile(latitude=HOME[0], longitude=HOME[1], interests=["dinner"])
    near = build_event(1, latitude=HOME[0] + 0.036, longitude=HOME[1])  # ~4 km
    far = build_event(2, latitude=HOME[0] + 0.054, longitude=HOME[1])  # ~6 km

    near_score = score_event(profile, near, WEIGHTS)
    far_score = score_event(profile, far, WEIGHTS)

    assert near_score.location == 2
    assert far_score.location == 0
    assert near_score.total - far_score.total == pytest.approx(2)


def test_no_location_bonus_without_coordinates():
    profile = build_profile()
    event = build_event(1, latitude=HOME[0], longitude=HOME[1])
    assert score_event(profile, event, WEIGHTS).location == 0


def test_ties_break_on_start_then_id():
    profile = build_profile()
    later = build_event(1, start=NOW + timedelta(days=3))
    sooner_high_id = build_event(3, start=NOW + timedelta(days=2))
    sooner_low_id = build_event(2, start=NOW + timedelta(days=2))

    ranked = rank_events(profile, [later, sooner_high_id, sooner_low_id], WEIGHTS)
    assert [r.event.id for r in ranked] == [2, 3, 1]


def test_unjoinable_events_are_excluded():
    profile = build_profile()
    pool = [
        build_event(1, start=NOW - timedelta(hours=1)),
        build_event(2, status="pending"),
        build_event(3, status="cancelled"),
        build_event(4, slots=0),
        build_event(5, attendees=[EventParticipation(profile_id=1, status="confirmed")]),
        build_event(6),
    ]
    candidates, _ = select_candidates(profile, pool, NOW)
    assert [e.id for e in candidates] == [6]


def test_window_candidates_preferred():
    profile = build_profile(available_from=NOW + timedelta(days=1), available_to=NOW + timedelta(days=2))
    inside = build_event(1, start=NOW + timedelta(days=1, hours=2))
    outside = build_event(2, start=NOW + timedelta(days=5))

    candidates, relaxed = select_candidates(profile, [inside, outside], NOW)
    assert candidates == [inside]
    assert relaxed is False


def test_fallback_when_window_is_empty():
    profile = build_profile(available_from=NOW + timedelta(days=1), available_to=NOW + timedelta(days=2))
    outside = build_event(2, start=NOW + timedelta(days=5))

    result = find_best_match(profile, [outside], WEIGHTS, NOW)
    assert result.event is outside
    assert result.relaxed is True


def test_best_match_prefers_interests():
    profile = build_profile(interests=["wine tasting"], goals=["meet new people"])
    wine = build_event(1, title="Wine tasting evening", description="Meet new people over wine")
    games = build_event(2, title="Board games", description="Strategy games")

    result = find_best_match(profile, [games, wine], WEIGHTS, NOW)
    assert result.event is wine
    assert result.score == result.breakdown.total
    assert result.breakdown.interest > 0


def test_no_match_when_pool_is_empty():
    assert find_best_match(build_profile(), [], WEIGHTS, NOW) is None


def test_weights_from_config_match_defaults():
    assert ScoreWeights.from_config() == ScoreWeights()

from datetime import timedelta

import pytest
from pydantic import ValidationError

from dinematch.domain.events.schemas import JoinEventRequest
from dinematch.domain.events.service import EventService
from dinematch.domain.matching.schemas import SuggestEventRequest
from dinematch.domain.matching.scoring import ScoreWeights
from dinematch.domain.matching.service import MatchingService
from dinematch.models import Profile
from dinematch.shared.clock import utcnow
from dinematch.shared.errors import NotFoundError


@pytest.fixture
def service(db):
    return MatchingService(db, ScoreWeights())


def window(profile, days_from=0, days_to=7):
    now = utcnow()
    return SuggestEventRequest(
        profile_id=profile.id,
        available_from=now + timedelta(days=days_from),
        available_to=now + timedelta(days=days_to),
    )


def test_best_event_for_interests(db, service, make_profile, make_event):
    profile = make_profile(interests=["wine tasting"], goals=["networking"])
    make_event(title="Board games night", description="Strategy and snacks")
    wine = make_event(title="Wine tasting evening", description="Networking over natural wine")

    result = service.suggest_best_match(window(profile))

    assert result.event.id == wine.id
    assert result.relaxed is False
    assert result.breakdown.interest > 0


def test_availability_is_stored_on_the_profile(db, service, make_profile, make_event):
    profile = make_profile()
    make_event()
    request = window(profile, 1, 3)

    service.suggest_best_match(request)

    stored = db.get(Profile, profile.id)
    assert stored.available_from == request.available_from
    assert stored.available_to == request.available_to


def test_joined_events_are_not_suggested(db, service, make_profile, make_event):
    profile = make_profile()
    joined = make_event(title="Ramen crawl")
    other = make_event(title="Tapas night")
    EventService(db).join_event(JoinEventRequest(event_id=joined.id, profile_id=profile.id))

    assert service.suggest_best_match(window(profile)).event.id == other.id


def test_falls_back_outside_the_window(service, make_profile, make_event):
    profile = make_profile()
    far_off = make_event(start_in=timedelta(days=20))

    result = service.suggest_best_match(window(profile, 0, 2))
    assert result.event.id == far_off.id
    assert result.relaxed is True


def test_no_events_means_no_suggestion(service, make_profile):
    assert service.suggest_best_match(window(make_profile())) is None


def test_unknown_profile(service):
    now = utcnow()
    with pytest.raises(NotFoundError):
        service.suggest_best_match(
            SuggestEventRequest(profile_id=404, available_from=now, available_to=now + timedelta(days=1))
        )


def test_window_must_be_ordered():
    now = utcnow()
    with pytest.raises(ValidationError):
        SuggestEventRequest(profile_id=1, available_from=now + timedelta(days=1), available_to=now)

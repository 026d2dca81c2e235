"""
Event suggestion scoring.

A profile is scored against every candidate event as a weighted sum of
fuzzy text matches (interests, goals, soft attributes), a flat proximity
bonus and a bonus for how much of the event falls inside the profile's
availability window. Ties are broken by earliest start, then lowest id.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from ... import config
from ...shared.clock import utcnow
from ..scheduling.ledger import CLOSED_EVENT_STATUSES, participation_for
from .geo import distance_meters
from .similarity import compare_two_strings

logger = logging.getLogger(__name__)

NON_MATCHABLE_STATUSES = CLOSED_EVENT_STATUSES


class ScoreWeights(BaseModel):
    """Weights for one scoring run"""

    model_config = ConfigDict(frozen=True)

    interest: float = 3
    goal: float = 2
    soft: float = 1
    location: float = 2
    time_overlap_high: float = 2
    time_overlap_medium: float = 1
    location_radius_meters: float = 5000

    @classmethod
    def from_config(cls) -> "ScoreWeights":
        return cls(
            interest=config.SCORE_WEIGHT_INTEREST,
            goal=config.SCORE_WEIGHT_GOAL,
            soft=config.SCORE_WEIGHT_SOFT,
            location=config.SCORE_WEIGHT_LOCATION,
            time_overlap_high=config.SCORE_WEIGHT_TIME_HIGH,
            time_overlap_medium=config.SCORE_WEIGHT_TIME_MEDIUM,
            location_radius_meters=config.MATCH_RADIUS_METERS,
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    interest: float = 0.0
    goal: float = 0.0
    soft: float = 0.0
    location: float = 0.0
    time_overlap: float = 0.0

    @property
    def total(self) -> float:
        return self.interest + self.goal + self.soft + self.location + self.time_overlap


@dataclass(frozen=True)
class MatchResult:
    event: object
    breakdown: ScoreBreakdown
    relaxed: bool = False  # Found only after dropping the availability window

    @property
    def score(self) -> float:
        return self.breakdown.total


def event_text(event) -> str:
    return f"{event.title} {event.description}".lower()


def text_score(terms: Iterable[str], text: str, weight: float) -> float:
    """Summed, not averaged: every extra term can only add to the score"""
    return sum(compare_two_strings(text, term.lower()) * weight for term in terms if term)


def location_score(origin, destination, weights: ScoreWeights) -> float:
    if not origin or not destination:
        return 0.0
    if distance_meters(origin, destination) < weights.location_radius_meters:
        return weights.location
    return 0.0


def time_overlap_score(
    event_start: datetime,
    event_end: datetime,
    available_from: Optional[datetime],
    available_to: Optional[datetime],
    weights: ScoreWeights,
) -> float:
    if available_from is None or available_to is None:
        return 0.0

    total_range = (event_end - event_start).total_seconds()
    if total_range <= 0:
        return 0.0

    overlap_start = max(event_start, available_from)
    overlap_end = min(event_end, available_to)
    overlap = max(0.0, (overlap_end - overlap_start).total_seconds())

    ratio = overlap / total_range
    if ratio > 0.5:
        return weights.time_overlap_high
    if ratio > 0.25:
        return weights.time_overlap_medium
    return 0.0


def score_event(profile, event, weights: ScoreWeights) -> ScoreBreakdown:
    text = event_text(event)
    return ScoreBreakdown(
        interest=text_score(profile.interests or [], text, weights.interest),
        goal=text_score(profile.goals or [], text, weights.goal),
        soft=text_score(profile.soft_attributes, text, weights.soft),
        location=location_score(profile.location, event.location, weights),
        time_overlap=time_overlap_score(
            event.start_date, event.end_date, profile.available_from, profile.available_to, weights
        ),
    )


def is_joinable(event, profile_id: int, now: datetime) -> bool:
    """Upcoming, matchable status, not full and not already joined by the profile"""
    return (
        event.status not in NON_MATCHABLE_STATUSES
        and event.start_date >= now
        and not event.is_full
        and participation_for(event, profile_id) is None
    )


def in_availability_window(event, available_from: datetime, available_to: datetime) -> bool:
    return event.start_date <= available_to and event.end_date >= available_from


def select_candidates(profile, pool: Iterable, now: datetime) -> tuple[list, bool]:
    """
    Candidates inside the profile's availability window, falling back to
    every joinable upcoming event when the window yields nothing.

    Returns (candidates, relaxed).
    """
    joinable = [e for e in pool if is_joinable(e, profile.id, now)]

    if profile.available_from is not None and profile.available_to is not None:
        windowed = [e for e in joinable if in_availability_window(e, profile.available_from, profile.available_to)]
        if windowed:
            return windowed, False

    if joinable:
        logger.warning(f"⚠️ No events in availability window for profile {profile.id}, fallback triggered")
    return joinable, True


def rank_events(profile, candidates: Iterable, weights: ScoreWeights, relaxed: bool = False) -> list[MatchResult]:
    results = [MatchResult(event=e, breakdown=score_event(profile, e, weights), relaxed=relaxed) for e in candidates]
    results.sort(key=lambda r: (-r.score, r.event.start_date, r.event.id))
    return results


def find_best_match(
    profile,
    pool: Iterable,
    weights: Optional[ScoreWeights] = None,
    now: Optional[datetime] = None,
) -> Optional[MatchResult]:
    """Best-scoring joinable event for ``profile``, or None when nothing is available"""
    weights = weights or ScoreWeights.from_config()
    now = now or utcnow()

    candidates, relaxed = select_candidates(profile, pool, now)
    if not candidates:
        logger.info(f"❌ No events available for profile {profile.id}")
        return None

    best = rank_events(profile, candidates, weights, relaxed)[0]
    logger.info(f"[Match Result] Best Score: {best.score:.3f}, Event ID: {best.event.id}")
    return best

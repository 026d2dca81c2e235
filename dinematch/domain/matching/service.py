"""Matching service - Suggest the best event for a profile"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...shared.clock import utcnow
from ...shared.errors import NotFoundError
from ...shared.transactions import transactional
from ..events.repository import EventRepository
from ..profiles.repository import ProfileRepository
from .schemas import SuggestEventRequest
from .scoring import MatchResult, ScoreWeights, find_best_match

logger = logging.getLogger(__name__)


class MatchingService:
    """Service layer for event suggestions"""

    def __init__(self, db: Session, weights: Optional[ScoreWeights] = None):
        self.db = db
        self.weights = weights or ScoreWeights.from_config()
        self.events = EventRepository()
        self.profiles = ProfileRepository()

    @transactional("suggest best matching event")
    def suggest_best_match(self, data: SuggestEventRequest) -> Optional[MatchResult]:
        """
        Store the requested availability window on the profile, then rank
        every joinable upcoming event for it.

        Returns None when no event is available at all.
        """
        profile = self.profiles.get_profile_by_id(self.db, data.profile_id)
        if not profile:
            raise NotFoundError("Profile not found")

        profile.available_from = data.available_from
        profile.available_to = data.available_to
        self.db.commit()

        now = utcnow()
        pool = self.events.get_matchable_events(self.db, now)
        return find_best_match(profile, pool, self.weights, now)

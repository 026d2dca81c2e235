"""Profile service - Business logic for profiles and account deletion"""

import logging

from sqlalchemy.orm import Session

from ...models import DiningStatus, Profile
from ...shared.clock import utcnow
from ...shared.errors import InvalidStateError, NotFoundError
from ...shared.transactions import transactional
from ..events.service import EventService, is_event_live, is_event_upcoming
from ..scheduling import lifecycle
from .repository import ProfileRepository
from .schemas import ProfileCreate, ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def get_profile(self, profile_id: int) -> Profile:
        profile = self.repo.get_profile_by_id(self.db, profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    @transactional("create profile")
    def create_profile(self, data: ProfileCreate) -> Profile:
        profile = self.repo.create_profile(self.db, **data.model_dump())
        self.db.commit()
        logger.info(f"✅ Profile {profile.id} created")
        return profile

    @transactional("update profile")
    def update_profile(self, profile_id: int, data: ProfileUpdate) -> Profile:
        profile = self.get_profile(profile_id)
        profile = self.repo.update_profile(self.db, profile, **data.model_dump(exclude_none=True))
        self.db.commit()
        return profile

    def _ensure_deletable(self, profile_id: int) -> None:
        """
        Deletion is blocked while the profile hosts a live event, hosts an
        upcoming event with tickets sold, or attends a live event.
        """
        now = utcnow()
        for event in self.repo.get_hosted_events(self.db, profile_id):
            if is_event_live(event, now):
                raise InvalidStateError("Cannot delete account: You have a live event ongoing.")
            if is_event_upcoming(event, now) and len(event.attendees) > 0:
                raise InvalidStateError("Cannot delete account: An upcoming event has sold tickets.")

        for event in self.repo.get_attended_events(self.db, profile_id):
            if is_event_live(event, now):
                raise InvalidStateError(
                    "Cannot delete account: you are attending an event already, please let it complete first."
                )

    @transactional("delete profile")
    def delete_profile(self, profile_id: int) -> dict:
        """
        Delete a profile and everything that points at it:

        1. its participations are pulled from every event it attends, slots go back
        2. every event it hosts is deleted along with that event's participations
        3. personal dining it hosts, its join requests and its reviews are deleted
        4. personal dining where it is the guest is cancelled and unassigned

        Everything happens in one transaction.
        """
        profile = self.get_profile(profile_id)
        self._ensure_deletable(profile_id)

        events = EventService(self.db)
        left = events.remove_profile_participations(profile_id)
        hosted = events.remove_hosted_events(profile_id)
        hosted_dining = self.repo.delete_personal_dining_traces(self.db, profile_id)

        now = utcnow()
        for dining in self.repo.get_personal_dining_as_guest(self.db, profile_id):
            if not lifecycle.is_terminal(dining.status):
                lifecycle.transition(dining, DiningStatus.CANCELLED, now, reason="Guest account deleted")
            dining.guest_id = None

        self.repo.delete_profile(self.db, profile)
        self.db.commit()

        logger.info(
            f"🗑️ Profile {profile_id} deleted: left {left} event(s), removed {hosted} hosted event(s) "
            f"and {hosted_dining} hosted personal dining experience(s)"
        )
        return {"message": "Account deleted successfully"}

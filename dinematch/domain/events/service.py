"""Event service - Business logic for group dining events"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Event, ParticipationStatus
from ...shared.clock import utcnow
from ...shared.errors import (
    InvalidStateError,
    NotAttendingError,
    NotFoundError,
)
from ...shared.transactions import transactional
from ..profiles.repository import ProfileRepository
from ..restaurants.repository import RestaurantRepository
from ..scheduling.ledger import ensure_can_join, participation_for, remaining_slots
from .repository import EventRepository
from .schemas import EventCreate, EventFilters, EventReviewCreate, EventUpdate, HostReview, JoinEventRequest

logger = logging.getLogger(__name__)


def is_event_live(event: Event, now) -> bool:
    return event.start_date <= now <= event.end_date


def is_event_upcoming(event: Event, now) -> bool:
    return event.start_date > now


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventRepository()
        self.profiles = ProfileRepository()

    def get_event(self, event_id: int) -> Event:
        event = self.repo.get_event_by_id(self.db, event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def _get_profile(self, profile_id: int):
        profile = self.profiles.get_profile_by_id(self.db, profile_id)
        if not profile:
            raise NotFoundError(f"Profile with ID {profile_id} not found")
        return profile

    @transactional("create event")
    def create_event(self, data: EventCreate) -> Event:
        """Create an event, all capacity starts out as open slots"""
        self._get_profile(data.host_id)

        if data.restaurant_id is not None and not RestaurantRepository.get_restaurant_by_id(
            self.db, data.restaurant_id
        ):
            raise NotFoundError("Restaurant not found")

        event_data = data.model_dump(exclude_none=True)
        event_data["slots"] = data.no_of_attendees
        event = self.repo.create_event(self.db, **event_data)
        self.db.commit()
        logger.info(f"✅ Event {event.id} created by profile {data.host_id}")
        return event

    def list_events(self, filters: EventFilters) -> tuple[list[Event], int]:
        return self.repo.list_events(
            self.db, utcnow(), filters.text, filters.capacity, filters.page, filters.limit
        )

    def list_events_for_profile(self, profile_id: int, hosting: bool = True, attending: bool = True) -> list[Event]:
        """Events a profile hosts and/or attends, both when neither flag is set"""
        self._get_profile(profile_id)
        if not hosting and not attending:
            hosting = attending = True

        events: list[Event] = []
        if hosting:
            events.extend(self.repo.get_hosted_events(self.db, profile_id))
        if attending:
            events.extend(self.repo.get_attending_events(self.db, profile_id))
        return events

    @transactional("update event")
    def update_event(self, event_id: int, data: EventUpdate) -> Event:
        event = self.get_event(event_id)
        updates = data.model_dump(exclude_none=True)

        capacity = updates.get("no_of_attendees")
        if capacity is not None:
            attending = len(event.attendees)
            if capacity < attending:
                raise InvalidStateError(f"Capacity cannot drop below the {attending} current attendees")
            updates["slots"] = remaining_slots(capacity, attending)

        start = updates.get("start_date", event.start_date)
        end = updates.get("end_date", event.end_date)
        if end < start:
            raise InvalidStateError("end_date must not be before start_date")

        event = self.repo.update_event(self.db, event, **updates)
        self.db.commit()
        return event

    @transactional("delete event")
    def delete_event(self, event_id: int) -> dict:
        """Delete an event together with every participation in it"""
        event = self.get_event(event_id)
        attendee_count = len(event.attendees)
        self.repo.delete_event(self.db, event)
        self.db.commit()
        logger.info(f"🗑️ Event {event_id} deleted, {attendee_count} participation(s) removed")
        return {"message": "Event deleted", "event_id": event_id, "participations_removed": attendee_count}

    @transactional("join event")
    def join_event(self, data: JoinEventRequest) -> Event:
        """Take one slot of an event for a profile"""
        event = self.get_event(data.event_id)
        self._get_profile(data.profile_id)

        ensure_can_join(event, data.profile_id, utcnow())

        status = ParticipationStatus.CONFIRMED if not event.ticket_price else ParticipationStatus.PENDING
        self.repo.add_participation(self.db, event, data.profile_id, status.value)

        event.slots = remaining_slots(event.no_of_attendees, len(event.attendees))
        self.db.commit()

        logger.info(f"✅ Profile {data.profile_id} joined event {event.id}, {event.slots} slot(s) left")
        return event

    @transactional("leave event")
    def leave_event(self, event_id: int, profile_id: int) -> Event:
        """Give a slot back"""
        event = self.get_event(event_id)
        self._get_profile(profile_id)

        participation = participation_for(event, profile_id)
        if participation is None:
            raise NotAttendingError()

        event.attendees.remove(participation)
        if event.slots is not None:
            event.slots = min(event.no_of_attendees, event.slots + 1)
        self.db.commit()

        logger.info(f"👋 Profile {profile_id} left event {event.id}, {event.slots} slot(s) left")
        return event

    def remove_profile_participations(self, profile_id: int) -> int:
        """
        Pull every participation of a profile out of its events and hand the
        slots back. Part of account deletion, the caller commits.
        """
        participations = self.repo.get_participations_for_profile(self.db, profile_id)
        for participation in participations:
            event = participation.event
            event.attendees.remove(participation)
            event.slots = min(event.no_of_attendees, event.slots + 1)
        self.db.flush()
        return len(participations)

    def remove_hosted_events(self, profile_id: int) -> int:
        """Delete every event a profile hosts. Part of account deletion, the caller commits."""
        hosted = self.repo.get_hosted_events(self.db, profile_id)
        for event in hosted:
            self.repo.delete_event(self.db, event)
        return len(hosted)

    @transactional("add event review")
    def add_review(self, data: EventReviewCreate):
        event = self.get_event(data.event_id)

        if utcnow() < event.end_date:
            raise InvalidStateError("Event has not finished yet")

        if not any(p.profile_id == data.profile_id for p in event.attendees):
            raise InvalidStateError("Only attendees can review the event")

        if self.repo.get_review(self.db, event.id, data.profile_id):
            raise InvalidStateError("User has already reviewed this event")

        review = self.repo.add_review(self.db, event, data.profile_id, data.rating, data.review)
        self.db.commit()
        return review

    def get_host_reviews(self, profile_id: int, top: Optional[int] = None) -> list[HostReview]:
        """Reviews left on a host's events, optionally only the ``top`` best rated"""
        reviews = [
            HostReview(
                rating=r.rating,
                review=r.review,
                reviewer_id=r.reviewer_id,
                reviewer_name=r.reviewer.full_name if r.reviewer else None,
                event_name=r.event.title,
            )
            for r in self.repo.get_host_reviews(self.db, profile_id)
        ]
        if top:
            reviews = sorted(reviews, key=lambda r: r.rating, reverse=True)[:top]
        return reviews

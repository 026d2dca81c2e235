"""Event repository - Database operations for events and participation"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ...models import Event, EventParticipation, EventReview, EventStatus
from ..matching.scoring import NON_MATCHABLE_STATUSES


class EventRepository:
    """Repository for event database operations"""

    @staticmethod
    def get_event_by_id(db: Session, event_id: int) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def create_event(db: Session, **event_data) -> Event:
        event = Event(**event_data)
        db.add(event)
        db.flush()
        return event

    @staticmethod
    def update_event(db: Session, event: Event, **updates) -> Event:
        for key, value in updates.items():
            if value is not None and hasattr(event, key):
                setattr(event, key, value)
        db.flush()
        return event

    @staticmethod
    def list_events(
        db: Session,
        now: datetime,
        text: Optional[str] = None,
        min_capacity: Optional[int] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Event], int]:
        """Events that have not ended yet, soonest first, with total count"""
        query = db.query(Event).filter(Event.end_date >= now, Event.status != EventStatus.CANCELLED.value)

        if text:
            search_term = f"%{text.lower()}%"
            query = query.filter(
                or_(
                    Event.title.ilike(search_term),
                    Event.description.ilike(search_term),
                    Event.address.ilike(search_term),
                )
            )

        if min_capacity:
            query = query.filter(Event.no_of_attendees >= min_capacity)

        total = query.with_entities(func.count(Event.id)).scalar() or 0
        events = query.order_by(Event.start_date.asc()).offset((page - 1) * limit).limit(limit).all()
        return events, total

    @staticmethod
    def get_hosted_events(db: Session, profile_id: int) -> list[Event]:
        return db.query(Event).filter(Event.host_id == profile_id).order_by(Event.start_date.asc()).all()

    @staticmethod
    def get_attending_events(db: Session, profile_id: int) -> list[Event]:
        return (
            db.query(Event)
            .join(EventParticipation, EventParticipation.event_id == Event.id)
            .filter(EventParticipation.profile_id == profile_id)
            .order_by(Event.start_date.asc())
            .all()
        )

    @staticmethod
    def get_matchable_events(db: Session, now: datetime) -> list[Event]:
        """Upcoming events in a matchable status, attendees preloaded for scoring"""
        return (
            db.query(Event)
            .options(selectinload(Event.attendees))
            .filter(Event.start_date >= now, Event.status.notin_(NON_MATCHABLE_STATUSES))
            .order_by(Event.start_date.asc(), Event.id.asc())
            .all()
        )

    @staticmethod
    def add_participation(db: Session, event: Event, profile_id: int, status: str) -> EventParticipation:
        participation = EventParticipation(profile_id=profile_id, status=status)
        event.attendees.append(participation)
        db.flush()
        return participation

    @staticmethod
    def get_participations_for_profile(db: Session, profile_id: int) -> list[EventParticipation]:
        return db.query(EventParticipation).filter(EventParticipation.profile_id == profile_id).all()

    @staticmethod
    def delete_event(db: Session, event: Event) -> None:
        """Delete an event, its participation records and reviews go with it"""
        db.delete(event)
        db.flush()

    @staticmethod
    def get_host_reviews(db: Session, host_id: int) -> list[EventReview]:
        return (
            db.query(EventReview)
            .join(Event, Event.id == EventReview.event_id)
            .filter(Event.host_id == host_id)
            .order_by(EventReview.created_at.desc())
            .all()
        )

    @staticmethod
    def get_review(db: Session, event_id: int, reviewer_id: int) -> Optional[EventReview]:
        return (
            db.query(EventReview)
            .filter(EventReview.event_id == event_id, EventReview.reviewer_id == reviewer_id)
            .first()
        )

    @staticmethod
    def add_review(db: Session, event: Event, reviewer_id: int, rating: int, review: Optional[str]) -> EventReview:
        event_review = EventReview(reviewer_id=reviewer_id, rating=rating, review=review)
        event.reviews.append(event_review)
        db.flush()
        return event_review

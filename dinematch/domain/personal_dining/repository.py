"""Personal dining repository - Database operations for one-on-one dining"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import DiningReview, DiningStatus, JoinRequest, JoinRequestStatus, PersonalDining
from ..scheduling.time_slots import TimeSlot, time_slot_clause


class PersonalDiningRepository:
    """Repository for personal dining database operations"""

    @staticmethod
    def get_by_id(db: Session, personal_dining_id: int) -> Optional[PersonalDining]:
        return db.query(PersonalDining).filter(PersonalDining.id == personal_dining_id).first()

    @staticmethod
    def create(db: Session, **dining_data) -> PersonalDining:
        dining = PersonalDining(**dining_data)
        db.add(dining)
        db.flush()
        return dining

    @staticmethod
    def get_accepted_for_profile(
        db: Session, profile_id: int, exclude_id: Optional[int] = None
    ) -> list[PersonalDining]:
        """Accepted engagements where the profile is host or guest"""
        query = db.query(PersonalDining).filter(
            PersonalDining.status == DiningStatus.ACCEPTED.value,
            or_(PersonalDining.host_id == profile_id, PersonalDining.guest_id == profile_id),
        )
        if exclude_id is not None:
            query = query.filter(PersonalDining.id != exclude_id)
        return query.all()

    @staticmethod
    def list_public(db: Session, now: datetime, time_slot: Optional[TimeSlot] = None) -> list[PersonalDining]:
        """Public invitations still open for join requests, soonest first"""
        query = db.query(PersonalDining).filter(
            PersonalDining.is_public.is_(True),
            PersonalDining.status == DiningStatus.PENDING.value,
            PersonalDining.guest_id.is_(None),
            or_(PersonalDining.expires_at.is_(None), PersonalDining.expires_at > now),
        )
        if time_slot is not None:
            query = query.filter(time_slot_clause(time_slot, PersonalDining.dining_time))
        return query.order_by(PersonalDining.dining_date.asc(), PersonalDining.dining_time.asc()).all()

    @staticmethod
    def list_for_user(
        db: Session,
        profile_id: int,
        status: Optional[DiningStatus] = None,
        as_host: bool = True,
        as_guest: bool = True,
    ) -> list[PersonalDining]:
        query = db.query(PersonalDining)

        if status:
            query = query.filter(PersonalDining.status == DiningStatus(status).value)

        if as_host and as_guest:
            query = query.filter(or_(PersonalDining.host_id == profile_id, PersonalDining.guest_id == profile_id))
        elif as_host:
            query = query.filter(PersonalDining.host_id == profile_id)
        elif as_guest:
            query = query.filter(PersonalDining.guest_id == profile_id)

        return query.order_by(PersonalDining.created_at.desc(), PersonalDining.id.desc()).all()

    @staticmethod
    def list_with_pending_requests(db: Session, host_id: int) -> list[PersonalDining]:
        return (
            db.query(PersonalDining)
            .filter(
                PersonalDining.host_id == host_id,
                PersonalDining.is_public.is_(True),
                PersonalDining.join_requests.any(JoinRequest.status == JoinRequestStatus.PENDING.value),
            )
            .order_by(PersonalDining.created_at.desc(), PersonalDining.id.desc())
            .all()
        )

    @staticmethod
    def add_join_request(
        db: Session, dining: PersonalDining, requester_id: int, message: Optional[str], now: datetime
    ) -> JoinRequest:
        request = JoinRequest(
            requester_id=requester_id,
            status=JoinRequestStatus.PENDING.value,
            message=message or None,
            requested_at=now,
        )
        dining.join_requests.append(request)
        # Touch the parent so concurrent requests serialize on its version
        dining.updated_at = now
        db.flush()
        return request

    @staticmethod
    def add_review(db: Session, dining: PersonalDining, **review_data) -> DiningReview:
        review = DiningReview(**review_data)
        dining.reviews.append(review)
        db.flush()
        return review

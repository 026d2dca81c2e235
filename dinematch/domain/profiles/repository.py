"""Profile repository - Database operations for profiles and their cleanup"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import (
    DiningReview,
    Event,
    EventParticipation,
    EventReview,
    JoinRequest,
    PersonalDining,
    Profile,
)


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_profile_by_id(db: Session, profile_id: int) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def create_profile(db: Session, **profile_data) -> Profile:
        profile = Profile(**profile_data)
        db.add(profile)
        db.flush()
        return profile

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        """Update a profile with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(profile, key):
                setattr(profile, key, value)
        db.flush()
        return profile

    @staticmethod
    def get_hosted_events(db: Session, profile_id: int) -> list[Event]:
        return db.query(Event).filter(Event.host_id == profile_id).all()

    @staticmethod
    def get_attended_events(db: Session, profile_id: int) -> list[Event]:
        return (
            db.query(Event)
            .join(EventParticipation, EventParticipation.event_id == Event.id)
            .filter(EventParticipation.profile_id == profile_id)
            .all()
        )

    @staticmethod
    def get_personal_dining_as_guest(db: Session, profile_id: int) -> list[PersonalDining]:
        return db.query(PersonalDining).filter(PersonalDining.guest_id == profile_id).all()

    @staticmethod
    def delete_personal_dining_traces(db: Session, profile_id: int) -> int:
        """
        Remove the profile's hosted personal dining, its join requests and its
        reviews. Returns the number of hosted engagements removed.
        """
        hosted = db.query(PersonalDining).filter(PersonalDining.host_id == profile_id).all()
        for dining in hosted:
            db.delete(dining)
        db.flush()

        db.query(JoinRequest).filter(JoinRequest.requester_id == profile_id).delete(synchronize_session=False)
        db.query(DiningReview).filter(DiningReview.reviewer_id == profile_id).delete(synchronize_session=False)
        db.query(EventReview).filter(EventReview.reviewer_id == profile_id).delete(synchronize_session=False)
        return len(hosted)

    @staticmethod
    def delete_profile(db: Session, profile: Profile) -> None:
        db.delete(profile)
        db.flush()

from datetime import timedelta
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from . import config
from .database import Base
from .shared.clock import utcnow


class EventStatus(str, Enum):
    PENDING = "pending"  # Draft, not yet open for joining
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class ParticipationStatus(str, Enum):
    PENDING = "pending"  # Waiting for ticket payment
    CONFIRMED = "confirmed"


class DiningStatus(str, Enum):
    PENDING = "pending"  # Created, waiting for guest response
    ACCEPTED = "accepted"  # Guest assigned
    DECLINED = "declined"
    CONFIRMED = "confirmed"  # Both parties confirmed, payment processed
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class InvitationType(str, Enum):
    DIRECT = "direct"  # Invitation to a specific profile
    OPEN = "open"  # Anyone can accept


class JoinRequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ReviewerRole(str, Enum):
    HOST = "host"
    GUEST = "guest"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    gender = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)
    profession = Column(String(255), nullable=True)
    industry = Column(String(255), nullable=True)
    interests = Column(JSON, default=list, nullable=False)  # Free-text interests
    goals = Column(JSON, default=list, nullable=False)  # Free-text goals
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address = Column(String(500), nullable=True)
    # Overwritten on every suggestion request
    available_from = Column(DateTime, nullable=True)
    available_to = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    hosted_events = relationship("Event", back_populates="host")
    participations = relationship("EventParticipation", back_populates="profile")

    @property
    def location(self):
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)

    @property
    def soft_attributes(self) -> list[str]:
        return [v for v in (self.bio, self.profession, self.industry, self.gender) if v]


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500), nullable=False)
    # {"monday": {"open": "09:00", "close": "22:00", "closed": false}, ...}
    opening_hours = Column(JSON, default=dict, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    host_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address = Column(String(500), nullable=True)
    ticket_price = Column(Float, default=0, nullable=False)
    no_of_attendees = Column(Integer, nullable=False)  # Total capacity
    slots = Column(Integer, nullable=False)  # Remaining capacity
    is_public = Column(Boolean, default=True, nullable=False)
    status = Column(String(20), default=EventStatus.PUBLISHED.value, nullable=False, index=True)
    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    __mapper_args__ = {"version_id_col": version_id}

    host = relationship("Profile", back_populates="hosted_events")
    restaurant = relationship("Restaurant")
    attendees = relationship(
        "EventParticipation",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventParticipation.id",
    )
    reviews = relationship("EventReview", back_populates="event", cascade="all, delete-orphan")

    @property
    def location(self):
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)

    @property
    def is_full(self) -> bool:
        return self.slots is not None and self.slots <= 0


class EventParticipation(Base):
    __tablename__ = "event_participations"
    __table_args__ = (UniqueConstraint("event_id", "profile_id", name="uq_participation_event_profile"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), default=ParticipationStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    event = relationship("Event", back_populates="attendees")
    profile = relationship("Profile", back_populates="participations")


class EventReview(Base):
    __tablename__ = "event_reviews"
    __table_args__ = (UniqueConstraint("event_id", "reviewer_id", name="uq_event_review_reviewer"),)

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    event = relationship("Event", back_populates="reviews")
    reviewer = relationship("Profile")


class PersonalDining(Base):
    __tablename__ = "personal_dining"

    id = Column(Integer, primary_key=True, index=True)
    host_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("profiles.id"), nullable=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    dining_date = Column(Date, nullable=False, index=True)
    dining_time = Column(String(5), nullable=False)  # HH:MM
    estimated_duration = Column(Integer, nullable=False)  # minutes, 30-300
    special_requests = Column(Text, nullable=True)
    status = Column(String(20), default=DiningStatus.PENDING.value, nullable=False, index=True)
    invitation_type = Column(String(20), default=InvitationType.OPEN.value, nullable=False, index=True)
    invitation_message = Column(Text, nullable=True)
    estimated_cost_per_person = Column(Float, default=0, nullable=False)
    host_pays_all = Column(Boolean, default=False, nullable=False)
    accepted_at = Column(DateTime, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)
    # Commission tracking, set on completion
    total_bill_amount = Column(Float, default=0, nullable=False)
    platform_commission = Column(Float, default=0, nullable=False)
    diner_discount = Column(Float, default=0, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False, index=True)
    is_visible_on_map = Column(Boolean, default=False, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=True, index=True)
    tags = Column(JSON, default=list, nullable=False)  # business, casual, romantic, etc.
    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version_id}

    host = relationship("Profile", foreign_keys=[host_id])
    guest = relationship("Profile", foreign_keys=[guest_id])
    restaurant = relationship("Restaurant")
    join_requests = relationship(
        "JoinRequest",
        back_populates="personal_dining",
        cascade="all, delete-orphan",
        order_by="JoinRequest.id",
    )
    reviews = relationship("DiningReview", back_populates="personal_dining", cascade="all, delete-orphan")

    def review_by(self, role: ReviewerRole):
        return next((r for r in self.reviews if r.role == role.value), None)


class JoinRequest(Base):
    __tablename__ = "join_requests"

    id = Column(Integer, primary_key=True, index=True)
    personal_dining_id = Column(Integer, ForeignKey("personal_dining.id"), nullable=False, index=True)
    requester_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), default=JoinRequestStatus.PENDING.value, nullable=False, index=True)
    message = Column(Text, nullable=True)
    requested_at = Column(DateTime, default=utcnow, nullable=False)
    responded_at = Column(DateTime, nullable=True)

    personal_dining = relationship("PersonalDining", back_populates="join_requests")
    requester = relationship("Profile")


class DiningReview(Base):
    __tablename__ = "dining_reviews"
    __table_args__ = (UniqueConstraint("personal_dining_id", "role", name="uq_dining_review_role"),)

    id = Column(Integer, primary_key=True, index=True)
    personal_dining_id = Column(Integer, ForeignKey("personal_dining.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    role = Column(String(10), nullable=False)  # host, guest
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, default=utcnow, nullable=False)

    personal_dining = relationship("PersonalDining", back_populates="reviews")
    reviewer = relationship("Profile")


def is_visible_on_map(dining: PersonalDining, now=None) -> bool:
    """Public, still pending, no guest yet and not expired"""
    now = now or utcnow()
    return bool(
        dining.is_public
        and dining.status == DiningStatus.PENDING.value
        and dining.guest_id is None
        and (dining.expires_at is None or dining.expires_at > now)
    )


@event.listens_for(Event, "before_insert")
def _default_event_slots(_mapper, _connection, target: Event):
    if target.slots is None:
        target.slots = target.no_of_attendees


@event.listens_for(PersonalDining, "before_insert")
def _personal_dining_before_insert(_mapper, _connection, target: PersonalDining):
    if target.expires_at is None and (
        target.invitation_type == InvitationType.OPEN.value or target.is_public
    ):
        target.expires_at = utcnow() + timedelta(days=config.INVITATION_TTL_DAYS)
    target.is_visible_on_map = is_visible_on_map(target)


@event.listens_for(PersonalDining, "before_update")
def _personal_dining_before_update(_mapper, _connection, target: PersonalDining):
    target.is_visible_on_map = is_visible_on_map(target)

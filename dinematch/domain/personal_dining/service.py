"""Personal dining service - One-on-one invitations, join requests and lifecycle"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ... import config
from ...models import (
    DiningStatus,
    InvitationType,
    PersonalDining,
    ReviewerRole,
)
from ...shared.clock import utcnow
from ...shared.errors import (
    DuplicateParticipationError,
    ExpiredError,
    InvalidStateError,
    NotFoundError,
    SchedulingConflictError,
    UnauthorizedError,
)
from ...shared.transactions import transactional
from ..profiles.repository import ProfileRepository
from ..restaurants.service import RestaurantService, check_open_at
from ..scheduling import lifecycle
from ..scheduling.conflicts import find_conflict
from ..scheduling.ledger import accept_join_request, decline_join_request, pending_request_for
from ..scheduling.time_slots import TimeSlot
from .repository import PersonalDiningRepository
from .schemas import (
    CompletePersonalDining,
    DiningReviewCreate,
    JoinRequestCreate,
    JoinRequestResponse,
    PersonalDiningCreate,
    RespondToInvitation,
    ResponseType,
)

logger = logging.getLogger(__name__)


class PersonalDiningService:
    """Service layer for personal dining business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PersonalDiningRepository()
        self.profiles = ProfileRepository()

    # Lookups

    def _get(self, personal_dining_id: int) -> PersonalDining:
        dining = self.repo.get_by_id(self.db, personal_dining_id)
        if not dining:
            raise NotFoundError("Personal dining experience not found")
        return dining

    def _get_profile(self, profile_id: int, label: str = "Profile"):
        profile = self.profiles.get_profile_by_id(self.db, profile_id)
        if not profile:
            raise NotFoundError(f"{label} profile not found")
        return profile

    def _expire_or_raise(self, dining: PersonalDining, now: datetime) -> None:
        """Lazy expiry: persist the cancellation, then report it"""
        if lifecycle.expire_if_due(dining, now):
            self.db.commit()
            logger.info(f"⌛ Personal dining {dining.id} expired and was cancelled")
            raise ExpiredError()

    def _ensure_no_conflict(self, profile_id: int, dining: PersonalDining) -> None:
        existing = self.repo.get_accepted_for_profile(self.db, profile_id, exclude_id=dining.id)
        clash = find_conflict(profile_id, dining, existing)
        if clash is not None:
            hours = config.CONFLICT_BUFFER_MINUTES / 60
            raise SchedulingConflictError(
                "This dining time conflicts with another accepted experience. "
                f"You must have at least a {hours:g}-hour gap between experiences."
            )

    @transactional("get personal dining")
    def get_personal_dining(self, personal_dining_id: int) -> PersonalDining:
        """Fetch one engagement, cancelling it first if its invitation has lapsed"""
        dining = self._get(personal_dining_id)
        if lifecycle.expire_if_due(dining, utcnow()):
            self.db.commit()
        return dining

    # Creation

    @transactional("create personal dining")
    def create_personal_dining(self, data: PersonalDiningCreate) -> PersonalDining:
        logger.info(f"📥 Creating personal dining for host {data.host_id}")

        self._get_profile(data.host_id, "Host")
        restaurant = RestaurantService(self.db).get_active_restaurant(data.restaurant_id)
        if data.guest_id is not None:
            self._get_profile(data.guest_id, "Guest")

        dining_at = datetime.combine(data.dining_date, datetime.strptime(data.dining_time, "%H:%M").time())
        if dining_at <= utcnow():
            raise InvalidStateError("Dining date must be in the future")

        check_open_at(restaurant, dining_at)

        dining_data = data.model_dump()
        dining_data.update(
            status=DiningStatus.PENDING.value,
            invitation_type=(InvitationType.DIRECT if data.guest_id else InvitationType.OPEN).value,
        )
        dining = self.repo.create(self.db, **dining_data)
        self.db.commit()

        logger.info(f"✅ Personal dining {dining.id} created ({dining.invitation_type}, public={dining.is_public})")
        return dining

    # Direct and open invitations

    @transactional("respond to personal dining")
    def respond_to_invitation(self, personal_dining_id: int, data: RespondToInvitation) -> PersonalDining:
        """Accept or decline a direct invitation, or accept an open private one"""
        now = utcnow()
        dining = self._get(personal_dining_id)
        self._expire_or_raise(dining, now)

        if dining.is_public:
            raise InvalidStateError("Public dining experiences are joined through join requests")

        if dining.invitation_type == InvitationType.DIRECT.value and dining.guest_id != data.guest_id:
            raise UnauthorizedError("You are not the invited guest")

        if dining.host_id == data.guest_id:
            raise InvalidStateError("Cannot respond to your own invitation")

        if dining.status != DiningStatus.PENDING.value:
            raise InvalidStateError("This invitation is no longer available")

        if data.response == ResponseType.ACCEPT:
            self._get_profile(data.guest_id, "Guest")
            self._ensure_no_conflict(data.guest_id, dining)
            dining.guest_id = data.guest_id
            lifecycle.transition(dining, DiningStatus.ACCEPTED, now)
        else:
            if dining.invitation_type == InvitationType.OPEN.value:
                raise InvalidStateError("Open invitations cannot be declined")
            lifecycle.transition(
                dining, DiningStatus.DECLINED, now, reason=data.message or "Guest declined invitation"
            )

        self.db.commit()
        return dining

    # Public dining join requests

    @transactional("request to join personal dining")
    def request_to_join(self, personal_dining_id: int, data: JoinRequestCreate) -> PersonalDining:
        now = utcnow()
        self._get_profile(data.requester_id, "Requester")
        dining = self._get(personal_dining_id)

        if not dining.is_public:
            raise InvalidStateError("This is not a public dining experience")

        self._expire_or_raise(dining, now)

        if dining.status != DiningStatus.PENDING.value:
            raise InvalidStateError("This experience is no longer available")

        if dining.guest_id is not None:
            raise InvalidStateError("This experience already has a guest")

        if dining.host_id == data.requester_id:
            raise InvalidStateError("Cannot request to join your own experience")

        if pending_request_for(dining, data.requester_id) is not None:
            raise DuplicateParticipationError("You already have a pending request for this experience")

        self._ensure_no_conflict(data.requester_id, dining)

        self.repo.add_join_request(self.db, dining, data.requester_id, data.message, now)
        self.db.commit()
        logger.info(f"🙋 Profile {data.requester_id} requested to join personal dining {dining.id}")
        return dining

    @transactional("respond to join request")
    def respond_to_join_request(
        self, personal_dining_id: int, host_id: int, data: JoinRequestResponse
    ) -> PersonalDining:
        """Host accepts one requester (declining the rest) or declines a single request"""
        now = utcnow()
        dining = self._get(personal_dining_id)

        if dining.host_id != host_id:
            raise UnauthorizedError("You are not the host of this experience")

        self._expire_or_raise(dining, now)

        if pending_request_for(dining, data.requester_id) is None:
            raise NotFoundError("Join request not found or already responded to")

        if data.response == ResponseType.ACCEPT:
            if dining.status != DiningStatus.PENDING.value or dining.guest_id is not None:
                raise InvalidStateError("This experience is no longer available")
            self._ensure_no_conflict(data.requester_id, dining)
            accept_join_request(dining, data.requester_id, now)
        else:
            decline_join_request(dining, data.requester_id, now)
            # Decline alone leaves the parent row untouched, bump it for the version check
            dining.updated_at = now

        self.db.commit()
        return dining

    # Lifecycle after acceptance

    def _ensure_participant(self, dining: PersonalDining, profile_id: int, action: str) -> None:
        if profile_id not in (dining.host_id, dining.guest_id):
            raise UnauthorizedError(f"You are not authorized to {action} this experience")

    @transactional("confirm personal dining")
    def confirm_personal_dining(self, personal_dining_id: int, profile_id: int) -> PersonalDining:
        dining = self._get(personal_dining_id)
        self._ensure_participant(dining, profile_id, "confirm")
        lifecycle.ensure_transition(
            dining.status, DiningStatus.CONFIRMED, "Experience must be accepted before confirmation"
        )
        lifecycle.transition(dining, DiningStatus.CONFIRMED, utcnow())
        self.db.commit()
        return dining

    @transactional("cancel personal dining")
    def cancel_personal_dining(
        self, personal_dining_id: int, profile_id: int, reason: Optional[str] = None
    ) -> PersonalDining:
        dining = self._get(personal_dining_id)
        self._ensure_participant(dining, profile_id, "cancel")

        if dining.status == DiningStatus.COMPLETED.value:
            raise InvalidStateError("Cannot cancel a completed experience")
        if dining.status == DiningStatus.CANCELLED.value:
            raise InvalidStateError("Experience is already cancelled")

        lifecycle.transition(dining, DiningStatus.CANCELLED, utcnow(), reason=reason or "Cancelled by user")
        self.db.commit()
        return dining

    @transactional("complete personal dining")
    def complete_personal_dining(self, data: CompletePersonalDining) -> PersonalDining:
        """Close an accepted engagement and record the bill with the flat commission split"""
        dining = self._get(data.personal_dining_id)
        lifecycle.ensure_transition(
            dining.status, DiningStatus.COMPLETED, "Experience must be accepted before completion"
        )
        lifecycle.complete(dining, data.total_bill_amount, utcnow())
        self.db.commit()
        logger.info(
            f"💰 Personal dining {dining.id} completed: bill={dining.total_bill_amount:.2f}, "
            f"commission={dining.platform_commission:.2f}, discount={dining.diner_discount:.2f}"
        )
        return dining

    @transactional("add personal dining review")
    def add_review(self, data: DiningReviewCreate):
        dining = self._get(data.personal_dining_id)

        if dining.status != DiningStatus.COMPLETED.value:
            raise InvalidStateError("Can only review completed experiences")

        if data.reviewer_id == dining.host_id:
            role = ReviewerRole.HOST
        elif data.reviewer_id == dining.guest_id:
            role = ReviewerRole.GUEST
        else:
            raise UnauthorizedError("You are not authorized to review this experience")

        if dining.review_by(role) is not None:
            raise InvalidStateError(f"{role.value.capitalize()} has already reviewed this experience")

        review = self.repo.add_review(
            self.db,
            dining,
            reviewer_id=data.reviewer_id,
            role=role.value,
            rating=data.rating,
            comment=data.comment,
            reviewed_at=utcnow(),
        )
        self.db.commit()
        return review

    # Listings

    def list_public_personal_dining(self, time_slot: Optional[TimeSlot] = None) -> list[PersonalDining]:
        return self.repo.list_public(self.db, utcnow(), time_slot)

    def list_personal_dining_for_user(
        self,
        profile_id: int,
        status: Optional[DiningStatus] = None,
        as_host: bool = True,
        as_guest: bool = True,
    ) -> list[PersonalDining]:
        return self.repo.list_for_user(self.db, profile_id, status, as_host, as_guest)

    def get_join_requests_for_host(self, host_id: int) -> list[PersonalDining]:
        return self.repo.list_with_pending_requests(self.db, host_id)

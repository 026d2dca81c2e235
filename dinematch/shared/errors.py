"""
Error taxonomy for scheduling and matching operations.

Domain errors are expected, caller-visible outcomes. Storage failures are
reported separately through OperationFailedError so that "not found" never
gets confused with "could not reach the database".
"""

from typing import Optional


class DomainError(Exception):
    """Base class for recoverable, caller-visible outcomes"""

    kind = "DomainError"
    default_message = "Operation not allowed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    """Referenced profile, event, restaurant or engagement does not exist"""

    kind = "NotFound"
    default_message = "Resource not found"


class InvalidStateError(DomainError):
    """Engagement is in a state that forbids the operation"""

    kind = "InvalidState"
    default_message = "Operation not allowed in the current state"


class CapacityExceededError(DomainError):
    """Event has no remaining slots"""

    kind = "CapacityExceeded"
    default_message = "Event is fully booked"


class DuplicateParticipationError(DomainError):
    """Profile already joined or requested this engagement"""

    kind = "DuplicateParticipation"
    default_message = "Already participating"


class NotAttendingError(InvalidStateError):
    """Profile tried to leave an event it never joined"""

    kind = "NotAttending"
    default_message = "User is not attending this event"


class SchedulingConflictError(DomainError):
    """Engagement overlaps an accepted one, buffer included"""

    kind = "SchedulingConflict"
    default_message = "This dining time conflicts with another accepted experience"


class UnauthorizedError(DomainError):
    """Actor is not allowed to act on this engagement"""

    kind = "Unauthorized"
    default_message = "Not authorized for this engagement"


class ExpiredError(DomainError):
    """Invitation expiry has passed"""

    kind = "Expired"
    default_message = "This invitation has expired"


class OperationFailedError(Exception):
    """Storage or infrastructure failure, distinct from the domain taxonomy"""

    kind = "OperationFailed"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Failed to {operation}")


class ConcurrentUpdateError(OperationFailedError):
    """A conditional update kept losing to concurrent writers"""

    kind = "ConcurrentUpdate"

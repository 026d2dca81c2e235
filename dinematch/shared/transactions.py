"""
Transaction handling for service operations.

Records that take part in races (events and personal dining) carry a
version column, so a concurrent write surfaces as StaleDataError on flush.
The decorator below rolls back and re-runs the whole operation, which
re-reads the record and repeats every check against fresh state.
"""

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from .. import config
from .errors import ConcurrentUpdateError, DomainError, OperationFailedError

logger = logging.getLogger(__name__)


def transactional(operation: str):
    """Wrap a service method that uses ``self.db``"""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            attempts = config.CONCURRENCY_RETRIES + 1
            for attempt in range(1, attempts + 1):
                try:
                    return func(self, *args, **kwargs)
                except DomainError as e:
                    self.db.rollback()
                    logger.warning(f"⚠️ {operation} rejected: {e.kind}: {e.message}")
                    raise
                except StaleDataError as e:
                    self.db.rollback()
                    if attempt < attempts:
                        logger.warning(
                            f"⚠️ Concurrent update during {operation}, retrying ({attempt}/{attempts - 1})"
                        )
                        continue
                    logger.error(f"❌ {operation} lost to concurrent updates after {attempts} attempts")
                    raise ConcurrentUpdateError(operation) from e
                except SQLAlchemyError as e:
                    self.db.rollback()
                    logger.error(f"❌ {operation} failed: {e}")
                    raise OperationFailedError(operation) from e

        return wrapper

    return decorator

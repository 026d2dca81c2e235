import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from dinematch import config
from dinematch.shared.errors import ConcurrentUpdateError, NotFoundError, OperationFailedError
from dinematch.shared.transactions import transactional


class FakeSession:
    def __init__(self):
        self.rollbacks = 0

    def rollback(self):
        self.rollbacks += 1


class Flaky:
    def __init__(self, failures):
        self.db = FakeSession()
        self.failures = list(failures)
        self.calls = 0

    @transactional("do the thing")
    def run(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return "done"


def test_stale_write_is_retried(monkeypatch):
    monkeypatch.setattr(config, "CONCURRENCY_RETRIES", 1)
    flaky = Flaky([StaleDataError("version mismatch")])

    assert flaky.run() == "done"
    assert flaky.calls == 2
    assert flaky.db.rollbacks == 1


def test_retries_exhausted(monkeypatch):
    monkeypatch.setattr(config, "CONCURRENCY_RETRIES", 1)
    flaky = Flaky([StaleDataError("first"), StaleDataError("second")])

    with pytest.raises(ConcurrentUpdateError) as exc_info:
        flaky.run()
    assert exc_info.value.operation == "do the thing"
    assert flaky.calls == 2


def test_no_retry_when_disabled(monkeypatch):
    monkeypatch.setattr(config, "CONCURRENCY_RETRIES", 0)
    flaky = Flaky([StaleDataError("stale")])

    with pytest.raises(ConcurrentUpdateError):
        flaky.run()
    assert flaky.calls == 1


def test_storage_failure_is_not_a_domain_error():
    flaky = Flaky([OperationalError("SELECT 1", {}, Exception("database is locked"))])

    with pytest.raises(OperationFailedError) as exc_info:
        flaky.run()
    assert not isinstance(exc_info.value, ConcurrentUpdateError)
    assert str(exc_info.value) == "Failed to do the thing"
    assert flaky.db.rollbacks == 1


def test_domain_errors_pass_through_after_rollback():
    flaky = Flaky([NotFoundError("Event not found")])

    with pytest.raises(NotFoundError, match="Event not found"):
        flaky.run()
    assert flaky.calls == 1
    assert flaky.db.rollbacks == 1

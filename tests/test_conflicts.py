from datetime import date, timedelta

from dinematch.domain.scheduling.conflicts import engagement_window, find_conflict, has_conflict
from dinematch.models import DiningStatus, PersonalDining

PROFILE = 7


def dining(id, dining_time, duration, status=DiningStatus.ACCEPTED, host_id=PROFILE, guest_id=99, day=date(2024, 1, 1)):
    return PersonalDining(
        id=id,
        host_id=host_id,
        guest_id=guest_id,
        dining_date=day,
        dining_time=dining_time,
        estimated_duration=duration,
        status=status.value,
    )


def test_window_is_start_plus_duration():
    start, end = engagement_window(dining(1, "19:00", 90))
    assert (start.hour, start.minute) == (19, 0)
    assert end - start == timedelta(minutes=90)


def test_gap_inside_buffer_conflicts():
    existing = dining(1, "19:00", 90)  # ends 20:30
    candidate = dining(2, "21:00", 60, status=DiningStatus.PENDING)
    assert has_conflict(PROFILE, candidate, [existing])


def test_gap_outside_buffer_is_free():
    existing = dining(1, "19:00", 90)
    candidate = dining(2, "23:00", 60, status=DiningStatus.PENDING)
    assert not has_conflict(PROFILE, candidate, [existing])


def test_buffer_applies_before_existing_too():
    existing = dining(1, "19:00", 90)
    candidate = dining(2, "16:30", 60, status=DiningStatus.PENDING)  # ends 17:30, 1.5h before
    assert has_conflict(PROFILE, candidate, [existing])


def test_conflict_is_symmetric():
    a = dining(1, "19:00", 90)
    b = dining(2, "21:00", 60)
    assert has_conflict(PROFILE, a, [b]) == has_conflict(PROFILE, b, [a]) is True

    c = dining(3, "23:00", 60)
    assert has_conflict(PROFILE, a, [c]) == has_conflict(PROFILE, c, [a]) is False


def test_only_accepted_engagements_count():
    candidate = dining(2, "19:30", 60, status=DiningStatus.PENDING)
    others = [
        dining(3, "19:00", 90, status=DiningStatus.PENDING),
        dining(4, "19:00", 90, status=DiningStatus.CANCELLED),
        dining(5, "19:00", 90, status=DiningStatus.COMPLETED),
    ]
    assert not has_conflict(PROFILE, candidate, others)


def test_candidate_is_not_compared_with_itself():
    record = dining(1, "19:00", 90)
    assert not has_conflict(PROFILE, record, [record])


def test_engagements_of_other_profiles_are_ignored():
    candidate = dining(2, "19:30", 60, status=DiningStatus.PENDING)
    strangers = dining(3, "19:00", 90, host_id=50, guest_id=51)
    assert find_conflict(PROFILE, candidate, [strangers]) is None


def test_custom_buffer():
    existing = dining(1, "19:00", 90)
    candidate = dining(2, "21:00", 60, status=DiningStatus.PENDING)
    assert not has_conflict(PROFILE, candidate, [existing], buffer=timedelta(minutes=15))

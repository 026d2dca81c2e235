import os
from datetime import timedelta

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from dinematch import models  # noqa: E402,F401
from dinematch.database import Base  # noqa: E402
from dinematch.domain.events.schemas import EventCreate, EventUpdate  # noqa: E402
from dinematch.domain.events.service import EventService  # noqa: E402
from dinematch.domain.personal_dining.schemas import PersonalDiningCreate  # noqa: E402
from dinematch.domain.personal_dining.service import PersonalDiningService  # noqa: E402
from dinematch.domain.profiles.schemas import ProfileCreate  # noqa: E402
from dinematch.domain.profiles.service import ProfileService  # noqa: E402
from dinematch.domain.restaurants.schemas import RestaurantCreate  # noqa: E402
from dinematch.domain.restaurants.service import RestaurantService  # noqa: E402
from dinematch.shared.clock import utcnow  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def make_profile(db):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {"full_name": f"Diner {counter['n']}"}
        data.update(overrides)
        return ProfileService(db).create_profile(ProfileCreate(**data))

    return _make


@pytest.fixture
def restaurant(db):
    return RestaurantService(db).create_restaurant(
        RestaurantCreate(
            name="Trattoria Roma",
            latitude=6.5244,
            longitude=3.3792,
            address="12 Marina Road",
        )
    )


@pytest.fixture
def make_event(db, make_profile):
    def _make(host=None, start_in=timedelta(days=2), duration=timedelta(hours=3), **overrides):
        host = host or make_profile()
        start = utcnow() + start_in
        data = {
            "host_id": host.id,
            "title": "Supper club",
            "description": "Long table dinner with strangers",
            "start_date": start,
            "end_date": start + duration,
            "no_of_attendees": 4,
        }
        data.update(overrides)
        return EventService(db).create_event(EventCreate(**data))

    return _make


@pytest.fixture
def make_dining(db, make_profile, restaurant):
    def _make(host=None, days_ahead=3, dining_time="19:00", **overrides):
        host = host or make_profile()
        data = {
            "host_id": host.id,
            "restaurant_id": restaurant.id,
            "title": "Dinner for two",
            "description": "Tasting menu",
            "dining_date": (utcnow() + timedelta(days=days_ahead)).date(),
            "dining_time": dining_time,
            "estimated_duration": 90,
        }
        data.update(overrides)
        return PersonalDiningService(db).create_personal_dining(PersonalDiningCreate(**data))

    return _make


@pytest.fixture
def finish_event(db):
    """Move an event's window into the past, for attendees who joined while it was open"""

    def _finish(event, ended_ago=timedelta(hours=1), duration=timedelta(hours=2)):
        end = utcnow() - ended_ago
        return EventService(db).update_event(event.id, EventUpdate(start_date=end - duration, end_date=end))

    return _finish

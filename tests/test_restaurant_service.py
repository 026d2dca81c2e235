import pytest
from pydantic import ValidationError

from dinematch.domain.restaurants.schemas import RestaurantCreate, RestaurantUpdate
from dinematch.domain.restaurants.service import RestaurantService
from dinematch.models import Restaurant
from dinematch.shared.errors import NotFoundError

LAGOS = (6.5244, 3.3792)


@pytest.fixture
def service(db):
    return RestaurantService(db)


@pytest.fixture
def make_restaurant(service):
    def _make(name, latitude=LAGOS[0], longitude=LAGOS[1], **overrides):
        data = {"name": name, "latitude": latitude, "longitude": longitude, "address": f"{name} street"}
        data.update(overrides)
        return service.create_restaurant(RestaurantCreate(**data))

    return _make


def test_nearby_restaurants_are_sorted_and_bounded(service, make_restaurant):
    make_restaurant("Far away grill", latitude=7.3775, longitude=3.9470)
    make_restaurant("Up the road", latitude=LAGOS[0] + 0.01)
    make_restaurant("Next door")
    make_restaurant("Closed down", is_active=False)

    nearby = service.find_nearby_restaurants(*LAGOS)

    assert [r.name for r in nearby] == ["Next door", "Up the road"]
    assert [r.distance_km for r in nearby] == [0.0, 1.1]


def test_nearby_radius_is_inclusive_after_rounding(service, make_restaurant):
    make_restaurant("Up the road", latitude=LAGOS[0] + 0.01)

    assert [r.name for r in service.find_nearby_restaurants(*LAGOS, radius_km=1.1)] == ["Up the road"]
    assert service.find_nearby_restaurants(*LAGOS, radius_km=1) == []


def test_list_restaurants_searches_active_ones(service, make_restaurant):
    make_restaurant("Sushi bar", description="Omakase counter")
    make_restaurant("Taco stand")
    make_restaurant("Old sushi place", is_active=False)
    make_restaurant("Bistro", address="1 Sushi lane")

    restaurants, total = service.list_restaurants(search="sushi")

    assert total == 2
    assert [r.name for r in restaurants] == ["Bistro", "Sushi bar"]


def test_list_restaurants_pages(service, make_restaurant):
    for name in ("Alpha", "Bravo", "Charlie"):
        make_restaurant(name)

    restaurants, total = service.list_restaurants(page=2, limit=2)
    assert total == 3
    assert [r.name for r in restaurants] == ["Charlie"]


def test_update_restaurant(service, make_restaurant):
    restaurant = make_restaurant("Trattoria")

    restaurant = service.update_restaurant(
        restaurant.id,
        RestaurantUpdate(address="5 Harbour road", opening_hours={"monday": {"open": "12:00", "close": "23:00"}}),
    )

    assert restaurant.name == "Trattoria"
    assert restaurant.address == "5 Harbour road"
    assert restaurant.opening_hours["monday"]["close"] == "23:00"


def test_update_rejects_unknown_weekday():
    with pytest.raises(ValidationError):
        RestaurantUpdate(opening_hours={"funday": {"closed": True}})


def test_update_unknown_restaurant(service):
    with pytest.raises(NotFoundError):
        service.update_restaurant(404, RestaurantUpdate(name="Nowhere"))


def test_delete_deactivates(db, service, make_restaurant):
    restaurant = make_restaurant("Trattoria")

    assert service.delete_restaurant(restaurant.id) == {"message": "Restaurant deactivated successfully"}

    assert db.get(Restaurant, restaurant.id).is_active is False
    assert service.list_restaurants() == ([], 0)
    assert service.find_nearby_restaurants(*LAGOS) == []
    with pytest.raises(NotFoundError):
        service.get_active_restaurant(restaurant.id)

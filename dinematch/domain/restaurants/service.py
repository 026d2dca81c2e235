"""Restaurant service - Registration, discovery and opening-hours checks"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Restaurant
from ...shared.errors import InvalidStateError, NotFoundError
from ...shared.transactions import transactional
from ..matching.geo import distance_meters
from .repository import RestaurantRepository
from .schemas import WEEKDAYS, NearbyRestaurant, RestaurantCreate, RestaurantResponse, RestaurantUpdate

logger = logging.getLogger(__name__)


def _hhmm_to_int(value: str) -> int:
    return int(value.replace(":", ""))


def check_open_at(restaurant: Restaurant, when: datetime) -> None:
    """
    Raise InvalidStateError unless the restaurant is open at ``when``.

    Days without configured hours are treated as open, the closing time is
    inclusive.
    """
    day = WEEKDAYS[when.weekday()]
    hours = (restaurant.opening_hours or {}).get(day)
    if not hours:
        return

    if hours.get("closed"):
        raise InvalidStateError(f"Restaurant is closed on {day}s")

    open_time, close_time = hours.get("open"), hours.get("close")
    if not open_time or not close_time:
        return

    requested = when.hour * 100 + when.minute
    if requested < _hhmm_to_int(open_time) or requested > _hhmm_to_int(close_time):
        raise InvalidStateError(
            f"Restaurant is closed at {when:%H:%M}. Open hours: {open_time} - {close_time}"
        )


class RestaurantService:
    """Service layer for restaurant business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RestaurantRepository()

    def get_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self.repo.get_restaurant_by_id(self.db, restaurant_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def get_active_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self.repo.get_restaurant_by_id(self.db, restaurant_id)
        if not restaurant or not restaurant.is_active:
            raise NotFoundError("Restaurant not found or inactive")
        return restaurant

    @transactional("create restaurant")
    def create_restaurant(self, data: RestaurantCreate) -> Restaurant:
        restaurant_data = data.model_dump()
        restaurant = self.repo.create_restaurant(self.db, **restaurant_data)
        self.db.commit()
        logger.info(f"✅ Restaurant {restaurant.id} registered: {restaurant.name}")
        return restaurant

    @transactional("update restaurant")
    def update_restaurant(self, restaurant_id: int, data: RestaurantUpdate) -> Restaurant:
        restaurant = self.get_restaurant(restaurant_id)
        restaurant = self.repo.update_restaurant(self.db, restaurant, **data.model_dump(exclude_none=True))
        self.db.commit()
        return restaurant

    @transactional("delete restaurant")
    def delete_restaurant(self, restaurant_id: int) -> dict:
        """Deactivate a restaurant, dining records keep pointing at it"""
        restaurant = self.get_restaurant(restaurant_id)
        self.repo.update_restaurant(self.db, restaurant, is_active=False)
        self.db.commit()
        logger.info(f"🗑️ Restaurant {restaurant_id} deactivated")
        return {"message": "Restaurant deactivated successfully"}

    def list_restaurants(
        self, search: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> tuple[list[Restaurant], int]:
        return self.repo.list_active(self.db, search, page, limit)

    def find_nearby_restaurants(
        self, latitude: float, longitude: float, radius_km: float = 10
    ) -> list[NearbyRestaurant]:
        """Active restaurants within ``radius_km``, nearest first"""
        origin = (latitude, longitude)
        nearby = []
        for restaurant in self.repo.get_active_restaurants(self.db):
            distance_km = round(distance_meters(origin, (restaurant.latitude, restaurant.longitude)) / 1000, 1)
            if distance_km <= radius_km:
                data = RestaurantResponse.model_validate(restaurant).model_dump()
                nearby.append(NearbyRestaurant(**data, distance_km=distance_km))

        nearby.sort(key=lambda r: r.distance_km)
        return nearby

"""Restaurant repository - Database operations for restaurants"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import Restaurant


class RestaurantRepository:
    """Repository for restaurant database operations"""

    @staticmethod
    def get_restaurant_by_id(db: Session, restaurant_id: int) -> Optional[Restaurant]:
        return db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()

    @staticmethod
    def create_restaurant(db: Session, **restaurant_data) -> Restaurant:
        restaurant = Restaurant(**restaurant_data)
        db.add(restaurant)
        db.flush()
        return restaurant

    @staticmethod
    def update_restaurant(db: Session, restaurant: Restaurant, **updates) -> Restaurant:
        for key, value in updates.items():
            if value is not None and hasattr(restaurant, key):
                setattr(restaurant, key, value)
        db.flush()
        return restaurant

    @staticmethod
    def get_active_restaurants(db: Session) -> list[Restaurant]:
        return db.query(Restaurant).filter(Restaurant.is_active.is_(True)).order_by(Restaurant.id.asc()).all()

    @staticmethod
    def list_active(
        db: Session,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Restaurant], int]:
        """Active restaurants by name, with total count"""
        query = db.query(Restaurant).filter(Restaurant.is_active.is_(True))

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    Restaurant.name.ilike(search_term),
                    Restaurant.description.ilike(search_term),
                    Restaurant.address.ilike(search_term),
                )
            )

        total = query.with_entities(func.count(Restaurant.id)).scalar() or 0
        restaurants = (
            query.order_by(Restaurant.name.asc(), Restaurant.id.asc()).offset((page - 1) * limit).limit(limit).all()
        )
        return restaurants, total

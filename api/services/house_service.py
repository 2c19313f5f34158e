# api/services/house_service.py

from __future__ import annotations

from extensions import db
from models import House
from api.utils.errors import ValidationError


class HouseService:

    @staticmethod
    def list_houses() -> list[House]:
        return House.query.order_by(House.points.desc(), House.name.asc()).all()

    @staticmethod
    def get_house(house_id: int) -> House:
        house = db.session.get(House, house_id)
        if not house:
            raise LookupError("House not found.")
        return house

    @classmethod
    def award_points(cls, house_id: int, raw_points) -> House:
        """
        Add (or, with a negative value, deduct) points. Totals never go below 0.
        """
        house = cls.get_house(house_id)
        if isinstance(raw_points, bool):
            raise ValidationError("points must be a whole number.")
        try:
            points = int(raw_points)
        except (TypeError, ValueError):
            raise ValidationError("points must be a whole number.")
        if points == 0:
            raise ValidationError("points must not be zero.")

        house.points = max((house.points or 0) + points, 0)
        db.session.commit()
        return house

# backend/showroom/store/vehicle_store.py
"""
Vehicle Store
The only gateway to the vehicles table. Handlers and agents depend on the
narrow VehicleStore interface; SqlAlchemyVehicleStore is the production
implementation bound to a request-scoped session.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Protocol, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.vehicle_model import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class VehicleFilters:
    brand: Optional[str] = None
    model: Optional[str] = None
    type: Optional[str] = None
    year: Optional[int] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class VehicleStore(Protocol):
    # ----- CRUD -----
    def get(self, vehicle_id: int) -> Optional[Vehicle]: ...

    def list(self, filters: VehicleFilters, offset: int = 0, limit: Optional[int] = None) -> List[Vehicle]: ...

    def count(self, filters: VehicleFilters) -> int: ...

    def add(self, vehicle: Vehicle) -> Vehicle: ...

    def save(self, vehicle: Vehicle) -> Vehicle: ...

    def delete(self, vehicle: Vehicle) -> None: ...

    # ----- Aggregates -----
    def added_timestamps(self) -> List[datetime]: ...

    def count_by_brand(self) -> List[Tuple[str, int]]: ...

    def count_by_type(self) -> List[Tuple[str, int, Decimal]]: ...

    def count_in_price_range(self, lower: int, upper: Optional[int]) -> int:
        """Count vehicles with lower <= price < upper (no upper bound when None)."""
        ...


class SqlAlchemyVehicleStore:
    """VehicleStore backed by a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, vehicle_id: int) -> Optional[Vehicle]:
        return self.db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()

    def list(self, filters: VehicleFilters, offset: int = 0, limit: Optional[int] = None) -> List[Vehicle]:
        query = self._filtered(filters).order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, filters: VehicleFilters) -> int:
        return self._filtered(filters).count()

    def _filtered(self, filters: VehicleFilters):
        query = self.db.query(Vehicle)

        if filters.brand:
            query = query.filter(Vehicle.brand == filters.brand)
        if filters.model:
            query = query.filter(Vehicle.model == filters.model)
        if filters.type:
            query = query.filter(Vehicle.type == filters.type)
        if filters.year:
            query = query.filter(Vehicle.year == filters.year)
        if filters.min_price:
            query = query.filter(Vehicle.price >= filters.min_price)
        if filters.max_price:
            query = query.filter(Vehicle.price <= filters.max_price)
        return query

    def add(self, vehicle: Vehicle) -> Vehicle:
        self.db.add(vehicle)
        return self._commit(vehicle)

    def save(self, vehicle: Vehicle) -> Vehicle:
        self.db.add(vehicle)
        return self._commit(vehicle)

    def delete(self, vehicle: Vehicle) -> None:
        self.db.delete(vehicle)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _commit(self, vehicle: Vehicle) -> Vehicle:
        try:
            self.db.commit()
        except Exception as e:
            logger.error(f"Failed to persist vehicle: {e}")
            self.db.rollback()
            raise
        self.db.refresh(vehicle)
        return vehicle

    def added_timestamps(self) -> List[datetime]:
        rows = self.db.query(Vehicle.created_at).filter(Vehicle.created_at.isnot(None)).all()
        return [created_at for (created_at,) in rows]

    def count_by_brand(self) -> List[Tuple[str, int]]:
        count = func.count(Vehicle.id).label('count')
        rows = self.db.query(Vehicle.brand, count).group_by(Vehicle.brand).order_by(
            count.desc(), Vehicle.brand
        ).all()
        return [(brand, count) for brand, count in rows]

    def count_by_type(self) -> List[Tuple[str, int, Decimal]]:
        count = func.count(Vehicle.id).label('count')
        rows = self.db.query(
            Vehicle.type,
            count,
            func.coalesce(func.sum(Vehicle.price), 0).label('price')
        ).group_by(Vehicle.type).order_by(count.desc(), Vehicle.type).all()
        return [(vehicle_type, count, price) for vehicle_type, count, price in rows]

    def count_in_price_range(self, lower: int, upper: Optional[int]) -> int:
        query = self.db.query(Vehicle).filter(Vehicle.price >= lower)
        if upper is not None:
            query = query.filter(Vehicle.price < upper)
        return query.count()

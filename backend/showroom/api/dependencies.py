from fastapi import Depends
from sqlalchemy.orm import Session

from ..agents.analytics_agent.aggregator import AnalyticsAggregator
from ..core.database import get_db
from ..store.vehicle_store import SqlAlchemyVehicleStore, VehicleStore


def get_vehicle_store(db: Session = Depends(get_db)) -> VehicleStore:
    return SqlAlchemyVehicleStore(db)


def get_analytics_aggregator(store: VehicleStore = Depends(get_vehicle_store)) -> AnalyticsAggregator:
    return AnalyticsAggregator(store)

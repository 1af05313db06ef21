# backend/showroom/agents/analytics_agent/aggregator.py

"""
Inventory Analytics Aggregator
Derives read-only statistics from the vehicle store on every call.
"""
import logging
from collections import Counter
from typing import List, NamedTuple, Optional

from ...core.exceptions import AnalyticsUnavailableError
from ...store.vehicle_store import VehicleStore

logger = logging.getLogger(__name__)

DAY = "day"
WEEK = "week"
MONTH = "month"


class PriceBucket(NamedTuple):
    label: str
    min: int
    max: Optional[int]  # inclusive; None means unbounded


# Evaluated in this order, each counted independently
PRICE_BUCKETS = (
    PriceBucket("0-10000", 0, 10000),
    PriceBucket("10001-25000", 10001, 25000),
    PriceBucket("25001-50000", 25001, 50000),
    PriceBucket("50001-75000", 50001, 75000),
    PriceBucket("75001-100000", 75001, 100000),
    PriceBucket("100000+", 100001, None),
)


def resolve_period(period: Optional[str]) -> str:
    """Anything other than 'week' or 'month' groups by calendar day."""
    if period in (WEEK, MONTH):
        return period
    return DAY


def _bucket_key(created_at, period: str):
    if period == WEEK:
        return created_at.isocalendar()[1]
    if period == MONTH:
        return created_at.month
    return created_at.date()


class AnalyticsAggregator:
    def __init__(self, store: VehicleStore):
        self.store = store

    def vehicles_added(self, period: Optional[str] = None) -> List[dict]:
        period = resolve_period(period)
        try:
            timestamps = self.store.added_timestamps()
        except Exception as e:
            logger.error(f"vehicles_added failed: {e}", exc_info=True)
            raise AnalyticsUnavailableError("vehicles added") from e

        counts = Counter(_bucket_key(ts, period) for ts in timestamps)
        return [
            {"period": key.isoformat() if period == DAY else str(key), "count": count}
            for key, count in sorted(counts.items())
        ]

    def count_by_brand(self) -> List[dict]:
        try:
            rows = self.store.count_by_brand()
        except Exception as e:
            logger.error(f"count_by_brand failed: {e}", exc_info=True)
            raise AnalyticsUnavailableError("count by brand") from e

        rows = sorted(rows, key=lambda row: (-row[1], row[0]))
        return [{"brand": brand, "count": count} for brand, count in rows]

    def count_by_type(self) -> List[dict]:
        try:
            rows = self.store.count_by_type()
        except Exception as e:
            logger.error(f"count_by_type failed: {e}", exc_info=True)
            raise AnalyticsUnavailableError("count by type") from e

        rows = sorted(rows, key=lambda row: (-row[1], row[0]))
        return [
            {"type": vehicle_type, "count": count, "price": float(price or 0)}
            for vehicle_type, count, price in rows
        ]

    def count_by_price_range(self) -> List[dict]:
        """
        Six fixed buckets, one store count per bucket.
        A single failing count fails the whole view; no partial list is returned.
        """
        counts = []
        for bucket in PRICE_BUCKETS:
            # Integer bounds, so "< max + 1" also covers fractional prices such as 10000.50
            upper = bucket.max + 1 if bucket.max is not None else None
            try:
                count = self.store.count_in_price_range(bucket.min, upper)
            except Exception as e:
                logger.error(f"Price bucket {bucket.label} failed: {e}", exc_info=True)
                raise AnalyticsUnavailableError(f"price bucket {bucket.label}") from e
            counts.append({"label": bucket.label, "count": count})
        return counts

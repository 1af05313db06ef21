# backend/showroom/api/v1/analytics.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from ...agents.analytics_agent.aggregator import AnalyticsAggregator
from ...core.exceptions import AnalyticsUnavailableError
from ...core.security import require_admin
from ...schemas.analytics_schema import BrandCount, PeriodCount, PriceRangeCount, TypeCount
from ..dependencies import get_analytics_aggregator

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/vehicles-added", response_model=List[PeriodCount])
def vehicles_added(
    period: Optional[str] = Query(None, description="'week' or 'month'; anything else groups by day"),
    aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator)
):
    """
    Vehicles added per day, ISO week or month, oldest bucket first
    """
    try:
        return aggregator.vehicles_added(period)
    except AnalyticsUnavailableError:
        raise HTTPException(status_code=500, detail="Server error")


@router.get("/count-by-brand", response_model=List[BrandCount])
def count_by_brand(aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator)):
    """Total vehicle count by brand, largest first"""
    try:
        return aggregator.count_by_brand()
    except AnalyticsUnavailableError:
        raise HTTPException(status_code=500, detail="Server error")


@router.get("/count-by-type", response_model=List[TypeCount])
def count_by_type(aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator)):
    """Total vehicle count and summed price by type, largest first"""
    try:
        return aggregator.count_by_type()
    except AnalyticsUnavailableError:
        raise HTTPException(status_code=500, detail="Server error")


@router.get("/count-by-price-range", response_model=List[PriceRangeCount])
def count_by_price_range(aggregator: AnalyticsAggregator = Depends(get_analytics_aggregator)):
    """Vehicle count for each of the six fixed price buckets"""
    try:
        return aggregator.count_by_price_range()
    except AnalyticsUnavailableError:
        raise HTTPException(status_code=500, detail="Server error")

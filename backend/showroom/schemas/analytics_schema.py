from pydantic import BaseModel, Field
from typing import Optional

class PeriodCount(BaseModel):
    period: str = Field(..., description="Day (YYYY-MM-DD), ISO week number or month number")
    count: int

class BrandCount(BaseModel):
    brand: str
    count: int

class TypeCount(BaseModel):
    type: str
    count: int
    price: Optional[float] = Field(None, description="Sum of listing prices in the group")

class PriceRangeCount(BaseModel):
    label: str
    count: int

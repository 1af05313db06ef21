from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

class VehicleBase(BaseModel):
    type: str = Field(..., description="Body type, e.g. SUV, Sedan")
    brand: str = Field(..., description="Vehicle brand")
    model: str = Field(..., description="Vehicle model name")
    color: Optional[str] = None
    engine_size: Optional[str] = Field(None, description="Engine description, e.g. 2.0L Turbo")
    year: Optional[int] = None
    price: float = Field(0, description="Listing price")
    description: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class Vehicle(VehicleBase):
    """Schema for reading a vehicle (output)"""
    id: int
    images: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class VehicleList(BaseModel):
    data: List[Vehicle]
    total: int
    page: int = 1
    limit: int = 20

class DescriptionRequest(BaseModel):
    """Attributes sent to the standalone description generator"""
    brand: Optional[str] = None
    model: Optional[str] = None
    type: Optional[str] = None
    color: Optional[str] = None
    engine_size: Optional[str] = None
    year: Optional[int] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class DescriptionResponse(BaseModel):
    description: str

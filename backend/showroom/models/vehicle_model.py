from sqlalchemy import Column, Integer, String, Numeric, JSON, Text, DateTime
from sqlalchemy.sql import func
from ..core.database import Base

class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False)
    brand = Column(String, nullable=False, index=True)
    model = Column(String, nullable=False)
    color = Column(String)
    engine_size = Column(String)
    year = Column(Integer)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    description = Column(Text)  # Generated or hand-written, always editable
    images = Column(JSON, nullable=False, default=list)  # Ordered upload paths / URLs
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

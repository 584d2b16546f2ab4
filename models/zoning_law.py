# models/zoning_law.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ZoningLawBase(BaseModel):
    zone_type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    regulations: str = Field(..., min_length=1)


class ZoningLawCreate(ZoningLawBase):
    pass


class ZoningLawUpdate(BaseModel):
    zone_type: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    regulations: Optional[str] = Field(None, min_length=1)


class ZoningLawRead(ZoningLawBase):
    id: str
    created_at: Optional[datetime] = None

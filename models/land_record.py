# models/land_record.py

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from models.enums import OwnershipStatus


def _parse_timestamp(value):
    if isinstance(value, str) and value.endswith("Z"):
        return value.replace("Z", "+00:00")
    return value


# -------------------------------------------------
# Shared fields
# -------------------------------------------------
class LandRecordBase(BaseModel):
    title: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    coordinates: Optional[str] = Field(None, description="Free-form GPS coordinates, e.g. '6.5244, 3.3792'")
    size: float = Field(..., gt=0)
    size_unit: str = "acres"
    zoning: str = Field(..., min_length=1)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None


# -------------------------------------------------
# Create
# -------------------------------------------------
class LandRecordCreate(LandRecordBase):
    """
    ownership_status is never taken from the client: landowners
    always create pending records, admins always create verified ones.
    owner_id is honoured for admins only.
    """
    owner_id: Optional[str] = None


# -------------------------------------------------
# Update (PUT, partial)
# -------------------------------------------------
class LandRecordUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    coordinates: Optional[str] = None
    size: Optional[float] = Field(None, gt=0)
    size_unit: Optional[str] = None
    zoning: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None

    # Admin-only
    ownership_status: Optional[OwnershipStatus] = None
    owner_id: Optional[str] = None


ADMIN_ONLY_LAND_FIELDS = {"ownership_status", "owner_id", "verified_by"}


class LandStatusUpdate(BaseModel):
    status: OwnershipStatus


# -------------------------------------------------
# Read (Supabase → API response)
# -------------------------------------------------
class OwnerSummary(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None


class LandRecordRead(LandRecordBase):
    id: str
    ownership_status: OwnershipStatus
    owner_id: Optional[str] = None
    verified_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[OwnerSummary] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, v):
        return _parse_timestamp(v)


class LandStatusCounts(BaseModel):
    total: int = 0
    verified: int = 0
    pending: int = 0
    disputed: int = 0


class MyLandsResponse(BaseModel):
    data: List[LandRecordRead]
    counts: LandStatusCounts

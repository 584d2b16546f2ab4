# models/profile.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from models.enums import SignupRole


# ===============================================================
# PROFILE (one row per auth.users identity)
# ===============================================================

class ProfileRead(BaseModel):
    id: str
    email: str
    full_name: str
    role: str                    # kept as str; unknown roles route to /auth
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v):
        return str(v)


class ProfileUpdate(BaseModel):
    """
    Self-service edit. Role changes are not exposed here:
    a user picks their role once, at signup.
    """
    full_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    role: SignupRole = SignupRole.public
    phone: Optional[str] = None

from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, field_validator

from models.enums import DocumentType, DocumentStatus


# ======================================================
# CREATE (landowner submission)
# ======================================================

class DocumentCreate(BaseModel):
    """
    Evidence submitted against one of the submitter's own land records.
    submitted_by is always the caller; status always starts pending.
    """
    land_record_id: str = Field(..., min_length=1)
    document_type: DocumentType = DocumentType.deed
    document_url: str = Field(..., min_length=1)
    notes: Optional[str] = None

    @field_validator("document_url")
    @classmethod
    def validate_url(cls, v):
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("document_url must be an http(s) URL")
        return v


# ======================================================
# REVIEW (admin approve / reject)
# ======================================================

class DocumentReview(BaseModel):
    action: Literal["approved", "rejected"]
    notes: Optional[str] = None


# ======================================================
# READ
# ======================================================

class LandSummary(BaseModel):
    id: str
    title: Optional[str] = None
    location: Optional[str] = None


class SubmitterSummary(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None


class DocumentRead(BaseModel):
    id: str
    land_record_id: Optional[str] = None
    document_type: DocumentType
    document_url: str
    status: DocumentStatus
    submitted_by: Optional[str] = None
    reviewed_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    land: Optional[LandSummary] = None
    submitter: Optional[SubmitterSummary] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_created_at(cls, v):
        if isinstance(v, str) and v.endswith("Z"):
            return v.replace("Z", "+00:00")
        return v


class DocumentStatusCounts(BaseModel):
    total: int = 0
    approved: int = 0
    pending: int = 0
    rejected: int = 0


class MyDocumentsResponse(BaseModel):
    data: List[DocumentRead]
    counts: DocumentStatusCounts

# models/transaction.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from models.enums import TransactionType, TransactionStatus


class TransactionCreate(BaseModel):
    land_record_id: str
    from_owner: str
    to_owner: str
    transaction_type: TransactionType
    amount: Optional[float] = Field(None, ge=0)


class TransactionStatusUpdate(BaseModel):
    status: TransactionStatus


class TransactionRead(BaseModel):
    id: str
    land_record_id: Optional[str] = None
    from_owner: Optional[str] = None
    to_owner: Optional[str] = None
    transaction_type: TransactionType
    amount: Optional[float] = None
    status: TransactionStatus
    approved_by: Optional[str] = None
    created_at: Optional[datetime] = None

"""Pydantic request/response schemas used by the API.

Request schemas accept any JSON value so the service layer can apply the
presence/truthiness rules itself and answer with 400 instead of the
framework's 422. Response schemas expose the camelCase field names API
clients rely on.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class StudentIn(BaseModel):
    """Payload for creating a student."""
    name: Any = None
    fees: Any = None


class PaymentIn(BaseModel):
    """Payload for recording a payment."""
    amount: Any = None


class StudentOut(BaseModel):
    """Student representation returned by every student endpoint."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    fees: float
    fee_paid: Optional[float] = Field(default=0, alias="feePaid")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class MessageOut(BaseModel):
    """Body of 400/404 responses."""
    message: str


class ErrorOut(BaseModel):
    """Body of 500 responses."""
    error: str

"""
Pydantic Schemas for Request/Response Validation

Wire format shared by the proxy and its clients. Field names on the
wire are camelCase to match the spreadsheet script; Python code uses
snake_case through aliases.

Author: Khalil Bannouri
Version: 4.0.0
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any
from datetime import datetime


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderCreate(BaseModel):
    """One order unit as posted by the client."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., min_length=1, alias="orderId", examples=["order_1718000000000_k3j9x0a"])
    timestamp: str = Field(..., min_length=1, examples=["2024-06-10T09:30:00.000Z"])
    user_id: str = Field(..., min_length=1, alias="userId", examples=["Mika_Cat"])
    nickname: str = Field(..., max_length=100, examples=["Mika"])
    animal: str = Field(default="", max_length=50, examples=["🐱 Cat"])
    item: str = Field(..., min_length=1, max_length=100, examples=["Cafe Latte"])
    price: int = Field(..., ge=0, examples=[450])
    completed: bool = Field(default=False)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class OrderStatusUpdate(BaseModel):
    """Completion toggle for one order."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: Optional[str] = Field(default=None, alias="orderId")
    completed: bool = Field(default=False)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class ReadEnvelope(BaseModel):
    """Envelope for menu and order listings. Rows are positional."""
    success: bool
    data: Optional[List[List[Any]]] = None
    error: Optional[str] = None


class WriteEnvelope(BaseModel):
    """Envelope for order creation and status updates."""
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    environment: str
    sheets_gateway: str
    upstream: str
    missing_config: List[str] = Field(default_factory=list)
    timestamp: datetime

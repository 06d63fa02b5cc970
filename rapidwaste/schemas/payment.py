from pydantic import BaseModel, Field
from typing import Optional


class PaymentIntentResponse(BaseModel):
    booking_id: str
    payment_reference: str
    amount: int = Field(..., description="Amount in minor currency units")
    currency: str
    status: str


class PaymentConfirmResponse(BaseModel):
    success: bool
    message: str
    booking_id: Optional[str] = None


class RefundRequest(BaseModel):
    amount: Optional[float] = Field(None, gt=0, description="Partial refund amount; full refund when omitted")


class RefundResponse(BaseModel):
    success: bool
    refund_reference: str
    amount: float


class PaymentStatusResponse(BaseModel):
    payment_status: str
    amount: Optional[float] = None
    currency: Optional[str] = None
    message: Optional[str] = None

"""Confirmation message models exchanged with the notification relay."""

from typing import Optional

from pydantic import BaseModel


class ConfirmationMessage(BaseModel):
    """Details sent to a customer when staff confirm their booking."""
    recipient_name: str
    recipient_email: Optional[str] = None
    date: str
    time: str
    plate: Optional[str] = None
    branch: Optional[str] = None


class SendResult(BaseModel):
    """Outcome of a relay send."""
    sent: bool
    message: str
    error: Optional[str] = None

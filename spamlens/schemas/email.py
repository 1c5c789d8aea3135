"""
API Schemas — Email Store Models
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

_FOLDER = "^(inbox|spam|trash)$"
_ATTACHMENT = "^(image|document|other)$"


class EmailResponse(BaseModel):
    id: str
    subject: str
    sender_name: str
    sender_email: str
    recipient: str
    content: str
    date: str
    is_read: bool
    is_spam: bool
    spam_score: int
    folder: str
    has_attachment: bool
    attachment_type: Optional[str] = None
    attachment_url: Optional[str] = None


class EmailListResponse(BaseModel):
    folder: Optional[str] = None
    total: int
    emails: list[EmailResponse]


class EmailCreateRequest(BaseModel):
    """
    POST /emails request body.

    When spam_score is omitted the subject and content are scored and
    the message is filed into spam or inbox from the verdict.
    """
    subject: str = Field(..., max_length=1_000)
    sender_name: str = Field("", max_length=200)
    sender_email: str = Field(..., max_length=320)
    recipient: str = Field(..., max_length=320)
    content: str = Field("", max_length=50_000)
    is_read: bool = False
    is_spam: Optional[bool] = None
    spam_score: Optional[int] = Field(None, ge=0, le=100)
    folder: Optional[str] = Field(None, pattern=_FOLDER)
    has_attachment: bool = False
    attachment_type: Optional[str] = Field(None, pattern=_ATTACHMENT)
    attachment_url: Optional[str] = None


class EmailUpdateRequest(BaseModel):
    """PATCH /emails/{id} request body. Only supplied fields change."""
    subject: Optional[str] = Field(None, max_length=1_000)
    content: Optional[str] = Field(None, max_length=50_000)
    is_read: Optional[bool] = None
    is_spam: Optional[bool] = None
    spam_score: Optional[int] = Field(None, ge=0, le=100)
    folder: Optional[str] = Field(None, pattern=_FOLDER)


class FlagRequest(BaseModel):
    """POST /emails/{id}/spam and /read body."""
    value: bool = True


class StatsResponse(BaseModel):
    total_emails: int
    spam_emails: int
    regular_emails: int
    spam_percentage: float

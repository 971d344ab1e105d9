from pydantic import BaseModel
from typing import Optional, Literal
from datetime import date, datetime

IssueStatus = Literal["open", "in_review", "resolved"]


class IssueCreate(BaseModel):
    """New issues always start "open"; status is not accepted here."""
    project_id: int
    description: str
    submitted_by_user_id: Optional[int] = None
    date_reported: Optional[date] = None


class IssueStatusUpdate(BaseModel):
    status: IssueStatus


class IssueResponse(BaseModel):
    id: int
    project_id: int
    submitted_by_user_id: Optional[int] = None
    description: str
    status: str
    date_reported: date
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

from pydantic import BaseModel
from typing import Optional, Literal
from datetime import date, datetime

ProjectStatus = Literal["planning", "in_progress", "completed", "on_hold", "cancelled"]


class ProjectCreate(BaseModel):
    """Schema for creating a new project"""
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    status: ProjectStatus = "planning"
    budget_estimate: Optional[float] = None
    actual_cost: Optional[float] = None
    currency: str = "USD"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    engineer_id: Optional[int] = None


class ProjectUpdate(BaseModel):
    """
    Schema for updating a project.

    progress_percent is deliberately absent: the cached value is only raised
    through progress updates.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    status: Optional[ProjectStatus] = None
    budget_estimate: Optional[float] = None
    actual_cost: Optional[float] = None
    currency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    engineer_id: Optional[int] = None


class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    status: str
    progress_percent: int
    budget_estimate: Optional[float] = None
    actual_cost: Optional[float] = None
    currency: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    engineer_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

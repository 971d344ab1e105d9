from pydantic import BaseModel, Field, StrictInt
from typing import Optional, Literal
from datetime import date, datetime

TaskStatus = Literal["pending", "in_progress", "completed"]


class TaskCreate(BaseModel):
    project_id: int
    name: str
    description: Optional[str] = None
    status: TaskStatus = "pending"
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    assigned_admin_id: Optional[int] = None


class TaskUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    assigned_admin_id: Optional[int] = None


class TaskStatusUpdate(BaseModel):
    """Status change with an optional progress report routed through the rollup."""
    status: TaskStatus
    progress_percent: Optional[StrictInt] = Field(default=None, ge=0, le=100)


class TaskResponse(BaseModel):
    id: int
    project_id: int
    name: str
    description: Optional[str] = None
    status: str
    progress_percent: int
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    assigned_admin_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

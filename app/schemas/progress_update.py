from pydantic import BaseModel, StrictInt, model_validator
from typing import Optional, List
from datetime import date as date_type, datetime


class ProgressUpdateCreate(BaseModel):
    """
    Body of POST /progress-updates.

    Exactly one of project_id / task_id names the parent. The percent range
    is checked by the rollup engine so direct callers get the same error.
    """
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    description: str
    progress_percent: StrictInt
    images: Optional[List[str]] = None
    date: Optional[date_type] = None

    @model_validator(mode="after")
    def check_single_parent(self):
        if (self.project_id is None) == (self.task_id is None):
            raise ValueError("Exactly one of project_id or task_id is required")
        return self

    @property
    def parent(self):
        if self.project_id is not None:
            return "project", self.project_id
        return "task", self.task_id


class ProgressUpdateEdit(BaseModel):
    description: Optional[str] = None
    progress_percent: Optional[StrictInt] = None
    images: Optional[List[str]] = None
    date: Optional[date_type] = None


class ProgressUpdateResponse(BaseModel):
    id: int
    parent_type: str
    parent_id: int
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    description: str
    progress_percent: int
    images: List[str] = []
    date: date_type
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TimelineEntry(BaseModel):
    id: int
    date: date_type
    description: str
    progress_percent: int
    progress_change: int
    images: List[str] = []
    is_milestone: bool

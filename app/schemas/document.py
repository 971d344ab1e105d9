from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DocumentCreate(BaseModel):
    project_id: int
    file_name: str
    file_type: str
    file_url: str
    uploaded_by_admin_id: Optional[int] = None


class DocumentResponse(BaseModel):
    id: int
    project_id: int
    file_name: str
    file_type: str
    file_url: str
    uploaded_by_admin_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

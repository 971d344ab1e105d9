from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

BudgetType = Literal["budgeted", "actual"]
BudgetEntryType = Literal["material", "equipment", "labor", "other"]


class BudgetCreate(BaseModel):
    task_id: int
    category: str
    amount: float = Field(ge=0)
    type: BudgetType = "budgeted"
    entry_type: BudgetEntryType = "other"
    description: Optional[str] = None
    material_id: Optional[int] = None
    equipment_id: Optional[int] = None
    labor_id: Optional[int] = None


class BudgetUpdate(BaseModel):
    category: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    type: Optional[BudgetType] = None
    entry_type: Optional[BudgetEntryType] = None
    description: Optional[str] = None


class BudgetResponse(BaseModel):
    id: int
    task_id: int
    category: str
    amount: float
    type: str
    entry_type: str
    description: Optional[str] = None
    material_id: Optional[int] = None
    equipment_id: Optional[int] = None
    labor_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

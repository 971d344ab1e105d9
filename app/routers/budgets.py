"""
Budget line item router.

Line items are either planned ("budgeted") or spent ("actual") money on a
task; project statistics sum the two separately.
"""
from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.core.errors import ValidationError
from app.models.budget import Budget, BUDGET_TYPES
from app.models.resources import Material, Equipment, Labor
from app.schemas.budget import BudgetCreate, BudgetUpdate, BudgetResponse
from app.utils.project import apply_changes, require_entity, require_task, require_optional_reference
from app.utils.responses import api_response, paginate

router = APIRouter()


def _serialize(budget: Budget) -> dict:
    return BudgetResponse.model_validate(budget).model_dump()


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_budget(budget: BudgetCreate, db: Session = Depends(get_db)):
    require_task(db, budget.task_id)
    require_optional_reference(db, Material, budget.material_id)
    require_optional_reference(db, Equipment, budget.equipment_id)
    require_optional_reference(db, Labor, budget.labor_id)

    new_budget = Budget(**budget.model_dump())
    db.add(new_budget)
    db.commit()
    db.refresh(new_budget)
    return api_response(_serialize(new_budget), "Budget entry created successfully")


@router.get("")
def list_budgets(
    task_id: Optional[int] = None,
    type: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Budget)
    if task_id is not None:
        query = query.filter(Budget.task_id == task_id)
    if type:
        if type not in BUDGET_TYPES:
            raise ValidationError("Invalid budget type", detail={"allowed": list(BUDGET_TYPES)})
        query = query.filter(Budget.type == type)

    budgets, meta = paginate(query.order_by(Budget.id.asc()), page, limit)
    return api_response([_serialize(b) for b in budgets], **meta)


@router.get("/{budget_id}")
def get_budget(budget_id: int, db: Session = Depends(get_db)):
    return api_response(_serialize(require_entity(db, Budget, budget_id)))


@router.put("/{budget_id}")
def update_budget(budget_id: int, budget_update: BudgetUpdate, db: Session = Depends(get_db)):
    budget = require_entity(db, Budget, budget_id)
    if apply_changes(budget, budget_update.model_dump(exclude_unset=True, exclude_none=True)):
        db.commit()
        db.refresh(budget)
    return api_response(_serialize(budget), "Budget entry updated successfully")


@router.delete("/{budget_id}")
def delete_budget(budget_id: int, db: Session = Depends(get_db)):
    budget = require_entity(db, Budget, budget_id)
    db.delete(budget)
    db.commit()
    return api_response(message="Budget entry deleted successfully")

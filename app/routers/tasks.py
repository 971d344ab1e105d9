"""
Task router.

CRUD for tasks, a status endpoint that can also report progress, and the
task-level cost rollup.
"""
from datetime import date
from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.core.errors import StoreError
from app.models.admin import Admin
from app.models.progress_update import ProgressUpdate
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskResponse
from app.utils.progress import commit_or_raise, raise_cached_progress
from app.utils.project import apply_changes, require_project, require_task, require_optional_reference
from app.utils.responses import api_response, paginate
from app.utils.statistics import compute_task_cost_rollup

router = APIRouter()


def _serialize(task: Task) -> dict:
    return TaskResponse.model_validate(task).model_dump()


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db)):
    require_project(db, task.project_id)
    require_optional_reference(db, Admin, task.assigned_admin_id, "Admin")

    new_task = Task(**task.model_dump(), progress_percent=0)
    db.add(new_task)
    db.commit()
    db.refresh(new_task)
    return api_response(_serialize(new_task), "Task created successfully")


@router.get("")
def list_tasks(
    project_id: Optional[int] = None,
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Task)
    if project_id is not None:
        query = query.filter(Task.project_id == project_id)
    if status:
        query = query.filter(Task.status == status)

    tasks, meta = paginate(query.order_by(Task.created_at.desc(), Task.id.desc()), page, limit)
    return api_response([_serialize(t) for t in tasks], **meta)


@router.get("/overdue")
def list_overdue_tasks(db: Session = Depends(get_db)):
    """Tasks past their due date that are not completed, oldest due date first."""
    tasks = db.query(Task).filter(
        Task.due_date < date.today(),
        Task.status != "completed"
    ).order_by(Task.due_date.asc(), Task.id.asc()).all()
    return api_response([_serialize(t) for t in tasks], count=len(tasks))


@router.get("/project/{project_id}")
def list_project_tasks(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    tasks = db.query(Task).filter(Task.project_id == project_id).order_by(Task.id.asc()).all()
    return api_response([_serialize(t) for t in tasks], count=len(tasks))


@router.get("/{task_id}/costs")
def get_task_costs(task_id: int, db: Session = Depends(get_db)):
    """Material, labor and equipment totals plus budget variance for one task."""
    return api_response(compute_task_cost_rollup(db, task_id).model_dump())


@router.get("/{task_id}")
def get_task(task_id: int, db: Session = Depends(get_db)):
    return api_response(_serialize(require_task(db, task_id)))


@router.put("/{task_id}")
def update_task(task_id: int, task_update: TaskUpdate, db: Session = Depends(get_db)):
    task = require_task(db, task_id)
    changes = task_update.model_dump(exclude_unset=True, exclude_none=True)
    if "assigned_admin_id" in changes:
        require_optional_reference(db, Admin, changes["assigned_admin_id"], "Admin")

    if apply_changes(task, changes):
        db.commit()
        db.refresh(task)
    return api_response(_serialize(task), "Task updated successfully")


@router.put("/{task_id}/status")
def update_task_status(task_id: int, body: TaskStatusUpdate, db: Session = Depends(get_db)):
    """
    Change a task's status.

    A progress_percent sent along is applied with the same raise-only rule
    as progress updates, so it can never lower the task's cached progress.
    """
    task = require_task(db, task_id)
    task.status = body.status
    if body.progress_percent is not None:
        try:
            db.flush()
            raise_cached_progress(db, "task", task_id, body.progress_percent)
        except SQLAlchemyError as exc:
            db.rollback()
            raise StoreError("Failed to update task status", detail=str(exc)) from exc
    commit_or_raise(db, "update task status")
    db.refresh(task)
    return api_response(
        {"status": task.status, "progress_percent": task.progress_percent},
        "Task status updated successfully",
    )


@router.delete("/{task_id}")
def delete_task(task_id: int, db: Session = Depends(get_db)):
    task = require_task(db, task_id)
    db.query(ProgressUpdate).filter(
        ProgressUpdate.parent_type == "task",
        ProgressUpdate.parent_id == task_id
    ).delete(synchronize_session=False)
    db.delete(task)
    db.commit()
    return api_response(message="Task deleted successfully")

"""
Progress update router.

Creating or editing an update raises the parent's cached progress through
app.utils.progress; the timeline endpoints annotate a parent's history with
milestones.
"""
from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.core.errors import NotFoundError
from app.models.progress_update import ProgressUpdate
from app.schemas.progress_update import ProgressUpdateCreate, ProgressUpdateEdit, ProgressUpdateResponse
from app.utils.progress import (
    list_parent_updates,
    record_progress_update,
    require_parent,
    revise_progress_update,
)
from app.utils.responses import api_response, clamp_page, paginate
from app.utils.timeline import build_timeline, milestones

router = APIRouter()


def _serialize(progress_update: ProgressUpdate) -> dict:
    return ProgressUpdateResponse.model_validate(progress_update).model_dump()


def _timeline_payload(db: Session, parent_type: str, parent_id: int) -> dict:
    require_parent(db, parent_type, parent_id)
    timeline = build_timeline(list_parent_updates(db, parent_type, parent_id).all())
    return {
        "parent_type": parent_type,
        "parent_id": parent_id,
        f"{parent_type}_id": parent_id,
        "timeline": timeline,
        "total_updates": len(timeline),
        "milestones": milestones(timeline),
    }


@router.get("")
def list_progress_updates(
    project_id: Optional[int] = None,
    task_id: Optional[int] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """All progress updates, newest first, optionally for one project or task."""
    query = db.query(ProgressUpdate)
    if project_id is not None:
        query = query.filter(ProgressUpdate.parent_type == "project", ProgressUpdate.parent_id == project_id)
    if task_id is not None:
        query = query.filter(ProgressUpdate.parent_type == "task", ProgressUpdate.parent_id == task_id)

    updates, meta = paginate(
        query.order_by(ProgressUpdate.date.desc(), ProgressUpdate.id.desc()), page, limit
    )
    return api_response([_serialize(u) for u in updates], **meta)


@router.get("/latest")
def list_latest_progress_updates(limit: int = 5, db: Session = Depends(get_db)):
    _, limit = clamp_page(1, limit)
    updates = db.query(ProgressUpdate).order_by(
        ProgressUpdate.date.desc(), ProgressUpdate.id.desc()
    ).limit(limit).all()
    return api_response([_serialize(u) for u in updates], count=len(updates))


@router.get("/timeline/task/{task_id}")
def get_task_timeline(task_id: int, db: Session = Depends(get_db)):
    return api_response(_timeline_payload(db, "task", task_id))


@router.get("/timeline/{project_id}")
def get_project_timeline(project_id: int, db: Session = Depends(get_db)):
    """
    Chronological progress history of a project.

    Each entry carries the change from the previous update and whether it
    is a milestone (a jump of 10 points or more, or reaching 100%).
    """
    return api_response(_timeline_payload(db, "project", project_id))


@router.get("/project/{project_id}")
def list_project_progress_updates(
    project_id: int,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    require_parent(db, "project", project_id)
    updates, meta = paginate(list_parent_updates(db, "project", project_id, newest_first=True), page, limit)
    return api_response([_serialize(u) for u in updates], **meta)


@router.get("/task/{task_id}")
def list_task_progress_updates(
    task_id: int,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    require_parent(db, "task", task_id)
    updates, meta = paginate(list_parent_updates(db, "task", task_id, newest_first=True), page, limit)
    return api_response([_serialize(u) for u in updates], **meta)


@router.get("/{update_id}")
def get_progress_update(update_id: int, db: Session = Depends(get_db)):
    progress_update = db.get(ProgressUpdate, update_id)
    if progress_update is None:
        raise NotFoundError("Progress update", update_id)
    return api_response(_serialize(progress_update))


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_progress_update(body: ProgressUpdateCreate, db: Session = Depends(get_db)):
    """
    Record progress against a project or a task.

    The parent's cached progress is raised to the posted percent when it is
    higher, and left untouched otherwise.
    """
    parent_type, parent_id = body.parent
    progress_update = record_progress_update(
        db,
        parent_type,
        parent_id,
        body.progress_percent,
        body.description,
        images=body.images,
        date=body.date,
    )
    return api_response(_serialize(progress_update), "Progress update created successfully")


@router.put("/{update_id}")
def update_progress_update(update_id: int, body: ProgressUpdateEdit, db: Session = Depends(get_db)):
    progress_update = revise_progress_update(db, update_id, body.model_dump(exclude_unset=True))
    return api_response(_serialize(progress_update), "Progress update updated successfully")


@router.delete("/{update_id}")
def delete_progress_update(update_id: int, db: Session = Depends(get_db)):
    """Remove an update. The parent's cached progress is not recomputed."""
    progress_update = db.get(ProgressUpdate, update_id)
    if progress_update is None:
        raise NotFoundError("Progress update", update_id)
    db.delete(progress_update)
    db.commit()
    return api_response(message="Progress update deleted successfully")

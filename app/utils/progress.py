"""
Progress rollup for projects and tasks.

Both Project and Task cache a ``progress_percent`` that progress updates
raise but never lower. The raise is a single conditional UPDATE

    UPDATE <parent> SET progress_percent = :p
    WHERE id = :id AND progress_percent < :p

so the database performs the compare-and-set. Concurrent writers to the same
parent therefore always leave the maximum submitted percent in place, whatever
order they commit in. Nothing here reads the cached value and writes it back
from Python.
"""
import logging
from datetime import date as date_type
from typing import Iterable, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.models.progress_update import ProgressUpdate, PARENT_TYPES
from app.models.project import Project
from app.models.task import Task

logger = logging.getLogger(__name__)

PARENT_MODELS = {
    "project": Project,
    "task": Task,
}

EDITABLE_FIELDS = ("description", "progress_percent", "images", "date")


def validate_percent(value) -> int:
    """Accept an int in [0, 100]; bools and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Progress percentage must be an integer", detail={"progress_percent": value})
    if value < 0 or value > 100:
        raise ValidationError("Progress percentage must be between 0 and 100", detail={"progress_percent": value})
    return value


def resolve_parent_model(parent_type: str):
    if parent_type not in PARENT_TYPES:
        raise ValidationError(
            f"Invalid parent type '{parent_type}'",
            detail={"allowed": list(PARENT_TYPES)},
        )
    return PARENT_MODELS[parent_type]


def require_parent(db: Session, parent_type: str, parent_id: int):
    model = resolve_parent_model(parent_type)
    parent = db.get(model, parent_id)
    if parent is None:
        raise NotFoundError(model.__name__, parent_id)
    return parent


def raise_cached_progress(db: Session, parent_type: str, parent_id: int, percent: int) -> bool:
    """
    Raise the parent's cached progress to ``percent`` if it is higher.

    Runs inside the caller's transaction; the caller commits.

    Returns:
        True if the parent row was updated, False if its cache already held
        ``percent`` or more.
    """
    model = resolve_parent_model(parent_type)
    result = db.execute(
        update(model)
        .where(model.id == parent_id, model.progress_percent < percent)
        .values(progress_percent=percent)
        .execution_options(synchronize_session=False)
    )
    raised = result.rowcount > 0
    if raised:
        logger.info("Raised %s %s progress to %s%%", parent_type, parent_id, percent)
    else:
        logger.debug("Kept %s %s progress, %s%% is not above the cached value", parent_type, parent_id, percent)
    return raised


def commit_or_raise(db: Session, action: str) -> None:
    """Commit, or roll back and raise StoreError naming ``action``."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to %s: %s", action, exc)
        raise StoreError(f"Failed to {action}", detail=str(exc)) from exc


def record_progress_update(
    db: Session,
    parent_type: str,
    parent_id: int,
    progress_percent: int,
    description: str,
    images: Optional[Iterable[str]] = None,
    date: Optional[date_type] = None,
) -> ProgressUpdate:
    """
    Store a progress update and raise the parent's cached progress.

    Args:
        db: Database session
        parent_type: "project" or "task"
        parent_id: ID of the parent project or task
        progress_percent: Reported completion, integer 0-100
        description: What was done
        images: Ordered image URLs attached to the report
        date: Report date (defaults to today)

    Returns:
        The persisted ProgressUpdate

    Raises:
        ValidationError: percent out of range or unknown parent type
        NotFoundError: parent does not exist
        StoreError: the insert or the conditional update failed
    """
    percent = validate_percent(progress_percent)
    require_parent(db, parent_type, parent_id)

    progress_update = ProgressUpdate(
        parent_type=parent_type,
        parent_id=parent_id,
        description=description,
        progress_percent=percent,
        images=list(images or []),
        date=date or date_type.today(),
    )
    try:
        db.add(progress_update)
        db.flush()
        raise_cached_progress(db, parent_type, parent_id, percent)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to record progress update for %s %s: %s", parent_type, parent_id, exc)
        raise StoreError("Failed to record progress update", detail=str(exc)) from exc

    commit_or_raise(db, "record progress update")
    db.refresh(progress_update)
    return progress_update


def revise_progress_update(db: Session, update_id: int, changes: dict) -> ProgressUpdate:
    """
    Edit an existing progress update.

    Only EDITABLE_FIELDS are applied. A new percent goes through the same
    conditional raise as a new update; lowering a report never lowers the
    parent's cached progress.
    """
    progress_update = db.get(ProgressUpdate, update_id)
    if progress_update is None:
        raise NotFoundError("Progress update", update_id)

    changes = {field: value for field, value in changes.items() if field in EDITABLE_FIELDS}
    if changes.get("progress_percent") is not None:
        validate_percent(changes["progress_percent"])
    if "images" in changes:
        changes["images"] = list(changes["images"] or [])
    # description, percent and date are NOT NULL
    changes = {field: value for field, value in changes.items() if value is not None}

    try:
        for field, value in changes.items():
            setattr(progress_update, field, value)
        db.flush()
        if "progress_percent" in changes:
            raise_cached_progress(
                db,
                progress_update.parent_type,
                progress_update.parent_id,
                changes["progress_percent"],
            )
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError("Failed to update progress update", detail=str(exc)) from exc

    commit_or_raise(db, "update progress update")
    db.refresh(progress_update)
    return progress_update


def list_parent_updates(db: Session, parent_type: str, parent_id: int, newest_first: bool = False):
    """Progress updates of one parent ordered by date, then insertion."""
    query = db.query(ProgressUpdate).filter(
        ProgressUpdate.parent_type == parent_type,
        ProgressUpdate.parent_id == parent_id,
    )
    if newest_first:
        return query.order_by(ProgressUpdate.date.desc(), ProgressUpdate.id.desc())
    return query.order_by(ProgressUpdate.date.asc(), ProgressUpdate.id.asc())


def project_scope_clauses(db: Session, project_id: int) -> Tuple:
    """
    Filter clauses matching updates of a project and of all its tasks.

    Used when a project is deleted so no update is left pointing at a
    removed parent.
    """
    task_ids = [task_id for (task_id,) in db.query(Task.id).filter(Task.project_id == project_id)]
    clauses = [(ProgressUpdate.parent_type == "project") & (ProgressUpdate.parent_id == project_id)]
    if task_ids:
        clauses.append((ProgressUpdate.parent_type == "task") & (ProgressUpdate.parent_id.in_(task_ids)))
    return tuple(clauses)

"""
Lookup helpers for projects, tasks and the other entities routers touch.

Lookups raise NotFoundError instead of returning None so routers and the
rollup engine share one not-found path.
"""
from sqlalchemy.orm import Session
from app.core.errors import NotFoundError
from app.models.project import Project
from app.models.task import Task
from typing import Optional, Type, TypeVar

ModelT = TypeVar("ModelT")


def require_entity(db: Session, model: Type[ModelT], entity_id: int, label: Optional[str] = None) -> ModelT:
    """
    Fetch ``model`` by primary key or raise NotFoundError.

    Args:
        db: Database session
        model: Mapped class to look up
        entity_id: Primary key value
        label: Resource name used in the error message (defaults to class name)
    """
    entity = db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(label or model.__name__, entity_id)
    return entity


def require_project(db: Session, project_id: int) -> Project:
    return require_entity(db, Project, project_id)


def require_task(db: Session, task_id: int) -> Task:
    return require_entity(db, Task, task_id)


def require_optional_reference(db: Session, model: Type[ModelT], entity_id: Optional[int], label: Optional[str] = None) -> None:
    """Validate a nullable foreign key: None passes, a dangling id raises NotFoundError."""
    if entity_id is not None:
        require_entity(db, model, entity_id, label)


def apply_changes(entity, changes: dict) -> bool:
    """
    Copy allow-listed ``changes`` onto ``entity``.

    ``changes`` comes from a pydantic update schema dumped with
    ``exclude_unset=True, exclude_none=True``, so only fields the client sent
    with a value are touched and fields outside the schema never reach the
    store.

    Returns:
        True if any attribute value changed
    """
    changed = False
    for field, value in changes.items():
        if getattr(entity, field) != value:
            setattr(entity, field, value)
            changed = True
    return changed

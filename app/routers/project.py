"""
Project management router.

Provides CRUD operations for projects plus the aggregated statistics
endpoint. A project's progress_percent is read-only here; it is raised by
progress updates.
"""
from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.core.errors import ValidationError
from app.models.admin import Admin
from app.models.progress_update import ProgressUpdate
from app.models.project import Project, PROJECT_STATUSES
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse
from app.utils.progress import project_scope_clauses
from app.utils.project import apply_changes, require_project, require_optional_reference
from app.utils.responses import api_response, paginate
from app.utils.statistics import compute_project_stats

router = APIRouter()


def _serialize(project: Project) -> dict:
    return ProjectResponse.model_validate(project).model_dump()


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_project(project: ProjectCreate, db: Session = Depends(get_db)):
    """
    Create a new project.

    New projects always start at 0% progress.
    """
    require_optional_reference(db, Admin, project.engineer_id, "Engineer")

    new_project = Project(**project.model_dump(), progress_percent=0)
    db.add(new_project)
    db.commit()
    db.refresh(new_project)
    return api_response(_serialize(new_project), "Project created successfully")


@router.get("")
def list_projects(
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """
    List projects, most recently updated first.

    Can filter by status and paginate with page/limit.
    """
    query = db.query(Project)
    if status:
        query = query.filter(Project.status == status)

    projects, meta = paginate(query.order_by(Project.updated_at.desc(), Project.id.desc()), page, limit)
    return api_response([_serialize(p) for p in projects], **meta)


@router.get("/status/{status}")
def list_projects_by_status(status: str, db: Session = Depends(get_db)):
    if status not in PROJECT_STATUSES:
        raise ValidationError("Invalid status", detail={"allowed": list(PROJECT_STATUSES)})

    projects = db.query(Project).filter(Project.status == status).order_by(Project.created_at.desc()).all()
    return api_response([_serialize(p) for p in projects], count=len(projects))


@router.get("/{project_id}/stats")
def get_project_stats(project_id: int, db: Session = Depends(get_db)):
    """
    Task completion, budget variance and issue counts for a project.

    Computed on every call from the project's tasks, their budget line
    items and the project's issues.
    """
    stats = compute_project_stats(db, project_id)
    return api_response(stats.model_dump())


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db)):
    return api_response(_serialize(require_project(db, project_id)))


@router.put("/{project_id}")
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a project's metadata.

    Only the fields of ProjectUpdate are accepted; progress is not one of
    them.
    """
    project = require_project(db, project_id)
    changes = project_update.model_dump(exclude_unset=True, exclude_none=True)
    if "engineer_id" in changes:
        require_optional_reference(db, Admin, changes["engineer_id"], "Engineer")

    if apply_changes(project, changes):
        db.commit()
        db.refresh(project)
    return api_response(_serialize(project), "Project updated successfully")


@router.delete("/{project_id}")
def delete_project(project_id: int, db: Session = Depends(get_db)):
    """
    Delete a project and all associated data.

    Tasks (with their budgets, materials and labor), issues and documents
    cascade; progress updates of the project and its tasks are removed
    explicitly since they reference their parent by tag.
    """
    project = require_project(db, project_id)

    for clause in project_scope_clauses(db, project_id):
        db.query(ProgressUpdate).filter(clause).delete(synchronize_session=False)
    db.delete(project)
    db.commit()
    return api_response(message="Project deleted successfully")

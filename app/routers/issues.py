"""
Issue router.

Issues are created "open" and only change status through
PUT /issues/{id}/status.
"""
from datetime import date
from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.core.errors import ValidationError
from app.models.issue import Issue, ISSUE_STATUSES
from app.models.user import User
from app.schemas.issue import IssueCreate, IssueStatusUpdate, IssueResponse
from app.utils.project import require_entity, require_project, require_optional_reference
from app.utils.responses import api_response, paginate
from app.utils.statistics import compute_issue_statistics

router = APIRouter()


def _serialize(issue: Issue) -> dict:
    return IssueResponse.model_validate(issue).model_dump()


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_issue(issue: IssueCreate, db: Session = Depends(get_db)):
    require_project(db, issue.project_id)
    require_optional_reference(db, User, issue.submitted_by_user_id)

    new_issue = Issue(
        project_id=issue.project_id,
        submitted_by_user_id=issue.submitted_by_user_id,
        description=issue.description,
        status="open",
        date_reported=issue.date_reported or date.today(),
    )
    db.add(new_issue)
    db.commit()
    db.refresh(new_issue)
    return api_response(_serialize(new_issue), "Issue reported successfully")


@router.get("")
def list_issues(
    project_id: Optional[int] = None,
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Issue)
    if project_id is not None:
        query = query.filter(Issue.project_id == project_id)
    if status:
        query = query.filter(Issue.status == status)

    issues, meta = paginate(query.order_by(Issue.date_reported.desc(), Issue.id.desc()), page, limit)
    return api_response([_serialize(i) for i in issues], **meta)


@router.get("/stats")
def get_issue_statistics(project_id: Optional[int] = None, db: Session = Depends(get_db)):
    """
    Issue counts per status and per month, plus the resolution rate.

    Scoped to one project when project_id is given, otherwise global.
    """
    return api_response(compute_issue_statistics(db, project_id).model_dump())


@router.get("/status/{status}")
def list_issues_by_status(status: str, db: Session = Depends(get_db)):
    if status not in ISSUE_STATUSES:
        raise ValidationError("Invalid status", detail={"allowed": list(ISSUE_STATUSES)})

    issues = db.query(Issue).filter(Issue.status == status).order_by(Issue.date_reported.desc(), Issue.id.desc()).all()
    return api_response([_serialize(i) for i in issues], count=len(issues))


@router.get("/project/{project_id}")
def list_project_issues(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    issues = db.query(Issue).filter(Issue.project_id == project_id).order_by(Issue.date_reported.desc(), Issue.id.desc()).all()
    return api_response([_serialize(i) for i in issues], count=len(issues))


@router.get("/{issue_id}")
def get_issue(issue_id: int, db: Session = Depends(get_db)):
    return api_response(_serialize(require_entity(db, Issue, issue_id)))


@router.put("/{issue_id}/status")
def update_issue_status(issue_id: int, body: IssueStatusUpdate, db: Session = Depends(get_db)):
    issue = require_entity(db, Issue, issue_id)
    issue.status = body.status
    db.commit()
    return api_response({"id": issue_id, "status": body.status}, "Issue status updated successfully")


@router.delete("/{issue_id}")
def delete_issue(issue_id: int, db: Session = Depends(get_db)):
    issue = require_entity(db, Issue, issue_id)
    db.delete(issue)
    db.commit()
    return api_response(message="Issue deleted successfully")

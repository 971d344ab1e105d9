"""
Document router.

Documents are registered by URL; storing the file itself happens elsewhere.
"""
from fastapi import APIRouter, Depends, status as http_status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.models.admin import Admin
from app.models.document import Document
from app.schemas.document import DocumentCreate, DocumentResponse
from app.utils.project import require_entity, require_project, require_optional_reference
from app.utils.responses import api_response, paginate
from app.utils.statistics import compute_document_statistics

router = APIRouter()


def _serialize(document: Document) -> dict:
    return DocumentResponse.model_validate(document).model_dump()


@router.post("", status_code=http_status.HTTP_201_CREATED)
def create_document(document: DocumentCreate, db: Session = Depends(get_db)):
    require_project(db, document.project_id)
    require_optional_reference(db, Admin, document.uploaded_by_admin_id, "Admin")

    new_document = Document(**document.model_dump())
    db.add(new_document)
    db.commit()
    db.refresh(new_document)
    return api_response(_serialize(new_document), "Document created successfully")


@router.get("")
def list_documents(
    project_id: Optional[int] = None,
    file_type: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Document)
    if project_id is not None:
        query = query.filter(Document.project_id == project_id)
    if file_type:
        query = query.filter(Document.file_type == file_type)

    documents, meta = paginate(query.order_by(Document.created_at.desc(), Document.id.desc()), page, limit)
    return api_response([_serialize(d) for d in documents], **meta)


@router.get("/stats")
def get_document_statistics(project_id: Optional[int] = None, db: Session = Depends(get_db)):
    """Document counts per file type and per upload month, plus the most common type."""
    return api_response(compute_document_statistics(db, project_id).model_dump())


@router.get("/project/{project_id}")
def list_project_documents(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    documents = db.query(Document).filter(Document.project_id == project_id).order_by(Document.id.asc()).all()
    return api_response([_serialize(d) for d in documents], count=len(documents))


@router.get("/{document_id}")
def get_document(document_id: int, db: Session = Depends(get_db)):
    return api_response(_serialize(require_entity(db, Document, document_id)))


@router.delete("/{document_id}")
def delete_document(document_id: int, db: Session = Depends(get_db)):
    document = require_entity(db, Document, document_id)
    db.delete(document)
    db.commit()
    return api_response(message="Document deleted successfully")

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import date, datetime
from app.database import Base

ISSUE_STATUSES = ("open", "in_review", "resolved")


class Issue(Base):
    """
    Problem reported against a project.

    Created "open"; moves to "in_review" or "resolved" only through an
    explicit status update.
    """
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    submitted_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="open")
    date_reported = Column(Date, nullable=False, default=date.today)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="issues")
    submitted_by = relationship("User")

    __table_args__ = (
        Index('idx_issue_project_status', 'project_id', 'status'),
    )

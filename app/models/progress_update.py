from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, Index, CheckConstraint
from datetime import date, datetime
from app.database import Base

PARENT_TYPES = ("project", "task")


class ProgressUpdate(Base):
    """
    A dated progress report against a project or a task.

    The parent is a tagged reference (``parent_type`` + ``parent_id``) so a
    single table and a single rollup path serve both scopes.
    """
    __tablename__ = "progress_updates"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    parent_type = Column(String, nullable=False)  # project | task
    parent_id = Column(Integer, nullable=False)

    description = Column(Text, nullable=False)
    progress_percent = Column(Integer, nullable=False)
    images = Column(JSON, nullable=False, default=list)  # ordered list of URLs
    date = Column(Date, nullable=False, default=date.today)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("progress_percent >= 0 AND progress_percent <= 100", name="ck_update_progress_range"),
        CheckConstraint("parent_type IN ('project', 'task')", name="ck_update_parent_type"),
        Index('idx_update_parent_date', 'parent_type', 'parent_id', 'date'),
    )

    @property
    def project_id(self):
        return self.parent_id if self.parent_type == "project" else None

    @property
    def task_id(self):
        return self.parent_id if self.parent_type == "task" else None

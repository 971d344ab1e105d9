from sqlalchemy import Column, Integer, String, Text, Numeric, Date, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base

PROJECT_STATUSES = ("planning", "in_progress", "completed", "on_hold", "cancelled")


class Project(Base):
    """
    Construction project - aggregation root for task and financial rollups.

    ``progress_percent`` is a cached value maintained by progress updates.
    It is only ever raised (see app.utils.progress), never recomputed on read.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)

    status = Column(String, nullable=False, default="planning")  # see PROJECT_STATUSES
    progress_percent = Column(Integer, nullable=False, default=0)

    budget_estimate = Column(Numeric(14, 2), nullable=True)
    actual_cost = Column(Numeric(14, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")

    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    engineer_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    engineer = relationship("Admin")
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan", order_by="Task.id")
    issues = relationship("Issue", back_populates="project", cascade="all, delete-orphan", order_by="Issue.id")
    documents = relationship("Document", back_populates="project", cascade="all, delete-orphan", order_by="Document.id")

    __table_args__ = (
        CheckConstraint("progress_percent >= 0 AND progress_percent <= 100", name="ck_project_progress_range"),
        Index('idx_project_status', 'status'),
        Index('idx_project_updated', 'updated_at'),
    )

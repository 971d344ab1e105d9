from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base

TASK_STATUSES = ("pending", "in_progress", "completed")


class Task(Base):
    """
    Unit of work inside a project.

    Aggregation root for material, equipment, labor and budget line items.
    Carries its own cached ``progress_percent`` with the same raise-only rule
    as Project.
    """
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    status = Column(String, nullable=False, default="pending")  # see TASK_STATUSES
    progress_percent = Column(Integer, nullable=False, default=0)

    start_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)

    assigned_admin_id = Column(Integer, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="tasks")
    assigned_admin = relationship("Admin")
    budgets = relationship("Budget", back_populates="task", cascade="all, delete-orphan", order_by="Budget.id")
    materials = relationship("Material", back_populates="task", cascade="all, delete-orphan")
    equipment = relationship("Equipment", back_populates="task")
    labor = relationship("Labor", back_populates="task", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("progress_percent >= 0 AND progress_percent <= 100", name="ck_task_progress_range"),
        Index('idx_task_project_status', 'project_id', 'status'),
    )

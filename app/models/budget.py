from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base

BUDGET_TYPES = ("budgeted", "actual")
BUDGET_ENTRY_TYPES = ("material", "equipment", "labor", "other")


class Budget(Base):
    """
    A single budget line item on a task.

    ``type`` separates planned money ("budgeted") from spent money ("actual");
    the two are never summed together. Optional links point at the itemized
    material, equipment or labor entry the cost belongs to.
    """
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    type = Column(String, nullable=False, default="budgeted")  # budgeted | actual
    entry_type = Column(String, nullable=False, default="other")  # material | equipment | labor | other
    description = Column(Text, nullable=True)

    material_id = Column(Integer, ForeignKey("materials.id", ondelete="SET NULL"), nullable=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id", ondelete="SET NULL"), nullable=True)
    labor_id = Column(Integer, ForeignKey("labor.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    task = relationship("Task", back_populates="budgets")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_budget_amount_non_negative"),
        Index('idx_budget_task_type', 'task_id', 'type'),
    )

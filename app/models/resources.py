from sqlalchemy import Column, Integer, String, Float, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String, nullable=True)  # e.g. "m3", "bags", "tons"
    unit_cost = Column(Numeric(12, 2), nullable=False, default=0)

    task = relationship("Task", back_populates="materials")


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String, nullable=False)
    equipment_type = Column(String, nullable=True)
    rental_cost = Column(Numeric(12, 2), nullable=False, default=0)

    task = relationship("Task", back_populates="equipment")


class Labor(Base):
    __tablename__ = "labor"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    worker_name = Column(String, nullable=False)
    role = Column(String, nullable=True)
    hours = Column(Float, nullable=False, default=0.0)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)

    task = relationship("Task", back_populates="labor")

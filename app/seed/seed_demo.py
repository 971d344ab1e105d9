import logging
import os
import sys
from datetime import date

# Ensure backend directory is in python path
sys.path.append(os.path.join(os.path.dirname(__file__), '../../'))

from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.logging import configure_logging
from app.database import SessionLocal, engine, Base
from app.models import Admin, Budget, Document, Issue, Labor, Material, Project, Task, User
from app.utils.progress import record_progress_update

logger = logging.getLogger(__name__)

DEMO_PROJECT = "Riverside Residential Block A"


def seed_demo(db: Session) -> Project:
    """
    Seed one demo project with tasks, budget lines, progress, issues and documents.

    Safe to run repeatedly: if the demo project already exists it is
    returned untouched. Progress goes through the rollup engine so the
    cached percentages match the seeded history.
    """
    existing = db.query(Project).filter(Project.name == DEMO_PROJECT).first()
    if existing:
        logger.info("Demo project already present (id=%s), skipping.", existing.id)
        return existing

    engineer = db.query(Admin).filter_by(email="engineer@example.com").first()
    if not engineer:
        engineer = Admin(
            name="Site Engineer",
            username="engineer",
            email="engineer@example.com",
            hashed_password="!",  # login disabled for seed accounts
            role="engineer",
        )
        db.add(engineer)
    resident = db.query(User).filter_by(email="resident@example.com").first()
    if not resident:
        resident = User(name="Neighbour", email="resident@example.com")
        db.add(resident)
    db.flush()

    project = Project(
        name=DEMO_PROJECT,
        description="Four storey residential block with basement parking",
        location="Riverside",
        status="in_progress",
        budget_estimate=250000,
        currency="USD",
        start_date=date(2024, 1, 8),
        end_date=date(2024, 12, 20),
        engineer_id=engineer.id,
    )
    db.add(project)
    db.flush()

    foundations = Task(project_id=project.id, name="Foundations", status="completed",
                       start_date=date(2024, 1, 8), due_date=date(2024, 3, 1), assigned_admin_id=engineer.id)
    framing = Task(project_id=project.id, name="Structural frame", status="in_progress",
                   start_date=date(2024, 3, 4), due_date=date(2024, 7, 31), assigned_admin_id=engineer.id)
    db.add_all([foundations, framing])
    db.flush()

    concrete = Material(task_id=foundations.id, name="Ready-mix concrete", quantity=120, unit="m3", unit_cost=95)
    crew = Labor(task_id=foundations.id, worker_name="Foundation crew", role="mason", hours=640, hourly_rate=28)
    db.add_all([concrete, crew])
    db.flush()

    db.add_all([
        Budget(task_id=foundations.id, category="Concrete", amount=12000, type="budgeted", entry_type="material", material_id=concrete.id),
        Budget(task_id=foundations.id, category="Concrete", amount=11400, type="actual", entry_type="material", material_id=concrete.id),
        Budget(task_id=foundations.id, category="Labor", amount=17000, type="budgeted", entry_type="labor", labor_id=crew.id),
        Budget(task_id=foundations.id, category="Labor", amount=17920, type="actual", entry_type="labor", labor_id=crew.id),
        Budget(task_id=framing.id, category="Steel", amount=48000, type="budgeted", entry_type="material"),
    ])
    db.add_all([
        Issue(project_id=project.id, submitted_by_user_id=resident.id, description="Dust from site entrance",
              status="resolved", date_reported=date(2024, 2, 12)),
        Issue(project_id=project.id, description="Rebar delivery delayed", status="open", date_reported=date(2024, 3, 18)),
        Document(project_id=project.id, file_name="site-plan.pdf", file_type="pdf",
                 file_url="https://files.example.com/site-plan.pdf", uploaded_by_admin_id=engineer.id),
        Document(project_id=project.id, file_name="frame.dwg", file_type="dwg",
                 file_url="https://files.example.com/frame.dwg", uploaded_by_admin_id=engineer.id),
    ])
    db.commit()

    for parent_type, parent_id, percent, note, day in [
        ("task", foundations.id, 60, "Footings poured", date(2024, 2, 9)),
        ("task", foundations.id, 100, "Foundations signed off", date(2024, 2, 29)),
        ("task", framing.id, 25, "Ground floor columns done", date(2024, 4, 15)),
        ("project", project.id, 15, "Foundations complete", date(2024, 3, 1)),
        ("project", project.id, 30, "Frame rising", date(2024, 4, 20)),
    ]:
        record_progress_update(db, parent_type, parent_id, percent, note, date=day)

    db.refresh(project)
    logger.info("Seeded demo project %s (id=%s).", project.name, project.id)
    return project


def main():
    configure_logging(settings.log_level)
    print("WARNING: This script will seed the database with demo data.")
    print(f"Target Environment: {settings.environment}")
    print(f"Database: {settings.database_url.split('@')[-1] if settings.database_url else 'Unknown'}")

    confirm = input("Are you sure you want to proceed? (yes/no): ")
    if confirm.lower() != "yes":
        print("Aborted.")
        return

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_demo(db)
        print("✅ Seeding completed successfully.")
    except Exception as e:
        db.rollback()
        print(f"❌ Seeding failed: {str(e)}")
        sys.exit(1)
    finally:
        db.close()

if __name__ == "__main__":
    main()

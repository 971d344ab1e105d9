"""The demo seed goes through the rollup engine and is idempotent."""

from app.models import Project, Task
from app.seed.seed_demo import DEMO_PROJECT, seed_demo
from app.utils.statistics import compute_project_stats, compute_task_cost_rollup


def test_seed_demo_populates_rollups(db_session):
    project = seed_demo(db_session)

    assert project.name == DEMO_PROJECT
    assert project.progress_percent == 30

    foundations = db_session.query(Task).filter_by(project_id=project.id, name="Foundations").one()
    assert foundations.progress_percent == 100

    stats = compute_project_stats(db_session, project.id)
    assert stats.tasks.completion_rate == 50
    assert stats.budget.budgeted == 77000
    assert stats.budget.actual == 29320
    assert stats.issues.resolved == 1

    costs = compute_task_cost_rollup(db_session, foundations.id)
    assert costs.materials == 11400
    assert costs.labor == 17920


def test_seed_demo_is_idempotent(db_session):
    first = seed_demo(db_session)
    second = seed_demo(db_session)

    assert first.id == second.id
    assert db_session.query(Project).count() == 1

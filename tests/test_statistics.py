"""Tests for project, issue, document and task cost statistics."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.core.errors import NotFoundError
from app.models import Equipment, Labor, Material
from app.utils.statistics import (
    compute_breakdown_stats,
    compute_document_statistics,
    compute_issue_statistics,
    compute_project_stats,
    compute_task_cost_rollup,
    percent_of,
)


class TestProjectStats:

    def test_project_without_tasks(self, db_session, make_project):
        project = make_project(budget_estimate=5000)

        stats = compute_project_stats(db_session, project.id)

        assert stats.tasks.total == 0
        assert stats.tasks.completion_rate == 0
        assert stats.tasks.average_progress == 0
        assert stats.budget.estimated == 5000
        assert stats.budget.budgeted == 0
        assert stats.budget.actual == 0
        assert stats.budget.variance == 0
        assert stats.issues.total == 0

    def test_budget_totals_split_by_type(self, db_session, make_project, make_task, make_budget):
        project = make_project()
        first = make_task(project, name="Foundations")
        second = make_task(project, name="Framing")
        make_budget(first, 100, "budgeted")
        make_budget(first, 60, "actual")
        make_budget(second, 50, "budgeted")

        stats = compute_project_stats(db_session, project.id)

        assert stats.budget.budgeted == 150
        assert stats.budget.actual == 60
        assert stats.budget.variance == -90

    def test_overspend_is_positive_variance(self, db_session, make_project, make_task, make_budget):
        project = make_project()
        task = make_task(project)
        make_budget(task, 200, "budgeted")
        make_budget(task, 260.50, "actual")

        stats = compute_project_stats(db_session, project.id)

        assert stats.budget.variance == pytest.approx(60.5)

    def test_task_breakdown(self, db_session, make_project, make_task):
        project = make_project(status="in_progress", progress_percent=40)
        make_task(project, status="completed", progress_percent=100)
        for _ in range(6):
            make_task(project, status="pending")
        make_task(project, status="in_progress", progress_percent=20)

        stats = compute_project_stats(db_session, project.id)

        assert stats.project.id == project.id
        assert stats.project.status == "in_progress"
        assert stats.project.progress_percent == 40
        assert stats.tasks.total == 8
        assert stats.tasks.completed == 1
        assert stats.tasks.in_progress == 1
        assert stats.tasks.pending == 6
        # 1/8 = 12.5% rounds half up
        assert stats.tasks.completion_rate == 13
        assert stats.tasks.average_progress == 15

    def test_issue_counts(self, db_session, make_project, make_issue):
        project = make_project()
        make_issue(project, "open")
        make_issue(project, "open")
        make_issue(project, "in_review")
        make_issue(project, "resolved")

        stats = compute_project_stats(db_session, project.id)

        assert stats.issues.total == 4
        assert stats.issues.open == 2
        assert stats.issues.in_review == 1
        assert stats.issues.resolved == 1

    def test_missing_project(self, db_session):
        with pytest.raises(NotFoundError):
            compute_project_stats(db_session, 404)


class TestBreakdownStats:

    @staticmethod
    def _items(*pairs):
        return [SimpleNamespace(kind=kind, when=when) for kind, when in pairs]

    def test_counts_by_category_and_month(self):
        items = self._items(
            ("pdf", date(2024, 1, 3)),
            ("dwg", date(2024, 1, 20)),
            ("pdf", date(2024, 2, 1)),
        )

        stats = compute_breakdown_stats(items, "kind", "when")

        assert stats.total == 3
        assert stats.by_category == {"pdf": 2, "dwg": 1}
        assert stats.by_month == {"2024-01": 2, "2024-02": 1}
        assert stats.most_common == "pdf"

    def test_tie_goes_to_first_encountered(self):
        items = self._items(
            ("jpg", date(2024, 1, 1)),
            ("pdf", date(2024, 1, 1)),
            ("pdf", date(2024, 1, 1)),
            ("jpg", date(2024, 1, 1)),
        )

        assert compute_breakdown_stats(items, "kind", "when").most_common == "jpg"
        assert compute_breakdown_stats(list(reversed(items)), "kind", "when").most_common == "jpg"
        assert compute_breakdown_stats(items[1:], "kind", "when").most_common == "pdf"

    def test_empty_input(self):
        stats = compute_breakdown_stats([], "kind", "when")

        assert stats.total == 0
        assert stats.by_category == {}
        assert stats.by_month == {}
        assert stats.most_common is None

    def test_datetime_months(self):
        items = self._items(("pdf", datetime(2023, 12, 31, 23, 59)), ("pdf", datetime(2024, 1, 1, 0, 1)))

        assert compute_breakdown_stats(items, "kind", "when").by_month == {"2023-12": 1, "2024-01": 1}


class TestIssueStatistics:

    def test_resolution_rate(self, db_session, make_project, make_issue):
        project = make_project()
        make_issue(project, "resolved", date(2024, 3, 2))
        make_issue(project, "open", date(2024, 3, 9))
        make_issue(project, "in_review", date(2024, 4, 1))

        stats = compute_issue_statistics(db_session, project.id)

        assert stats.total_issues == 3
        assert stats.open_issues == 1
        assert stats.resolved_issues == 1
        assert stats.resolution_rate == 33
        assert stats.status_breakdown == {"resolved": 1, "open": 1, "in_review": 1}
        assert stats.monthly_reports == {"2024-03": 2, "2024-04": 1}
        assert stats.most_common_status == "resolved"

    def test_no_issues(self, db_session):
        stats = compute_issue_statistics(db_session)

        assert stats.total_issues == 0
        assert stats.resolution_rate == 0
        assert stats.most_common_status is None

    def test_scoped_to_project(self, db_session, make_project, make_issue):
        first = make_project()
        second = make_project(name="Second")
        make_issue(first, "open")
        make_issue(second, "resolved")
        make_issue(second, "resolved")

        assert compute_issue_statistics(db_session, first.id).total_issues == 1
        assert compute_issue_statistics(db_session).total_issues == 3
        assert compute_issue_statistics(db_session).resolution_rate == 67


class TestDocumentStatistics:

    def test_file_types_and_months(self, db_session, make_project, make_document):
        project = make_project()
        make_document(project, "dwg", datetime(2024, 5, 2))
        make_document(project, "pdf", datetime(2024, 5, 9))
        make_document(project, "pdf", datetime(2024, 6, 1))
        make_document(project, "dwg", datetime(2024, 6, 3))

        stats = compute_document_statistics(db_session, project.id)

        assert stats.total_documents == 4
        assert stats.file_type_breakdown == {"dwg": 2, "pdf": 2}
        assert stats.monthly_uploads == {"2024-05": 2, "2024-06": 2}
        assert stats.most_common_type == "dwg"


class TestTaskCostRollup:

    def test_itemized_costs(self, db_session, make_project, make_task, make_budget):
        project = make_project()
        task = make_task(project)
        db_session.add_all([
            Material(task_id=task.id, name="Cement", quantity=40, unit="bags", unit_cost=12.5),
            Labor(task_id=task.id, worker_name="Crew A", hours=16, hourly_rate=30),
            Equipment(task_id=task.id, name="Excavator", rental_cost=450),
        ])
        db_session.commit()
        make_budget(task, 1500, "budgeted")
        make_budget(task, 1430, "actual")

        rollup = compute_task_cost_rollup(db_session, task.id)

        assert rollup.materials == 500
        assert rollup.labor == 480
        assert rollup.equipment == 450
        assert rollup.budgeted == 1500
        assert rollup.actual == 1430
        assert rollup.variance == -70

    def test_missing_task(self, db_session):
        with pytest.raises(NotFoundError):
            compute_task_cost_rollup(db_session, 7)


@pytest.mark.parametrize("part, whole, expected", [
    (0, 0, 0),
    (1, 2, 50),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),
    (3, 3, 100),
])
def test_percent_of(part, whole, expected):
    assert percent_of(part, whole) == expected

"""
Statistics over projects, tasks, documents and issues.

Nothing computed here is persisted; every call returns a fresh snapshot.
"""
import math
from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFoundError
from app.models.budget import Budget
from app.models.document import Document
from app.models.issue import Issue
from app.models.project import Project
from app.models.task import Task
from app.schemas.stats import (
    BreakdownStats,
    BudgetBreakdown,
    DocumentStats,
    IssueBreakdown,
    IssueStats,
    ProjectIdentity,
    ProjectStats,
    TaskBreakdown,
    TaskCostRollup,
)


def round_half_up(value: float) -> int:
    # round() is banker's rounding; rates are reported with 0.5 rounding up
    return int(math.floor(value + 0.5))


def percent_of(part: int, whole: int) -> int:
    """Integer percentage of ``part`` in ``whole``; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def _money(value) -> float:
    return float(value) if value is not None else 0.0


def sum_budget_lines(budgets: Iterable[Budget], budget_type: str) -> Decimal:
    return sum(
        (Decimal(str(b.amount)) for b in budgets if b.type == budget_type and b.amount is not None),
        Decimal("0"),
    )


def compute_project_stats(db: Session, project_id: int) -> ProjectStats:
    """
    Roll up tasks, budget line items and issues for one project.

    Args:
        db: Database session
        project_id: Project to summarize

    Returns:
        ProjectStats snapshot

    Raises:
        NotFoundError: the project does not exist
    """
    project = (
        db.query(Project)
        .options(
            selectinload(Project.tasks).selectinload(Task.budgets),
            selectinload(Project.issues),
        )
        .filter(Project.id == project_id)
        .first()
    )
    if not project:
        raise NotFoundError("Project", project_id)

    tasks = project.tasks
    task_counts = Counter(task.status for task in tasks)
    total_tasks = len(tasks)
    average_progress = (
        round_half_up(sum(task.progress_percent or 0 for task in tasks) / total_tasks)
        if total_tasks else 0
    )

    budget_lines = [budget for task in tasks for budget in task.budgets]
    budgeted = sum_budget_lines(budget_lines, "budgeted")
    actual = sum_budget_lines(budget_lines, "actual")

    issue_counts = Counter(issue.status for issue in project.issues)

    return ProjectStats(
        project=ProjectIdentity(
            id=project.id,
            name=project.name,
            status=project.status,
            progress_percent=project.progress_percent,
        ),
        tasks=TaskBreakdown(
            total=total_tasks,
            completed=task_counts["completed"],
            in_progress=task_counts["in_progress"],
            pending=task_counts["pending"],
            completion_rate=percent_of(task_counts["completed"], total_tasks),
            average_progress=average_progress,
        ),
        budget=BudgetBreakdown(
            estimated=float(project.budget_estimate) if project.budget_estimate is not None else None,
            budgeted=float(budgeted),
            actual=float(actual),
            variance=float(actual - budgeted),
        ),
        issues=IssueBreakdown(
            total=len(project.issues),
            open=issue_counts["open"],
            in_review=issue_counts["in_review"],
            resolved=issue_counts["resolved"],
        ),
    )


def compute_breakdown_stats(entities: Iterable, group_by: str, date_field: str) -> BreakdownStats:
    """
    Count ``entities`` per category and per month, and pick the mode.

    Categories and months keep the order in which they first appear. The
    most common category is the one with the highest count; on a tie the
    category encountered first wins.

    Args:
        entities: Objects exposing ``group_by`` and ``date_field`` attributes
        group_by: Attribute holding the category (e.g. "file_type", "status")
        date_field: Attribute holding a date or datetime

    Returns:
        BreakdownStats
    """
    by_category = {}
    by_month = {}
    total = 0
    for entity in entities:
        total += 1
        category = getattr(entity, group_by)
        by_category[category] = by_category.get(category, 0) + 1

        stamp = getattr(entity, date_field)
        if stamp is not None:
            month = stamp.strftime("%Y-%m")
            by_month[month] = by_month.get(month, 0) + 1

    most_common: Optional[str] = None
    best = 0
    for category, count in by_category.items():
        # strict comparison keeps the earliest category on ties
        if count > best:
            most_common, best = category, count

    return BreakdownStats(
        total=total,
        by_category=by_category,
        by_month=by_month,
        most_common=most_common,
    )


def compute_document_statistics(db: Session, project_id: Optional[int] = None) -> DocumentStats:
    query = db.query(Document)
    if project_id is not None:
        query = query.filter(Document.project_id == project_id)
    breakdown = compute_breakdown_stats(query.order_by(Document.id).all(), "file_type", "created_at")

    return DocumentStats(
        total_documents=breakdown.total,
        file_type_breakdown=breakdown.by_category,
        monthly_uploads=breakdown.by_month,
        most_common_type=breakdown.most_common,
    )


def compute_issue_statistics(db: Session, project_id: Optional[int] = None) -> IssueStats:
    query = db.query(Issue)
    if project_id is not None:
        query = query.filter(Issue.project_id == project_id)
    breakdown = compute_breakdown_stats(query.order_by(Issue.id).all(), "status", "date_reported")

    resolved = breakdown.by_category.get("resolved", 0)
    return IssueStats(
        total_issues=breakdown.total,
        status_breakdown=breakdown.by_category,
        monthly_reports=breakdown.by_month,
        open_issues=breakdown.by_category.get("open", 0),
        resolved_issues=resolved,
        resolution_rate=percent_of(resolved, breakdown.total),
        most_common_status=breakdown.most_common,
    )


def compute_task_cost_rollup(db: Session, task_id: int) -> TaskCostRollup:
    """
    Itemized cost totals for a single task.

    Materials are quantity x unit cost, labor is hours x hourly rate and
    equipment is the rental cost of everything assigned to the task. Budget
    totals only cover the task's own line items.
    """
    task = (
        db.query(Task)
        .options(
            selectinload(Task.budgets),
            selectinload(Task.materials),
            selectinload(Task.labor),
            selectinload(Task.equipment),
        )
        .filter(Task.id == task_id)
        .first()
    )
    if not task:
        raise NotFoundError("Task", task_id)

    materials = sum(_money(m.unit_cost) * (m.quantity or 0) for m in task.materials)
    labor = sum(_money(entry.hourly_rate) * (entry.hours or 0) for entry in task.labor)
    equipment = sum(_money(item.rental_cost) for item in task.equipment)
    budgeted = sum_budget_lines(task.budgets, "budgeted")
    actual = sum_budget_lines(task.budgets, "actual")

    return TaskCostRollup(
        task_id=task.id,
        materials=round(materials, 2),
        labor=round(labor, 2),
        equipment=round(equipment, 2),
        budgeted=float(budgeted),
        actual=float(actual),
        variance=float(actual - budgeted),
    )

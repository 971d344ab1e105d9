from pydantic import BaseModel
from typing import Optional, Dict


class ProjectIdentity(BaseModel):
    id: int
    name: str
    status: str
    progress_percent: int


class TaskBreakdown(BaseModel):
    total: int
    completed: int
    in_progress: int
    pending: int
    completion_rate: int
    average_progress: int


class BudgetBreakdown(BaseModel):
    """Money totals; variance is actual - budgeted, positive means overspend."""
    estimated: Optional[float] = None
    budgeted: float
    actual: float
    variance: float


class IssueBreakdown(BaseModel):
    total: int
    open: int
    in_review: int
    resolved: int


class ProjectStats(BaseModel):
    project: ProjectIdentity
    tasks: TaskBreakdown
    budget: BudgetBreakdown
    issues: IssueBreakdown


class BreakdownStats(BaseModel):
    """Counts per category and per YYYY-MM month, plus the most frequent category."""
    total: int
    by_category: Dict[str, int]
    by_month: Dict[str, int]
    most_common: Optional[str] = None


class DocumentStats(BaseModel):
    total_documents: int
    file_type_breakdown: Dict[str, int]
    monthly_uploads: Dict[str, int]
    most_common_type: Optional[str] = None


class IssueStats(BaseModel):
    total_issues: int
    status_breakdown: Dict[str, int]
    monthly_reports: Dict[str, int]
    open_issues: int
    resolved_issues: int
    resolution_rate: int
    most_common_status: Optional[str] = None


class TaskCostRollup(BaseModel):
    task_id: int
    materials: float
    labor: float
    equipment: float
    budgeted: float
    actual: float
    variance: float

from .project import ProjectCreate, ProjectUpdate, ProjectResponse
from .task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskResponse
from .budget import BudgetCreate, BudgetUpdate, BudgetResponse
from .progress_update import (
    ProgressUpdateCreate,
    ProgressUpdateEdit,
    ProgressUpdateResponse,
    TimelineEntry,
)
from .issue import IssueCreate, IssueStatusUpdate, IssueResponse
from .document import DocumentCreate, DocumentResponse
from .stats import (
    ProjectStats,
    BreakdownStats,
    DocumentStats,
    IssueStats,
    TaskCostRollup,
)

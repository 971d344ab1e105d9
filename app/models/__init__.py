from .admin import Admin
from .user import User
from .project import Project, PROJECT_STATUSES
from .task import Task, TASK_STATUSES
from .resources import Material, Equipment, Labor
from .budget import Budget, BUDGET_TYPES, BUDGET_ENTRY_TYPES
from .progress_update import ProgressUpdate, PARENT_TYPES
from .issue import Issue, ISSUE_STATUSES
from .document import Document

__all__ = [
    "Admin",
    "User",
    "Project",
    "Task",
    "Material",
    "Equipment",
    "Labor",
    "Budget",
    "ProgressUpdate",
    "Issue",
    "Document",
]

# Import all models so Base.metadata is populated for Alembic autogenerate.
from project_budget.models.project import Project  # noqa: F401
from project_budget.models.user import User  # noqa: F401
from project_budget.models.task import Subtask, Task  # noqa: F401
from project_budget.models.hourly_rate import HourlyRate  # noqa: F401
from project_budget.models.currency import Currency  # noqa: F401
from project_budget.models.budget import BudgetLine  # noqa: F401

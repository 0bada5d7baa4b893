import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from project_budget.models.base import Base, TimestampMixin, generate_uuid


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

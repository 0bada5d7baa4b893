import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from project_budget.models.base import Base, TimestampMixin, generate_uuid


class User(TimestampMixin, Base):
    """A project member whose tracked time is billed at an hourly rate."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

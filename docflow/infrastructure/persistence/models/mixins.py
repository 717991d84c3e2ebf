"""SQLAlchemy mixins for common model columns.

Provides: CuidMixin, CreatedAtMixin, TimestampMixin, RowVersionMixin and the
combined WorkflowModel base used by mutable workflow tables.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from docflow.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Mixin for append-only rows: created_at only (server default, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class RowVersionMixin:
    """Mixin for optimistic locking: row_version starts at 1, bumped on every write."""

    @declared_attr
    def row_version(cls) -> Mapped[int]:
        return mapped_column(Integer, default=1, nullable=False)


class WorkflowModel(CuidMixin, TimestampMixin, RowVersionMixin):
    """Combined mixin: CUID + timestamps + row_version."""

    __abstract__ = True

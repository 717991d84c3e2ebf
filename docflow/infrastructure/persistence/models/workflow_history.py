"""Workflow history ORM model. Append-only trail of document transitions."""

from typing import Any

from sqlalchemy import (
    BigInteger,
    Connection,
    ForeignKey,
    Identity,
    Index,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from docflow.infrastructure.persistence.database import Base
from docflow.infrastructure.persistence.models.mixins import CreatedAtMixin, CuidMixin


class WorkflowHistory(CuidMixin, CreatedAtMixin, Base):
    """One transition of a document (who, from which status/level to which). No update/delete."""

    __tablename__ = "workflow_history"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False
    )
    action_code: Mapped[str] = mapped_column(String(32), nullable=False)
    from_user_id: Mapped[str] = mapped_column(String, nullable=False)
    to_user_id: Mapped[str | None] = mapped_column(String, nullable=True)
    previous_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    new_status: Mapped[str] = mapped_column(String(32), nullable=False)
    from_workflow_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    to_workflow_level: Mapped[int] = mapped_column(Integer, nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Insert order; created_at is the transaction start time in Postgres.
    sequence: Mapped[int] = mapped_column(BigInteger, Identity(), nullable=False)

    __table_args__ = (
        Index("ix_workflow_history_document_created", "document_id", "created_at"),
    )


@event.listens_for(WorkflowHistory, "before_update")
def _prevent_history_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: WorkflowHistory
) -> None:
    """History entries are append-only; updates are forbidden."""
    raise ValueError("Workflow history entries are immutable and cannot be updated.")


@event.listens_for(WorkflowHistory, "before_delete")
def _prevent_history_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: WorkflowHistory
) -> None:
    """History entries cannot be deleted."""
    raise ValueError("Workflow history entries cannot be deleted.")

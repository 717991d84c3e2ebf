"""Document, version, assignment and comment ORM models."""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from docflow.infrastructure.persistence.database import Base
from docflow.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    WorkflowModel,
)


class Document(WorkflowModel, Base):
    """Workflow document. Table: document. User ids are opaque (identity is external)."""

    __tablename__ = "document"

    document_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str] = mapped_column(
        String, ForeignKey("document_category.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    workflow_level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    created_by: Mapped[str] = mapped_column(String, nullable=False, index=True)
    current_handler_id: Mapped[str | None] = mapped_column(
        String, nullable=True, index=True
    )
    department_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("department.id", ondelete="SET NULL"), nullable=True, index=True
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_document_department_status", "department_id", "status"),
    )


class DocumentVersion(CuidMixin, CreatedAtMixin, Base):
    """File version of a document. At most one row per document has is_current."""

    __tablename__ = "document_version"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_by: Mapped[str] = mapped_column(String, nullable=False)
    change_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("document_id", "version_number", name="uq_document_version_number"),
        Index(
            "ux_document_version_current",
            "document_id",
            unique=True,
            postgresql_where=text("is_current"),
        ),
    )


class DocumentAssignment(CuidMixin, Base):
    """Handoff record: who owns the next action. At most one active per document."""

    __tablename__ = "document_assignment"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_to: Mapped[str] = mapped_column(String, nullable=False, index=True)
    assigned_by: Mapped[str] = mapped_column(String, nullable=False)
    workflow_level: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("now()"), nullable=False
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index(
            "ux_document_assignment_active",
            "document_id",
            unique=True,
            postgresql_where=text("is_active"),
        ),
        Index("ix_document_assignment_user_active", "assigned_to", "is_active"),
    )


class DocumentComment(CuidMixin, CreatedAtMixin, Base):
    """Comment on a document; parent_comment_id links a reply to a top-level comment."""

    __tablename__ = "document_comment"

    document_id: Mapped[str] = mapped_column(
        String, ForeignKey("document.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    parent_comment_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("document_comment.id", ondelete="CASCADE"), nullable=True
    )

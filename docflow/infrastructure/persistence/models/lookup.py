"""Lookup ORM models: departments and document categories."""

from sqlalchemy import Boolean, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from docflow.infrastructure.persistence.database import Base
from docflow.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Department(CuidMixin, TimestampMixin, Base):
    """Organisational unit. code feeds the document number segment."""

    __tablename__ = "department"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)


class DocumentCategory(CuidMixin, TimestampMixin, Base):
    """Document category (e.g. Contract, Policy). Inactive categories are hidden."""

    __tablename__ = "document_category"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

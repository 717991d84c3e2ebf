"""Generates human-readable document numbers: PREFIX[-DEPT]-YYYYMMDD-NNNN."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from docflow.domain.value_objects.core import DocumentNumber

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import (
        IDepartmentRepository,
        IDocumentRepository,
    )


class DocumentNumberGenerator:
    """Next number = last sequence issued today for the same prefix + 1.

    Two concurrent creators can compute the same number; the unique index on
    document_number rejects the second insert.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        department_repo: IDepartmentRepository,
        prefix: str = "DOC",
    ) -> None:
        self._documents = document_repo
        self._departments = department_repo
        self._prefix = prefix.upper()

    async def next_number(self, department_id: str | None, now: datetime) -> DocumentNumber:
        department_code = None
        if department_id:
            code = await self._departments.get_code(department_id)
            department_code = code.upper() if code else None
        candidate = DocumentNumber(
            prefix=self._prefix,
            department_code=department_code,
            day=now.date(),
            sequence=1,
        )
        last = await self._documents.get_last_number_with_prefix(candidate.day_prefix)
        if last is None:
            return candidate
        try:
            last_sequence = int(last[len(candidate.day_prefix):])
        except ValueError:
            last_sequence = 0
        return DocumentNumber(
            prefix=candidate.prefix,
            department_code=candidate.department_code,
            day=candidate.day,
            sequence=last_sequence + 1,
        )

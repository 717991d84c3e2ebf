"""Domain value objects for docflow.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from datetime import date

from docflow.domain.enums import REVIEWER_MIN_LEVEL, RoleLevel

_DEPT_CODE_RE = re.compile(r"^[A-Z0-9]{1,10}$")
_DOCUMENT_NUMBER_RE = re.compile(
    r"^(?P<prefix>[A-Z0-9]+)(?:-(?P<dept>[A-Z0-9]+))?-(?P<day>\d{8})-(?P<seq>\d{4,})$"
)


@dataclass(frozen=True)
class IdentityContext:
    """Authenticated caller as resolved by the API layer.

    role_level is an ordinal (1=Assistant .. 4=Admin); department_id may be
    None for users outside any department (only Admin sees across them).
    """

    actor_id: str
    role_level: int
    department_id: str | None = None

    def __post_init__(self) -> None:
        if not self.actor_id:
            raise ValueError("actor_id must be a non-empty string")
        if self.role_level not in RoleLevel._value2member_map_:
            raise ValueError(
                f"role_level must be one of {[r.value for r in RoleLevel]}, got {self.role_level!r}"
            )

    @property
    def is_admin(self) -> bool:
        return self.role_level >= RoleLevel.ADMIN

    @property
    def is_reviewer(self) -> bool:
        return self.role_level >= REVIEWER_MIN_LEVEL


@dataclass(frozen=True)
class DocumentNumber:
    """Human-readable document number: PREFIX[-DEPT]-YYYYMMDD-NNNN.

    The sequence resets per day and per prefix/department segment.
    """

    prefix: str
    department_code: str | None
    day: date
    sequence: int

    def __post_init__(self) -> None:
        if not self.prefix or not self.prefix.isalnum():
            raise ValueError("Document number prefix must be alphanumeric")
        if self.department_code is not None and not _DEPT_CODE_RE.match(
            self.department_code
        ):
            raise ValueError(
                "Department code must be 1-10 uppercase alphanumeric characters"
            )
        if self.sequence < 1:
            raise ValueError("Document number sequence must be >= 1")

    @property
    def day_prefix(self) -> str:
        """Everything before the sequence, including the trailing dash."""
        parts = [self.prefix.upper()]
        if self.department_code:
            parts.append(self.department_code)
        parts.append(self.day.strftime("%Y%m%d"))
        return "-".join(parts) + "-"

    @property
    def value(self) -> str:
        return f"{self.day_prefix}{self.sequence:04d}"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "DocumentNumber":
        """Parse a stored document number. Raises ValueError on malformed input."""
        match = _DOCUMENT_NUMBER_RE.match(value or "")
        if not match:
            raise ValueError(f"Malformed document number: {value!r}")
        day_raw = match.group("day")
        return cls(
            prefix=match.group("prefix"),
            department_code=match.group("dept"),
            day=date(int(day_raw[:4]), int(day_raw[4:6]), int(day_raw[6:])),
            sequence=int(match.group("seq")),
        )

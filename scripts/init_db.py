"""Create the docflow schema and seed lookup rows (departments, categories).

Idempotent: tables are created if missing and seed rows are matched by code.

Usage:
    python -m scripts.init_db
Requires: DATABASE_URL (Postgres) and SECRET_KEY in the environment or .env.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select

import docflow.infrastructure.persistence.database as database
from docflow.infrastructure.persistence import models
from docflow.infrastructure.persistence.models import Department, DocumentCategory

DEFAULT_DEPARTMENTS: list[tuple[str, str]] = [
    ("Administration", "ADM"),
    ("Finance", "FIN"),
    ("Human Resources", "HR"),
    ("Operations", "OPS"),
]

DEFAULT_CATEGORIES: list[tuple[str, str, str]] = [
    ("Contract", "CONTRACT", "Agreements with third parties"),
    ("Policy", "POLICY", "Internal policies and procedures"),
    ("Report", "REPORT", "Periodic and ad-hoc reports"),
    ("Memo", "MEMO", "Internal memoranda"),
]


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_* when run as script."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)


async def main() -> None:
    _load_env()
    database._ensure_engine()
    if database.engine is None or database.AsyncSessionLocal is None:
        print("Set DATABASE_BACKEND=postgres and DATABASE_URL", file=sys.stderr)
        sys.exit(1)

    async with database.engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    print(f"Schema ready ({len(models.__all__)} models)")

    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            existing = set(
                (await session.execute(select(Department.code))).scalars().all()
            )
            for name, code in DEFAULT_DEPARTMENTS:
                if code not in existing:
                    session.add(Department(name=name, code=code))
                    print(f"Department {code} created")
            existing = set(
                (await session.execute(select(DocumentCategory.code))).scalars().all()
            )
            for name, code, description in DEFAULT_CATEGORIES:
                if code not in existing:
                    session.add(
                        DocumentCategory(name=name, code=code, description=description)
                    )
                    print(f"Category {code} created")

    await database.engine.dispose()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())

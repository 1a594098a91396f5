"""Seed an admin plus a handful of bins and collections for local development.

Usage:
    PYTHONPATH=src python scripts/seed_dashboard.py

Idempotent: skips the admin and bins that already exist (matched by username / code).
Creates this month's collections on every run so the dashboard cards move.
"""

import asyncio
import logging
import sys
from datetime import datetime, timedelta

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("seed_dashboard")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

ADMIN_USERNAME = "admin"

BINS = [
    {"code": "BIN-001", "location": "Market Street", "status": "full", "fill_level": 100},
    {"code": "BIN-002", "location": "Central Park North", "status": "half", "fill_level": 55},
    {"code": "BIN-003", "location": "Central Park South", "status": "empty", "fill_level": 0},
    {"code": "BIN-004", "location": "Harbor Gate", "status": "full", "fill_level": 95},
    {"code": "BIN-005", "location": "Library Plaza", "status": "empty", "fill_level": 5},
]


async def main() -> None:
    from sqlalchemy import select

    from bindash.config import settings
    from bindash.db.models import Admin, Bin, Collection
    from bindash.db.repos.admin_repo import AdminRepo
    from bindash.db.session import build_engine, build_session_factory

    engine = build_engine(settings.database_url, echo=False)
    session_factory = build_session_factory(engine)

    async with session_factory() as session:
        try:
            admin = (await session.execute(select(Admin).where(Admin.username == ADMIN_USERNAME))).scalar_one_or_none()
            if admin is None:
                admin = await AdminRepo(session).create(ADMIN_USERNAME, "Dashboard Admin")
                logger.info("Created admin %s (id=%d)", admin.username, admin.id)

            now = datetime.now()
            for row in BINS:
                existing = (await session.execute(select(Bin).where(Bin.code == row["code"]))).scalar_one_or_none()
                if existing is not None:
                    continue
                b = Bin(**row, status_updated_at=now)
                session.add(b)
                await session.flush()
                logger.info("Created bin %s", b.code)

            bins = (await session.execute(select(Bin))).scalars().all()
            for idx, b in enumerate(bins):
                session.add(Collection(
                    bin_id=b.id,
                    collected_by="crew-a" if idx % 2 == 0 else "crew-b",
                    status="completed" if b.status == "empty" else "scheduled",
                    collection_date=now - timedelta(hours=idx),
                ))
            await session.commit()
            logger.info("Added %d collections", len(bins))
        except Exception:
            await session.rollback()
            logger.exception("Seeding failed")
            sys.exit(1)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())

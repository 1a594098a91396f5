"""FallbackCountRunner — single-value COUNT queries that report faults as "unknown"."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountQuery:
    """One candidate query for a metric.

    ``variant`` tags the schema shape the query assumes (None = works on any).
    """

    name: str
    sql: str
    params: dict[str, Any] = field(default_factory=dict)
    variant: Optional[str] = None

    def with_params(self, **params: Any) -> "CountQuery":
        wanted = {k: v for k, v in params.items() if f":{k}" in self.sql}
        return CountQuery(name=self.name, sql=self.sql, params=wanted, variant=self.variant)


class FallbackCountRunner:
    """Runs each query on its own connection so one failure cannot poison another."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def run(self, query: CountQuery) -> Optional[int]:
        """Return the first column of the first row, 0 for no rows, None on any query fault."""
        stmt = text(query.sql)
        typed = [bindparam(k, type_=DateTime()) for k, v in query.params.items() if isinstance(v, datetime)]
        if typed:
            stmt = stmt.bindparams(*typed)

        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt, query.params)
                row = result.first()
        except SQLAlchemyError as e:
            logger.warning("Count query %s failed: %s -- SQL: %s", query.name, e, " ".join(query.sql.split()))
            return None

        if row is None or row[0] is None:
            return 0
        return int(row[0])

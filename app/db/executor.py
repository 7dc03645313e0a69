from typing import Optional, Protocol

from app.core.config import settings
from app.core.predicate import Predicate


class QueryExecutor(Protocol):
    async def count(self, predicate: Predicate, table_id: str, project_id: Optional[str] = None) -> int:
        ...


def get_executor() -> QueryExecutor:
    """Backend selected by QUERY_BACKEND."""
    if settings.QUERY_BACKEND == "bigquery":
        from app.db.bigquery import bq_client
        return bq_client
    from app.db.elasticsearch import es_client
    return es_client

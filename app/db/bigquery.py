import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from google.cloud import bigquery

from app.core.predicate import Predicate
from app.utils.sql import to_sql

logger = logging.getLogger(__name__)


class BigQueryClient:
    """Runs existence queries against a BigQuery allele table."""

    def _count(self, predicate: Predicate, table_id: str, project_id: Optional[str]) -> int:
        sql, params = to_sql(predicate, table_id)
        job_config = bigquery.QueryJobConfig(
            query_parameters=[
                bigquery.ScalarQueryParameter(p.name, p.type, p.value) for p in params
            ]
        )
        client = bigquery.Client(project=project_id)
        try:
            logger.debug("Running BigQuery existence query on %s", table_id)
            rows = client.query(sql, job_config=job_config).result()
            for row in rows:
                return row["count"]
            return 0
        finally:
            client.close()

    async def count(self, predicate: Predicate, table_id: str, project_id: Optional[str] = None) -> int:
        # The BigQuery client is blocking.
        return await run_in_threadpool(self._count, predicate, table_id, project_id)


bq_client = BigQueryClient()

import logging
from typing import Optional

from elasticsearch import AsyncElasticsearch

from app.core.config import settings
from app.core.predicate import Predicate
from app.utils.es_query import to_es_query

logger = logging.getLogger(__name__)


class ElasticsearchClient:
    client: AsyncElasticsearch = None

    async def connect(self):
        if self.client is None:
            self.client = AsyncElasticsearch(settings.ELASTICSEARCH_URL)
            logger.info("Connecting to Elasticsearch at %s", settings.ELASTICSEARCH_URL)

    async def close(self):
        if self.client:
            await self.client.close()
            self.client = None
            logger.info("Closed Elasticsearch connection")

    async def count(self, predicate: Predicate, table_id: str, project_id: Optional[str] = None) -> int:
        """
        Count documents of index `table_id` matching the predicate.

        Counting stops at the first hit; callers only test for > 0.
        `project_id` has no meaning for Elasticsearch and is ignored.
        """
        await self.connect()
        query = to_es_query(predicate, settings.ES_KEYWORD_SUFFIX)
        response = await self.client.count(index=table_id, query=query, terminate_after=1)
        return response['count']


es_client = ElasticsearchClient()

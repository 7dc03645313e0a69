import json
import logging
import os
from functools import lru_cache
from typing import Any, Dict, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ServerConfigError
from app.core.query import QueryMode, QueryPolicy

logger = logging.getLogger(__name__)


@lru_cache()
def load_info_file(path: str) -> Dict[str, Any]:
    """
    Read a beacon.json description once per path.

    A missing file gives an empty dict. Unreadable or non-object JSON
    raises ServerConfigError.
    """
    if not path or not os.path.isfile(path):
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ServerConfigError(f"reading beacon info from {path}: {e}") from e
    if not isinstance(data, dict):
        raise ServerConfigError(f"beacon info in {path} must be a JSON object")
    logger.info("Loaded beacon info from %s", path)
    return data


class Settings(BaseSettings):
    PROJECT_NAME: str = "Beacon API"
    VERSION: str = "1.0.0"

    # Beacon identity
    BEACON_API_VERSION: str = "v0.0.1"
    BEACON_ID: str = ""
    BEACON_NAME: str = ""
    BEACON_ORGANIZATION_ID: str = ""
    BEACON_ORGANIZATION_NAME: str = ""
    # If present, overrides the identity fields and VARIANTS_DATASET.
    BEACON_INFO_FILE: str = "beacon.json"

    # Data location
    VARIANTS_DATASET: str = ""
    GOOGLE_CLOUD_PROJECT: str = ""
    QUERY_BACKEND: Literal["elasticsearch", "bigquery"] = "elasticsearch"

    # Query rules
    QUERY_MODE: QueryMode = QueryMode.ALLELE
    REQUIRE_REFERENCE_BASES: bool = True
    REQUIRE_ALTERNATE_BASES: bool = False
    ALTERNATE_BASES_REPEATED: bool = True

    # Elasticsearch
    ELASTICSEARCH_URL: str = "http://localhost:9200"
    ES_KEYWORD_SUFFIX: str = ".keyword"

    # CORS: matching origins are echoed back
    BACKEND_CORS_ORIGIN_REGEX: str = ".*"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    def query_policy(self) -> QueryPolicy:
        return QueryPolicy(
            mode=self.QUERY_MODE,
            require_reference_bases=self.REQUIRE_REFERENCE_BASES,
            require_alternate_bases=self.REQUIRE_ALTERNATE_BASES,
            alternate_bases_repeated=self.ALTERNATE_BASES_REPEATED,
        )

    def beacon_info(self) -> Dict[str, Any]:
        """
        Beacon description served at the root endpoint.

        Values from BEACON_INFO_FILE take precedence over environment settings.

        Raises:
            ServerConfigError: BEACON_INFO_FILE exists but cannot be used.
        """
        info = {
            "id": self.BEACON_ID,
            "name": self.BEACON_NAME,
            "apiVersion": self.BEACON_API_VERSION,
            "organization": {
                "id": self.BEACON_ORGANIZATION_ID,
                "name": self.BEACON_ORGANIZATION_NAME,
            },
            "dataset": self.VARIANTS_DATASET,
        }
        info.update(load_info_file(self.BEACON_INFO_FILE))
        info["apiVersion"] = self.BEACON_API_VERSION
        return info

    def validate_server_config(self) -> None:
        if not self.beacon_info()["dataset"]:
            raise ServerConfigError("VARIANTS_DATASET must be specified")
        if self.QUERY_BACKEND == "bigquery" and not self.GOOGLE_CLOUD_PROJECT:
            raise ServerConfigError("GOOGLE_CLOUD_PROJECT must be specified")


settings = Settings()


@lru_cache()
def get_query_policy() -> QueryPolicy:
    """Query rules of this deployment, built on first use."""
    return settings.query_policy()

"""
SQL Server Import Client

Hands a SQL Server import to an external HTTP service. The service receives
the connection settings and target store and answers with the number of
records it imported: ``{"recordsImported": <int>}``.
"""

import asyncio
from typing import Any, Dict, Optional

import requests
import structlog
from pydantic import BaseModel, SecretStr

from inventory_analytics.exceptions import SqlImportError

logger = structlog.get_logger(__name__)


class SqlImportConfig(BaseModel):
    """Connection settings forwarded to the import service"""
    server: str = ""
    database: str = ""
    username: str = ""
    password: SecretStr = SecretStr("")
    query: str = ""

    def payload(self) -> Dict[str, str]:
        return {
            "server": self.server,
            "database": self.database,
            "username": self.username,
            "password": self.password.get_secret_value(),
            "query": self.query,
        }


class SqlImportClient:
    """
    Blocking ``requests`` call run in a worker thread.

    Example:
        client = SqlImportClient("http://importer/api/import-sql")
        imported = await client.run(config, target_store="store-1")
    """

    def __init__(self, url: str, timeout: float = 60.0):
        self.url = url
        self.timeout = timeout

    def _post(self, body: Dict[str, Any]) -> int:
        try:
            resp = requests.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise SqlImportError(f"Failed to connect to SQL import service: {e}") from e

        if resp.status_code >= 300:
            raise SqlImportError(
                f"SQL import service responded {resp.status_code}: {resp.text[:300]}"
            )

        try:
            imported = resp.json()["recordsImported"]
        except (ValueError, KeyError, TypeError) as e:
            raise SqlImportError("SQL import service returned an invalid response") from e
        if isinstance(imported, bool) or not isinstance(imported, int):
            raise SqlImportError(f"SQL import service returned a non-integer count: {imported!r}")
        return imported

    async def run(self, config: SqlImportConfig, target_store: Optional[str] = None) -> int:
        """
        Run the import and return the number of records imported.

        Raises:
            SqlImportError: Transport failure, non-2xx status, or malformed body
        """
        body = {"config": config.payload(), "targetStore": target_store}
        logger.info("Starting SQL import", url=self.url, server=config.server, target_store=target_store)

        try:
            imported = await asyncio.to_thread(self._post, body)
        except SqlImportError as e:
            logger.error("SQL import failed", error=str(e))
            raise

        logger.info("SQL import complete", records_imported=imported)
        return imported

"""
Client Sessions

Per-client state: the loaded store list, import history, and one load
coordinator per view. Sessions are owned by a registry held on the
application instance; nothing here is module-level.
"""

from collections import OrderedDict
from typing import List, Optional
import uuid

import structlog

from inventory_analytics.database.facade import DataAccess
from inventory_analytics.database.records import Store
from inventory_analytics.ingestion.importer import ImportHistory
from inventory_analytics.reporting.metrics import DashboardData, ProfitabilityData, ReportData
from .loaders import LoadCoordinator
from .views import load_stores

logger = structlog.get_logger(__name__)


class DashboardSession:
    """State kept for one client across requests"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.stores: List[Store] = []
        self.stores_loaded = False
        self.history = ImportHistory()
        self.dashboard = LoadCoordinator("dashboard", DashboardData())
        self.profitability = LoadCoordinator("profitability", ProfitabilityData())
        self.reports = LoadCoordinator("reports", ReportData())

    async def refresh_stores(self, data_access: DataAccess) -> List[Store]:
        """Reload the store list from the backend"""
        self.stores = await load_stores(data_access)
        self.stores_loaded = True
        logger.debug("Stores loaded", session_id=self.session_id, stores=len(self.stores))
        return self.stores

    async def get_stores(self, data_access: DataAccess) -> List[Store]:
        """Store list, loaded on first use"""
        if not self.stores_loaded:
            await self.refresh_stores(data_access)
        return self.stores

    async def resolve_store(self, data_access: DataAccess, store_id: Optional[str]) -> Optional[Store]:
        """
        The store selected by ``store_id``; None selects all stores.

        Raises:
            KeyError: No store with that id
        """
        if not store_id:
            return None
        for store in await self.get_stores(data_access):
            if store.id == store_id:
                return store
        raise KeyError(store_id)


class SessionRegistry:
    """
    Sessions keyed by id, least recently used evicted beyond ``max_sessions``.

    Example:
        registry = SessionRegistry()
        session = registry.get_or_create(request.headers.get("X-Session-ID"))
    """

    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, DashboardSession]" = OrderedDict()

    def get_or_create(self, session_id: Optional[str] = None) -> DashboardSession:
        session_id = session_id or str(uuid.uuid4())
        session = self._sessions.get(session_id)
        if session is None:
            session = DashboardSession(session_id)
            self._sessions[session_id] = session
            logger.info("Session created", session_id=session_id)
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Session evicted", session_id=evicted)
        else:
            self._sessions.move_to_end(session_id)
        return session

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

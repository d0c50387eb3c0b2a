"""
Request Dependencies

FastAPI dependencies resolving the data access façade, the caller's
session and report settings. Tests replace ``get_data_access`` through
``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Depends, Header, Request, Response

from inventory_analytics.config import get_settings
from inventory_analytics.config.settings import ImportSettings, ReportSettings
from inventory_analytics.database.facade import DataAccess, SqlAlchemyDataAccess
from inventory_analytics.serving.session import DashboardSession, SessionRegistry
from .middleware import SESSION_HEADER


def get_data_access() -> DataAccess:
    return SqlAlchemyDataAccess()


def get_report_settings() -> ReportSettings:
    return get_settings().reports


def get_import_settings() -> ImportSettings:
    return get_settings().imports


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session(
    response: Response,
    registry: SessionRegistry = Depends(get_registry),
    session_id: Optional[str] = Header(default=None, alias=SESSION_HEADER),
) -> DashboardSession:
    """Session named by the X-Session-ID header; a new one when absent or unknown"""
    session = registry.get_or_create(session_id)
    response.headers[SESSION_HEADER] = session.session_id
    return session

"""
Serving Module
"""
from .loaders import LoadCoordinator, ViewState
from .session import DashboardSession, SessionRegistry

__all__ = [
    "LoadCoordinator",
    "ViewState",
    "DashboardSession",
    "SessionRegistry",
]

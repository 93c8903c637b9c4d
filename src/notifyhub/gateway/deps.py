"""Dependency injection -- FastAPI Depends accessors for app.state

Everything here is built once in the lifespan and read per request.
"""

from fastapi import Request
from notifyhub.core.store import StoreGroup

from .services.dispatch_service import DispatchCoordinator


def get_store_group(request: Request) -> StoreGroup:
    """StoreGroup from app.state"""
    return request.app.state.store_group


def get_dispatch_coordinator(request: Request) -> DispatchCoordinator:
    """DispatchCoordinator from app.state"""
    return request.app.state.dispatch_coordinator

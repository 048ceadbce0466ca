"""
State store for Tea Farm Operations.
"""

from teafarm.store.auth import AuthSlice, AuthState, AuthStatus
from teafarm.store.dashboard import DashboardSlice, DashboardState
from teafarm.store.entities import (
    FieldSlice,
    HarvestRecordSlice,
    TaskSlice,
    WeatherObservationSlice,
)
from teafarm.store.slice import EntitySlice, OperationResult, SliceState
from teafarm.store.store import Store, create_store, get_store

__all__ = [
    "AuthSlice",
    "AuthState",
    "AuthStatus",
    "DashboardSlice",
    "DashboardState",
    "EntitySlice",
    "FieldSlice",
    "HarvestRecordSlice",
    "OperationResult",
    "SliceState",
    "Store",
    "TaskSlice",
    "WeatherObservationSlice",
    "create_store",
    "get_store",
]

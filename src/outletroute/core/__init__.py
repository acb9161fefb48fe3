"""Core runtime aggregator (source of truth).

Purpose: expose the runtime building blocks from a single module. No extra
logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not register plugins or
  instantiate routers.
- Public API mirrors underlying modules 1:1:
  * ``base_router`` → ``BaseRouter`` (plugin-free engine), ``NavigationEvent``
  * ``router`` → ``Router`` (plugin-enabled)
  * ``config`` → ``RouteConfig``
  * ``compiler`` → ``CompiledRoute``, ``RouteTree``, ``compile_routes``
  * ``matcher`` → ``MatchType``, ``OutletContext``, ``Snapshot``, ``match_routes``
  * ``lifecycle`` → ``Transition``, ``TransitionAction``
  * ``history`` → ``MemoryHistory``, ``HashHistory``, ``StateHistory``
  * ``outlet`` → ``Outlet``, ``MapParamsOptions``
  * ``errors`` → ``RouteConfigError``, ``TemplateError``, ``MissingParam``
"""

from .base_router import BaseRouter, NavigationEvent
from .compiler import CompiledRoute, RouteTree, compile_routes
from .config import RouteConfig
from .errors import MissingParam, RouteConfigError, TemplateError
from .history import HashHistory, History, MemoryHistory, StateHistory
from .lifecycle import Transition, TransitionAction
from .matcher import MatchType, OutletContext, Snapshot, match_routes
from .outlet import MapParamsOptions, Outlet
from .router import Router

__all__ = [
    "BaseRouter",
    "Router",
    "NavigationEvent",
    "RouteConfig",
    "CompiledRoute",
    "RouteTree",
    "compile_routes",
    "MatchType",
    "OutletContext",
    "Snapshot",
    "match_routes",
    "Transition",
    "TransitionAction",
    "History",
    "MemoryHistory",
    "HashHistory",
    "StateHistory",
    "Outlet",
    "MapParamsOptions",
    "RouteConfigError",
    "TemplateError",
    "MissingParam",
]

"""outletroute public API surface (source of truth).

Recreate the module with these rules:
- Public exports: ``Router``, ``BaseRouter``, ``RouteConfig``, the match
  vocabulary (``MatchType``, ``OutletContext``, ``Transition``), ``Outlet``,
  the history backends and the error types.
- Plugin registration: import built-in plugins (``logging``) for their side
  effect of calling ``Router.register_plugin(<class>)``. Imports are done
  lazily via ``import_module`` to avoid cycles.

Constraints
-----------
- Import must stay lightweight: no router instantiation or heavy work beyond
  plugin registration.
- Version string lives here as ``__version__`` and must remain available for
  packaging tools.
"""

from importlib import import_module

__version__ = "0.1.0"

from .core import (
    BaseRouter,
    HashHistory,
    MatchType,
    MemoryHistory,
    MissingParam,
    NavigationEvent,
    Outlet,
    OutletContext,
    RouteConfig,
    RouteConfigError,
    Router,
    StateHistory,
    TemplateError,
    Transition,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "Router",
    "BaseRouter",
    "NavigationEvent",
    "RouteConfig",
    "MatchType",
    "OutletContext",
    "Transition",
    "Outlet",
    "MemoryHistory",
    "HashHistory",
    "StateHistory",
    "RouteConfigError",
    "TemplateError",
    "MissingParam",
]

"""Router with plugin pipeline (source of truth).

If this module disappeared, rebuild it exactly as described. ``Router`` extends
``BaseRouter`` with a global plugin registry, per-router plugin instances,
middleware wrapping around the navigation cycle, and plugin state stored on
the router instance.

Internal state
--------------
- ``_plugin_specs``: list of ``_PluginSpec`` (factory, kwargs copy).
- ``_plugins``: instantiated plugins in the order they were attached.
- ``_plugins_by_name``: name → plugin instance.
- ``_plugin_info``: per-plugin state store on the router.

All four are initialised *before* ``BaseRouter.__init__`` runs, because the
base constructor already builds the navigator and resolves the initial path.

Global registry
---------------
``Router.register_plugin(plugin_class, name=None)`` validates that
``plugin_class`` is a subclass of ``BasePlugin`` with a ``plugin_code``.
Without ``name`` a collision with a different class raises ``ValueError``;
with ``name`` the registration overwrites. ``available_plugins`` returns a
shallow copy of the registry.

Attaching plugins
-----------------
``plug(plugin_name, **config)`` looks up the plugin class by name in the global
registry (raises ``ValueError`` with available names if missing, ``TypeError``
if not a string). It stores a ``_PluginSpec``, instantiates the plugin,
appends it to ``_plugins``/``_plugins_by_name``, calls ``plugin.on_compile``
for every compiled route (pre-order), rebuilds the navigator and returns
``self``. ``__getattr__`` exposes attached plugins by name or raises
``AttributeError``.

Runtime flags and data
----------------------
Stored on the router under ``_plugin_info[plugin_code]`` using a reserved
``"--base--"`` bucket for router-level defaults and one bucket per outlet
identifier, each with ``config`` and ``locals``. ``set_plugin_enabled`` /
``is_plugin_enabled`` and ``set_runtime_data`` / ``get_runtime_data`` read and
write these buckets; the ``outlet`` argument defaults to ``"--base--"``.
An outlet bucket without an explicit ``enabled`` falls back to the base one.

Wrapping pipeline
-----------------
``_wrap_navigation(call_next)`` builds middleware layers from ``_plugins`` in
reverse order (last attached closest to the core cycle). For each plugin it
calls ``plugin.wrap_navigation(self, wrapped)`` and wraps the result with a
guard that skips the layer when the plugin is disabled at router level.
``functools.wraps`` preserves the metadata of the next callable.

``_after_transition(transition)`` calls ``plugin.on_transition`` on every
attached plugin (attachment order) enabled for ``transition.outlet``.

Router Invariants
-----------------
- Plugin order is deterministic (first attached = outermost layer).
- Global registry changes do not mutate existing router instances.
- Plugin access via attribute never fails silently.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type

from outletroute.core.base_router import BaseRouter, Navigator
from outletroute.core.lifecycle import Transition
from outletroute.plugins._base_plugin import BasePlugin

__all__ = ["Router"]

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}

_BASE = "--base--"


@dataclass
class _PluginSpec:
    factory: Type[BasePlugin]
    kwargs: Dict[str, Any]

    def instantiate(self, router: "Router") -> BasePlugin:
        return self.factory(router=router, **self.kwargs)


class Router(BaseRouter):
    """Router with plugin registry/pipeline support."""

    __slots__ = (
        "_plugin_specs",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(self, *args, **kwargs):
        self._plugin_specs: List[_PluginSpec] = []
        self._plugins: List[BasePlugin] = []
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        super().__init__(*args, **kwargs)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses plugin_code and raises
                  if already registered.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "Router":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        spec = _PluginSpec(plugin_class, dict(config))
        self._plugin_specs.append(spec)
        instance = spec.instantiate(self)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        for route in self._tree.walk():
            instance.on_compile(self, route)
        self._rebuild_navigator()
        return self

    def iter_plugins(self) -> List[BasePlugin]:
        """Return attached plugin instances in application order."""
        return list(self._plugins)

    def get_config(self, plugin_name: str, outlet: Optional[str] = None) -> Dict[str, Any]:
        """Return plugin config (global + per-outlet overrides) for an attached plugin."""
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        return plugin.configuration(outlet)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to router")
        return plugin

    def _get_plugin_bucket(self, plugin_name: str) -> Dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        bucket.setdefault(_BASE, {"config": {}, "locals": {}})
        return bucket

    # ------------------------------------------------------------------
    # Runtime helpers (state stored on plugin_info)
    # ------------------------------------------------------------------
    def set_plugin_enabled(
        self, plugin_name: str, enabled: bool = True, outlet: Optional[str] = None
    ) -> None:
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(outlet or _BASE, {"config": {}, "locals": {}})
        entry.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, plugin_name: str, outlet: Optional[str] = None) -> bool:
        bucket = self._get_plugin_bucket(plugin_name)
        if outlet:
            entry_locals = bucket.get(outlet, {}).get("locals", {})
            if "enabled" in entry_locals:
                return bool(entry_locals["enabled"])
        base_locals = bucket[_BASE].get("locals", {})
        return bool(base_locals.get("enabled", True))

    def set_runtime_data(
        self, plugin_name: str, key: str, value: Any, outlet: Optional[str] = None
    ) -> None:
        bucket = self._get_plugin_bucket(plugin_name)
        entry = bucket.setdefault(outlet or _BASE, {"config": {}, "locals": {}})
        entry.setdefault("locals", {})[key] = value

    def get_runtime_data(
        self, plugin_name: str, key: str, default: Any = None, outlet: Optional[str] = None
    ) -> Any:
        bucket = self._get_plugin_bucket(plugin_name)
        entry_locals = bucket.get(outlet or _BASE, {}).get("locals", {})
        return entry_locals.get(key, default)

    # ------------------------------------------------------------------
    # Overrides/hooks
    # ------------------------------------------------------------------
    def _wrap_navigation(self, call_next: Navigator) -> Navigator:
        wrapped = call_next
        for plugin in reversed(self._plugins):
            plugin_call = plugin.wrap_navigation(self, wrapped)
            wrapped = self._create_wrapper(plugin, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        plugin_call: Callable,
        next_handler: Callable,
    ) -> Callable:
        @wraps(next_handler)
        def wrapper(path: str):
            if not self.is_plugin_enabled(plugin.name):
                return next_handler(path)
            return plugin_call(path)

        return wrapper

    def _after_transition(self, transition: Transition) -> None:
        for plugin in self._plugins:
            if self.is_plugin_enabled(plugin.name, transition.outlet):
                plugin.on_transition(self, transition)

"""Plugin contract definitions used by the Router runtime.

Source of truth
---------------
If this module were wiped except for this docstring, the implementation must be
reconstructed exactly as described below.

``BasePlugin``
    Base class that every plugin *must* subclass. Responsibilities:

    - offer config helpers that delegate to the owning router's ``plugin_info``
      store (no hidden per-plugin globals)
    - provide optional hooks ``on_compile(router, route)``,
      ``wrap_navigation(router, call_next)`` and
      ``on_transition(router, transition)`` used by the Router pipeline

    Required class attributes:

    - ``plugin_code`` – unique identifier used for registration (e.g. "logging")
    - ``plugin_description`` – human-readable description of the plugin

    Constructor signature:

    ``BasePlugin(router, **config)``

    - ``router`` is required – the Router instance owning this plugin
    - ``**config`` is passed to ``configure()`` which is validated by Pydantic

    Required methods:

    ``configure(**config)``
        Define accepted configuration parameters via method signature.
        The method is automatically wrapped by ``__init_subclass__`` to:
        - Extract and parse ``flags`` (e.g. "enabled,before:off") into booleans
        - Extract ``_target`` to determine where to write config:
          - ``"--base--"`` (default): router-level config
          - ``"outlet_id"``: per-outlet config
          - ``"o1,o2,o3"``: multiple outlets (calls recursively)
        - Apply Pydantic's ``validate_call`` for parameter validation
        - Write validated config to the store

    ``configuration(outlet=None)``
        returns merged configuration dict from the router's store
        (router-level + optional per-outlet override). This is the read
        counterpart to ``configure()``.

    ``on_compile`` (default no-op)
        called once per compiled route when the plugin is attached. Plugins
        use this to pre-compute per-route structures.

    ``wrap_navigation`` (default identity function)
        used by the Router to create middleware layers around a navigation
        cycle. Plugin authors receive the router and the next callable
        (``call_next(path) -> Snapshot``); they must return a callable with
        the same signature.

    ``on_transition`` (default no-op)
        called after the lifecycle hook of each enter/exit transition ran.

Design constraints
~~~~~~~~~~~~~~~~~~
* The Router only imports this module (not the concrete plugins) to avoid
  circular dependencies.
* Configuration storage must stay internal to BasePlugin so all plugins behave
  consistently.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from pydantic import validate_call

__all__ = ["BasePlugin"]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() method to handle flags, _target, validation, and storage."""
    validated = validate_call(original_configure)

    def wrapper(self: "BasePlugin", *, _target: str = "--base--", flags: Optional[str] = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        if "," in _target:
            targets = [t.strip() for t in _target.split(",") if t.strip()]
            for t in targets:
                wrapper(self, _target=t, **kwargs)
            return

        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    wrapper.__doc__ = original_configure.__doc__
    return wrapper


class BasePlugin:
    """Hook interface + configuration helpers for router plugins."""

    __slots__ = ("name", "_router")

    # Subclasses MUST define these class attributes
    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(
        self,
        router: Any,
        **config: Any,
    ):
        self.name = self.plugin_code
        self._router = router
        self._init_store()
        self.configure(**config)

    def _init_store(self) -> None:
        """Initialize plugin bucket in router's store."""
        store = self._get_store()
        store.setdefault(self.name, {}).setdefault(
            "--base--", {"config": {"enabled": True}, "locals": {}}
        )

    def configure(self, *, _target: str = "--base--", flags: Optional[str] = None) -> None:
        """Override in subclasses to define accepted configuration parameters.

        Base implementation accepts no additional parameters beyond _target and flags.

        Args:
            _target: Where to write config. "--base--" for router-level,
                     "outlet_id" for per-outlet, or "o1,o2" for multiple.
            flags: String like "enabled,before:off" parsed into booleans.
        """
        if flags:
            kwargs = self._parse_flags(flags)
            self._write_config(_target, kwargs)

    def _write_config(self, target: str, config: Dict[str, Any]) -> None:
        """Write config to the appropriate bucket in the store."""
        if not config:
            return
        store = self._get_store()
        plugin_bucket = store.setdefault(self.name, {})
        bucket = plugin_bucket.setdefault(target, {"config": {}, "locals": {}})
        bucket["config"].update(config)

    def configuration(self, outlet: Optional[str] = None) -> Dict[str, Any]:
        """Read merged configuration (base + optional per-outlet override)."""
        store = self._get_store()
        plugin_bucket = store.get(self.name)
        if not plugin_bucket:
            return {}
        merged = dict(plugin_bucket.get("--base--", {}).get("config", {}))
        if outlet:
            merged.update(plugin_bucket.get(outlet, {}).get("config", {}))
        return merged

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def on_compile(self, router: Any, route: Any) -> None:  # pragma: no cover - default no-op
        """Hook run for each compiled route when the plugin is attached."""

    def wrap_navigation(self, router: Any, call_next: Callable) -> Callable:
        """Wrap a navigation cycle; default passthrough."""
        return call_next

    def on_transition(self, router: Any, transition: Any) -> None:  # pragma: no cover - default no-op
        """Hook run after each enter/exit transition."""

    def _get_store(self) -> Dict[str, Any]:
        return getattr(self._router, "_plugin_info")

"""Logging plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
- Wrap each navigation cycle and emit configurable messages:
  * ``before`` (default True): ``"navigate <path> start"``
  * ``after`` (default True): ``"navigate <path> end (<ms> ms)"`` with elapsed
    time in milliseconds and ``{elapsed:.2f}`` formatting.
- Report transitions (``transitions``, default True): ``"enter <outlet>"`` and
  ``"exit <outlet>"`` after the transition's hook ran. The per-outlet
  configuration of the transition's outlet applies.
- Sinks:
  * when ``print`` is true → always ``print(message)``;
  * else when ``log`` is true → ``logger.info(message)`` if the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` to avoid drops;
  * else → no output.
- ``enabled`` gates the plugin entirely (default True).
- Use a provided ``logging.Logger`` (default ``logging.getLogger("outletroute")``).

Configuration
-------------
- Accepted keys (router-level or per-outlet via ``_target``): ``enabled``,
  ``before``, ``after``, ``transitions``, ``log``, ``print``. They can be
  provided as individual kwargs or in ``flags`` (e.g.
  ``"enabled:off,before:on,after:on,log:on,print:off"``).
- Runtime: ``router.logging.configure(...)`` mirrors the same options.

Behaviour and API
-----------------
- ``LoggingPlugin(router, *, logger=None, **cfg)`` delegates to
  ``BasePlugin``. ``logger`` is stored in ``self._logger``; additional
  ``**cfg`` seeds initial config.
- ``_emit(message, cfg)`` chooses sink based on ``cfg`` as described above.
- ``wrap_navigation(router, call_next)`` applies the configuration on each
  cycle. Exceptions propagate; the end message is skipped when an exception
  is raised.

Registration
------------
At module import, the plugin registers itself globally as ``"logging"`` via
``Router.register_plugin(LoggingPlugin)``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from outletroute.core.lifecycle import Transition
from outletroute.core.router import Router
from outletroute.plugins._base_plugin import BasePlugin


class LoggingPlugin(BasePlugin):
    """Navigation and transition logging for outletroute."""

    plugin_code = "logging"
    plugin_description = "Logs navigation cycles with timing and outlet transitions"

    __slots__ = ("_logger",)

    def __init__(self, router, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("outletroute")
        super().__init__(router, **cfg)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        transitions: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: Optional[dict] = None):
        if cfg is None:
            return
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(
                logger, "has_handlers", None
            )
            if callable(has_handlers) and has_handlers():
                logger.info(message)
            else:
                print(message)

    def wrap_navigation(self, router, call_next: Callable):
        """Wrap the navigation cycle with start/end logging and timing."""

        def logged(path: str):
            cfg = self._effective_config()
            if not cfg["enabled"]:
                return call_next(path)
            if cfg["before"]:
                self._emit(f"navigate {path} start", cfg=cfg)
            t0 = time.perf_counter()
            result = call_next(path)
            elapsed = (time.perf_counter() - t0) * 1000
            if cfg["after"]:
                self._emit(f"navigate {path} end ({elapsed:.2f} ms)", cfg=cfg)
            return result

        return logged

    def on_transition(self, router, transition: Transition) -> None:
        cfg = self._effective_config(transition.outlet)
        if cfg["enabled"] and cfg["transitions"]:
            self._emit(f"{transition.action.value} {transition.outlet}", cfg=cfg)

    def _effective_config(self, outlet: Optional[str] = None) -> dict:
        defaults = {
            "enabled": True,
            "before": True,
            "after": True,
            "transitions": True,
            "log": True,
            "print": False,
        }
        cfg = defaults | self.configuration(outlet)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Router.register_plugin(LoggingPlugin)

"""Plugin-free router facade (source of truth).

If this file vanished, rebuild it from this description. The module exposes
:class:`BaseRouter`, which owns the compiled route tree, the history handle
and the current/previous snapshots, and wires the path codec, matcher and
lifecycle tracker into one synchronous navigation cycle. Subclasses add
middleware but must preserve these semantics.

Constructor and slots
---------------------
Constructor signature::

    BaseRouter(config, *, history=None)

- ``config`` is a sequence of route nodes (mappings or ``RouteConfig``). It is
  validated (``load_configs``) and compiled (``compile_routes``) once; any
  ``RouteConfigError`` propagates and no router is built.
- ``history`` defaults to ``MemoryHistory()``. The router registers its change
  callback with ``history.listen`` and immediately resolves
  ``history.current`` (initial navigation: enter hooks and ``navstart`` fire).
- Slots: ``_tree``, ``_history``, ``_lifecycle``, ``_current``,
  ``_previous``, ``_listeners``, ``_pending``, ``_navigating``,
  ``_navigator``.

Navigation cycle
----------------
``set_path(path)`` only calls ``history.set(path)``; the history calls back
``_on_change(path)``, which runs ``_navigator(path)``. ``_navigator`` is
``_cycle`` wrapped by ``_wrap_navigation`` (passthrough here, plugin
middleware in ``Router``) and rebuilt through ``_rebuild_navigator``.

``_cycle(path)``:

1. ``parse_path`` → segments + query;
2. ``match_routes`` → new snapshot;
3. ``LifecycleTracker.diff(current, new)`` → transitions;
4. commit: previous ← current, current ← new;
5. for each transition: fire the selected hook, call
   ``_after_transition`` (plugin hook), emit an ``"outlet"`` event;
6. emit one ``"navstart"`` event with a ``NavigationEvent``.

Everything runs to completion before ``set_path`` returns. Observers only ever
see committed state. A ``set_path`` issued while a cycle runs (from a hook or
a listener) is queued and executed as the next sequential cycle once the
current one finished; it never nests.

A raising hook does not cut the cycle short: the remaining transitions still
fire and ``navstart`` is still emitted before the hook's exception leaves the
cycle. A listener or plugin exception ends its own cycle. In both cases the
queued paths still run; once the queue has drained the first exception is
re-raised to the caller of ``set_path`` and later ones are logged.

Queries
-------
- ``get_outlet(outlet)``: deepest context recorded for the identifier.
- ``get_outlets(outlet)``: every context for the identifier, root first.
- ``has_outlet(outlet)``.
- ``current_params``: read-only merge of all recorded captures, root first.
- ``current_query_params``, ``current_path``, ``snapshot``,
  ``previous_snapshot``, ``tree``, ``history``.

Link generation
---------------
``link(outlet, params=None)`` locates the first compiled occurrence of the
identifier and renders its ``full_path`` (plus declared query names) using,
by precedence: explicit ``params``, captures currently recorded on that
route's chain, the route's ``default_params``. Unknown identifiers and
unresolvable placeholders return ``None``. The rendered path goes through
``history.prefix``.

Subscriptions
-------------
``on(event, listener)`` with ``event`` in ``{"navstart", "outlet"}`` returns
an unsubscribe callable. ``add_outlet_hooks`` / ``outlet`` register
outlet-level hook overrides (see ``lifecycle`` and ``outlet`` modules).

Hooks for subclasses
--------------------
- ``_wrap_navigation(call_next)``: wrap the navigation cycle.
- ``_after_transition(transition)``: invoked after each transition's hook.

Default implementations are passthrough/no-op.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional, Union

from .compiler import RouteTree, compile_routes
from .config import Hook, RouteConfig, load_configs
from .errors import MissingParam
from .history import History, MemoryHistory
from .lifecycle import HookBinding, LifecycleTracker, Transition
from .matcher import OutletContext, Snapshot, match_routes
from .outlet import MapParams, Outlet
from .path import parse_path

__all__ = ["BaseRouter", "NavigationEvent", "EVENTS"]

logger = logging.getLogger(__name__)

EVENTS = ("navstart", "outlet")

Navigator = Callable[[str], Snapshot]
Listener = Callable[[Any], Any]


@dataclass(frozen=True)
class NavigationEvent:
    """Payload of the ``navstart`` event."""

    path: str
    snapshot: Snapshot
    type: str = "navstart"


class BaseRouter:
    """Plugin-free router facade.

    Responsibilities:
    - compile the route configuration once and keep it immutable
    - run navigation cycles (match, diff, commit, hooks, events)
    - answer outlet queries and generate links
    - provide hooks for subclasses to wrap navigation or observe transitions
    """

    __slots__ = (
        "_tree",
        "_history",
        "_lifecycle",
        "_current",
        "_previous",
        "_listeners",
        "_pending",
        "_navigating",
        "_navigator",
    )

    def __init__(
        self,
        config: Iterable[Union[RouteConfig, Mapping[str, Any]]],
        *,
        history: Optional[History] = None,
    ) -> None:
        self._tree: RouteTree = compile_routes(load_configs(config))
        self._lifecycle = LifecycleTracker()
        self._current = Snapshot()
        self._previous = Snapshot()
        self._listeners: Dict[str, List[Listener]] = {event: [] for event in EVENTS}
        self._pending: Deque[str] = deque()
        self._navigating = False
        self._rebuild_navigator()
        self._history: History = history if history is not None else MemoryHistory()
        self._history.listen(self._on_change)
        self._on_change(self._history.current)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def set_path(self, path: str) -> None:
        """Request navigation to ``path`` through the history backend."""
        self._history.set(path)

    def _on_change(self, path: str) -> None:
        if self._navigating:
            logger.debug("Queueing navigation to %r until the running cycle ends", path)
            self._pending.append(path)
            return
        self._navigating = True
        self._pending.append(path)
        failure: Optional[Exception] = None
        try:
            while self._pending:
                try:
                    self._navigator(self._pending.popleft())
                except Exception as exc:
                    if failure is not None:
                        logger.error("Navigation failed after an earlier error", exc_info=exc)
                    else:
                        failure = exc
        finally:
            self._navigating = False
            self._pending.clear()
        if failure is not None:
            raise failure

    def _rebuild_navigator(self) -> None:
        self._navigator = self._wrap_navigation(self._cycle)

    def _wrap_navigation(self, call_next: Navigator) -> Navigator:
        return call_next

    def _cycle(self, path: str) -> Snapshot:
        segments, query = parse_path(path)
        snapshot = match_routes(self._tree, segments, query, path=path)
        transitions = self._lifecycle.diff(self._current, snapshot)
        self._previous, self._current = self._current, snapshot
        logger.debug(
            "Resolved %r: %s (%d transitions)",
            path,
            {record.route.outlet: record.context.type.value for record in snapshot},
            len(transitions),
        )
        failures: List[Exception] = []
        for transition in transitions:
            try:
                self._lifecycle.fire(transition)
            except Exception as exc:
                failures.append(exc)
            self._after_transition(transition)
            self._emit("outlet", transition)
        self._emit("navstart", NavigationEvent(path, snapshot))
        if failures:
            for extra in failures[1:]:
                logger.error("Lifecycle hook failed while resolving %r", path, exc_info=extra)
            raise failures[0]
        return snapshot

    def _after_transition(self, transition: Transition) -> None:  # pragma: no cover - hook
        """Hook for plugin-enabled routers."""
        return None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Subscribe ``listener`` to ``event``; returns an unsubscribe callable."""
        if event not in self._listeners:
            raise ValueError(f"Unknown router event '{event}'. Available: {', '.join(EVENTS)}")
        if not callable(listener):
            raise TypeError("listener must be callable")
        bucket = self._listeners[event]
        bucket.append(listener)

        def unsubscribe() -> None:
            if listener in bucket:
                bucket.remove(listener)

        return unsubscribe

    def _emit(self, event: str, payload: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(payload)

    # ------------------------------------------------------------------
    # Outlet-level hooks
    # ------------------------------------------------------------------
    def add_outlet_hooks(
        self,
        outlet: str,
        *,
        on_enter: Optional[Hook] = None,
        on_exit: Optional[Hook] = None,
    ) -> HookBinding:
        """Register hooks that override the configuration hooks of ``outlet``."""
        if self._tree.find(outlet) is None:
            raise KeyError(f"Unknown outlet '{outlet}'")
        return self._lifecycle.register(outlet, on_enter=on_enter, on_exit=on_exit)

    def outlet(
        self,
        outlet: str,
        *,
        main: Any = None,
        index: Any = None,
        error: Any = None,
        on_enter: Optional[Hook] = None,
        on_exit: Optional[Hook] = None,
        map_params: Optional[MapParams] = None,
    ) -> Outlet:
        """Create an ``Outlet`` binding for the rendering layer."""
        return Outlet(
            self,
            outlet,
            main=main,
            index=index,
            error=error,
            on_enter=on_enter,
            on_exit=on_exit,
            map_params=map_params,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_outlet(self, outlet: str) -> Optional[OutletContext]:
        return self._current.get(outlet)

    def get_outlets(self, outlet: str) -> List[OutletContext]:
        return self._current.contexts(outlet)

    def has_outlet(self, outlet: str) -> bool:
        return self.get_outlet(outlet) is not None

    @property
    def current_params(self) -> Mapping[str, str]:
        return MappingProxyType(self._current.params)

    @property
    def current_query_params(self) -> Mapping[str, str]:
        return self._current.query_params

    @property
    def current_path(self) -> str:
        return self._current.path

    @property
    def snapshot(self) -> Snapshot:
        return self._current

    @property
    def previous_snapshot(self) -> Snapshot:
        return self._previous

    @property
    def tree(self) -> RouteTree:
        return self._tree

    @property
    def history(self) -> History:
        return self._history

    def link(self, outlet: str, params: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """Generate a path for ``outlet``; ``None`` when it cannot be rendered."""
        route = self._tree.find(outlet)
        if route is None:
            return None
        values: Dict[str, str] = dict(route.default_params)
        values.update(self._current.chain_params(route))
        values.update(params or {})
        try:
            rendered = route.render(values)
        except MissingParam as exc:
            logger.debug("No link for outlet %r: %s", outlet, exc)
            return None
        return self._history.prefix(rendered)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(outlets={list(self._tree.outlets())!r})"

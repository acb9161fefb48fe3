"""Lifecycle tracker: enter/exit transitions between two snapshots.

Diff rules (``LifecycleTracker.diff``)
--------------------------------------
- route recorded now but not before → ``enter``;
- route recorded in both with different params → ``enter`` only (re-entering
  with new params never produces an intervening ``exit``);
- route recorded in both with equal params → nothing, even when its match
  type changed (``index`` → ``partial``);
- route recorded before but not now → ``exit``.

Exits come first, then enters; each group keeps tree order.

Hook precedence (``LifecycleTracker.hook_for``)
-----------------------------------------------
Outlet-level hooks registered by the rendering side (``register``) override
the route configuration's ``on_enter``/``on_exit``. Only one callable fires
per transition: the most recently registered binding for the outlet that
defines that kind of hook, else the route's configured hook, else nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .compiler import CompiledRoute
from .config import Hook
from .matcher import OutletContext, Snapshot

__all__ = ["TransitionAction", "Transition", "HookBinding", "LifecycleTracker"]


class TransitionAction(str, Enum):
    ENTER = "enter"
    EXIT = "exit"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Transition:
    """One enter or exit produced by a navigation."""

    action: TransitionAction
    route: CompiledRoute
    context: OutletContext

    @property
    def outlet(self) -> str:
        return self.route.outlet


class HookBinding:
    """Handle returned by ``LifecycleTracker.register``."""

    __slots__ = ("outlet", "on_enter", "on_exit", "_tracker")

    def __init__(
        self,
        tracker: "LifecycleTracker",
        outlet: str,
        on_enter: Optional[Hook],
        on_exit: Optional[Hook],
    ):
        self._tracker = tracker
        self.outlet = outlet
        self.on_enter = on_enter
        self.on_exit = on_exit

    @property
    def active(self) -> bool:
        return self in self._tracker.bindings(self.outlet)

    def remove(self) -> None:
        self._tracker.unregister(self)

    def __repr__(self) -> str:
        return f"HookBinding(outlet={self.outlet!r})"


class LifecycleTracker:
    """Outlet-level hook registry plus the snapshot diff."""

    __slots__ = ("_bindings",)

    def __init__(self) -> None:
        self._bindings: Dict[str, List[HookBinding]] = {}

    # ------------------------------------------------------------------
    # Outlet-level hooks
    # ------------------------------------------------------------------
    def register(
        self,
        outlet: str,
        *,
        on_enter: Optional[Hook] = None,
        on_exit: Optional[Hook] = None,
    ) -> HookBinding:
        for hook in (on_enter, on_exit):
            if hook is not None and not callable(hook):
                raise TypeError(f"Outlet hooks must be callable, got {hook!r}")
        binding = HookBinding(self, outlet, on_enter, on_exit)
        self._bindings.setdefault(outlet, []).append(binding)
        return binding

    def unregister(self, binding: HookBinding) -> None:
        bucket = self._bindings.get(binding.outlet, [])
        if binding in bucket:
            bucket.remove(binding)
        if not bucket:
            self._bindings.pop(binding.outlet, None)

    def bindings(self, outlet: str) -> List[HookBinding]:
        return list(self._bindings.get(outlet, ()))

    def hook_for(self, transition: Transition) -> Optional[Hook]:
        attr = "on_enter" if transition.action is TransitionAction.ENTER else "on_exit"
        for binding in reversed(self._bindings.get(transition.outlet, ())):
            hook = getattr(binding, attr)
            if hook is not None:
                return hook
        return getattr(transition.route, attr)

    # ------------------------------------------------------------------
    # Diff and dispatch
    # ------------------------------------------------------------------
    def diff(self, previous: Snapshot, current: Snapshot) -> List[Transition]:
        exits = [
            Transition(TransitionAction.EXIT, record.route, record.context)
            for key, record in previous.records.items()
            if key not in current.records
        ]
        enters = []
        for key, record in current.records.items():
            before = previous.records.get(key)
            if before is None or dict(before.context.params) != dict(record.context.params):
                enters.append(Transition(TransitionAction.ENTER, record.route, record.context))
        return exits + enters

    def fire(self, transition: Transition) -> bool:
        """Invoke the hook selected for ``transition``; True when one ran."""
        hook = self.hook_for(transition)
        if hook is None:
            return False
        hook()
        return True

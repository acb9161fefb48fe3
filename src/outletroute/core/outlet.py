"""Outlet binding: the rendering layer's handle on one outlet.

An ``Outlet`` is what a component tree holds for a named slot. It

- registers outlet-level ``on_enter``/``on_exit`` hooks with the router, which
  then take precedence over the route configuration's hooks;
- reads the current ``OutletContext`` by value (nothing is pushed into the
  component tree);
- picks which of its components applies to the current match type;
- maps params into component properties.

Component selection (``select``)
--------------------------------
- ``index`` or ``error`` match with an ``index`` component → ``index``;
- ``error`` match with an ``error`` component → ``error``;
- ``index``/``partial`` match with a ``main`` component → ``main``;
- otherwise, or when the outlet is not matched → ``None``.

Components are opaque to the router: any object (class, factory, registry
label) is accepted and returned untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

from .config import Hook
from .lifecycle import HookBinding
from .matcher import MatchType, OutletContext

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .base_router import BaseRouter

__all__ = ["MapParamsOptions", "Outlet", "default_map_params"]


@dataclass(frozen=True)
class MapParamsOptions:
    params: Mapping[str, str]
    query_params: Mapping[str, str]
    type: MatchType
    router: "BaseRouter"


MapParams = Callable[[MapParamsOptions], Any]


def default_map_params(options: MapParamsOptions) -> Dict[str, Any]:
    return {**options.params, "type": options.type.value}


class Outlet:
    """Rendering-side binding for a single outlet identifier."""

    __slots__ = ("router", "outlet", "main", "index", "error", "map_params", "_binding")

    def __init__(
        self,
        router: "BaseRouter",
        outlet: str,
        *,
        main: Any = None,
        index: Any = None,
        error: Any = None,
        on_enter: Optional[Hook] = None,
        on_exit: Optional[Hook] = None,
        map_params: Optional[MapParams] = None,
    ):
        self.router = router
        self.outlet = outlet
        self.main = main
        self.index = index
        self.error = error
        self.map_params: MapParams = map_params or default_map_params
        self._binding: Optional[HookBinding] = None
        if on_enter is not None or on_exit is not None:
            self._binding = router.add_outlet_hooks(outlet, on_enter=on_enter, on_exit=on_exit)

    @property
    def context(self) -> Optional[OutletContext]:
        return self.router.get_outlet(self.outlet)

    @property
    def active(self) -> bool:
        return self.context is not None

    def select(self) -> Any:
        """Return the component that applies to the current match, if any."""
        context = self.context
        if context is None:
            return None
        if context.type in (MatchType.INDEX, MatchType.ERROR) and self.index is not None:
            return self.index
        if context.type is MatchType.ERROR:
            return self.error
        return self.main

    def properties(self) -> Any:
        """Run ``map_params`` for the current context; ``None`` when unmatched."""
        context = self.context
        if context is None:
            return None
        options = MapParamsOptions(
            params=context.params,
            query_params=context.query_params,
            type=context.type,
            router=self.router,
        )
        return self.map_params(options)

    def remove(self) -> None:
        """Drop this outlet's hook overrides."""
        if self._binding is not None:
            self._binding.remove()
            self._binding = None

    def __repr__(self) -> str:
        return f"Outlet({self.outlet!r})"

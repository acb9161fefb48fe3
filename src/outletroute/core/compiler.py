"""Route compiler: configuration forest → immutable ``RouteTree``.

Compilation walks the validated ``RouteConfig`` forest depth-first and, for
every node, derives a frozen :class:`CompiledRoute`:

- ``segments``/``params``/``query`` from the node's own template;
- ``full_path``/``full_segments`` by joining every ancestor's path, root first;
- ``full_params``/``full_query`` by concatenating the ancestor chain's own
  names, root first;
- ``default_params`` as ancestor defaults overlaid by the node's own;
- ``key``: the tuple of sibling indices from the root, i.e. the route's tree
  position. Snapshots and lifecycles are keyed by it, because an outlet
  identifier may legally occur at several places in the tree.

Configuration errors (all raised as ``RouteConfigError``)
---------------------------------------------------------
- malformed template (message carries the offending path);
- placeholder name reused within one ancestor chain;
- more than one node flagged ``default_route``;
- outlet identifier repeated among direct siblings (root nodes are siblings
  of each other).

Repeats of an identifier in different branches or at different depths are
allowed and yield independent routes. ``RouteTree.find`` returns the first
occurrence in pre-order, which is what link generation uses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .config import Hook, RouteConfig
from .errors import RouteConfigError, TemplateError
from .path import Token, compile_template, join_paths, render

__all__ = ["CompiledRoute", "RouteTree", "compile_routes"]

logger = logging.getLogger(__name__)

RouteKey = Tuple[int, ...]


@dataclass(frozen=True, eq=False)
class CompiledRoute:
    """Compiled, immutable description of one route node."""

    key: RouteKey
    path: str
    outlet: str
    segments: Tuple[Token, ...]
    params: Tuple[str, ...]
    query: Tuple[str, ...]
    full_path: str
    full_segments: Tuple[Token, ...]
    full_params: Tuple[str, ...]
    full_query: Tuple[str, ...]
    default_params: Mapping[str, str]
    default_route: bool = False
    on_enter: Optional[Hook] = None
    on_exit: Optional[Hook] = None
    children: Tuple["CompiledRoute", ...] = ()

    @property
    def depth(self) -> int:
        return len(self.key) - 1

    def is_ancestor_of(self, other: "CompiledRoute") -> bool:
        """True when ``other`` sits below this route (or is this route)."""
        return other.key[: len(self.key)] == self.key

    def render(self, values: Mapping[str, str]) -> str:
        """Render ``full_path`` plus declared query names with ``values``."""
        return render(self.full_segments, values, self.full_query, template=self.full_path)


class RouteTree:
    """Forest of compiled routes with lookup helpers."""

    __slots__ = ("roots", "default_route", "_by_key", "_by_outlet")

    def __init__(self, roots: Sequence[CompiledRoute]):
        self.roots: Tuple[CompiledRoute, ...] = tuple(roots)
        self._by_key: Dict[RouteKey, CompiledRoute] = {}
        self._by_outlet: Dict[str, List[CompiledRoute]] = {}
        default: Optional[CompiledRoute] = None
        for route in self.walk():
            self._by_key[route.key] = route
            self._by_outlet.setdefault(route.outlet, []).append(route)
            if route.default_route:
                default = route
        self.default_route = default

    def walk(self) -> Iterator[CompiledRoute]:
        """Yield every route in depth-first pre-order."""
        stack = list(reversed(self.roots))
        while stack:
            route = stack.pop()
            yield route
            stack.extend(reversed(route.children))

    def get(self, key: RouteKey) -> Optional[CompiledRoute]:
        return self._by_key.get(tuple(key))

    def find(self, outlet: str) -> Optional[CompiledRoute]:
        """First compiled occurrence of ``outlet`` in tree order."""
        matches = self._by_outlet.get(outlet)
        return matches[0] if matches else None

    def find_all(self, outlet: str) -> Tuple[CompiledRoute, ...]:
        return tuple(self._by_outlet.get(outlet, ()))

    def chain(self, route: CompiledRoute) -> Tuple[CompiledRoute, ...]:
        """Return ``route`` and its ancestors, root first."""
        return tuple(self._by_key[route.key[:depth]] for depth in range(1, len(route.key) + 1))

    def outlets(self) -> Tuple[str, ...]:
        return tuple(self._by_outlet)

    def __iter__(self) -> Iterator[CompiledRoute]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self._by_key)

    def __repr__(self) -> str:
        return f"RouteTree(outlets={list(self._by_outlet)!r})"


@dataclass(frozen=True)
class _Parent:
    key: RouteKey = ()
    full_path: str = ""
    full_segments: Tuple[Token, ...] = ()
    full_params: Tuple[str, ...] = ()
    full_query: Tuple[str, ...] = ()
    default_params: Mapping[str, str] = field(default_factory=dict)


def _compile_node(
    config: RouteConfig, index: int, parent: _Parent, defaults: List[CompiledRoute]
) -> CompiledRoute:
    try:
        template = compile_template(config.path)
    except TemplateError as exc:
        raise RouteConfigError(str(exc), path=config.path) from exc

    inherited = set(parent.full_params) | set(parent.full_query)
    for name in template.params + template.query:
        if name in inherited:
            raise RouteConfigError(
                f"Parameter '{name}' of outlet '{config.outlet}' is already declared by an ancestor",
                path=config.path,
            )

    defaults_map = dict(parent.default_params)
    defaults_map.update(config.default_params)
    here = _Parent(
        key=parent.key + (index,),
        full_path=join_paths(parent.full_path, template.path),
        full_segments=parent.full_segments + template.segments,
        full_params=parent.full_params + template.params,
        full_query=parent.full_query + template.query,
        default_params=MappingProxyType(defaults_map),
    )
    children = _compile_level(config.children, here, defaults)
    route = CompiledRoute(
        key=here.key,
        path=template.path,
        outlet=config.outlet,
        segments=template.segments,
        params=template.params,
        query=template.query,
        full_path=here.full_path,
        full_segments=here.full_segments,
        full_params=here.full_params,
        full_query=here.full_query,
        default_params=here.default_params,
        default_route=config.default_route,
        on_enter=config.on_enter,
        on_exit=config.on_exit,
        children=children,
    )
    if config.default_route:
        defaults.append(route)
    return route


def _compile_level(
    configs: Sequence[RouteConfig], parent: _Parent, defaults: List[CompiledRoute]
) -> Tuple[CompiledRoute, ...]:
    seen: Dict[str, str] = {}
    compiled = []
    for index, config in enumerate(configs):
        if config.outlet in seen:
            raise RouteConfigError(
                f"Outlet '{config.outlet}' is declared twice among siblings", path=config.path
            )
        seen[config.outlet] = config.path
        compiled.append(_compile_node(config, index, parent, defaults))
    return tuple(compiled)


def compile_routes(configs: Sequence[RouteConfig]) -> RouteTree:
    """Compile a validated configuration forest.

    Args:
        configs: Root ``RouteConfig`` nodes (see ``load_configs``).

    Raises:
        RouteConfigError: on any configuration error listed in the module doc.
    """
    defaults: List[CompiledRoute] = []
    roots = _compile_level(configs, _Parent(), defaults)
    if len(defaults) > 1:
        outlets = ", ".join(route.outlet for route in defaults)
        raise RouteConfigError(f"More than one default route declared: {outlets}")
    tree = RouteTree(roots)
    logger.debug(
        "Compiled %d routes (%d roots, default=%s)",
        len(tree),
        len(tree.roots),
        tree.default_route.outlet if tree.default_route else None,
    )
    return tree

"""Matcher: resolve a parsed path against a ``RouteTree``.

Resolution rules
----------------
- Depth-first, left to right. At each level the first sibling whose tokens
  match wins; once a sibling matched there is no backtracking to the others.
- Literal tokens need exact equality, a path placeholder consumes exactly one
  segment. Names declared in a template's query part bind from the query
  mapping when present and never consume segments.
- A route needs at least as many remaining segments as it has tokens. Routes
  without tokens (``""``/``"/"``) always match and consume nothing: a layout
  route records ``partial`` and its children resolve the rest of the path.
- Path consumed at a route → ``index`` record, stop.
- Segments left after a route → ``partial`` record, descend into children.
  When no child matches (a leaf with leftover segments included) the record
  is replaced by an ``error`` record: the error always sits on the nearest
  ancestor of the unmatched remainder.
- Empty path with no matching root → the default route recorded as ``index``
  (ancestors are not recorded); no default route → empty snapshot.
- Non-empty path with no matching root → empty snapshot.

Every context holds only its route's own captures; ancestors' captures are
available through ``Snapshot.params``. All contexts of one pass share the same
read-only query mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .compiler import CompiledRoute, RouteKey, RouteTree
from .path import Placeholder

__all__ = ["MatchType", "OutletContext", "MatchRecord", "Snapshot", "match_routes"]

_EMPTY: Mapping[str, str] = MappingProxyType({})


class MatchType(str, Enum):
    """How a route took part in resolving the current path."""

    INDEX = "index"
    PARTIAL = "partial"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OutletContext:
    """Match record handed to the rendering layer for one outlet."""

    type: MatchType
    params: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    query_params: Mapping[str, str] = field(default_factory=lambda: _EMPTY)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", MatchType(self.type))
        if not isinstance(self.params, MappingProxyType):
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        if not isinstance(self.query_params, MappingProxyType):
            object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "params": dict(self.params),
            "query_params": dict(self.query_params),
        }


class MatchRecord(NamedTuple):
    route: CompiledRoute
    context: OutletContext


@dataclass(frozen=True)
class Snapshot:
    """Every match record produced by one resolution pass, in tree order."""

    path: str = ""
    records: Mapping[RouteKey, MatchRecord] = field(default_factory=lambda: _EMPTY)
    query_params: Mapping[str, str] = field(default_factory=lambda: _EMPTY)

    def __iter__(self) -> Iterator[MatchRecord]:
        return iter(self.records.values())

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, key: object) -> bool:
        return key in self.records

    def contexts(self, outlet: str) -> List[OutletContext]:
        """All contexts recorded for ``outlet``, root first."""
        return [record.context for record in self if record.route.outlet == outlet]

    def get(self, outlet: str) -> Optional[OutletContext]:
        """Deepest context recorded for ``outlet``."""
        found = self.contexts(outlet)
        return found[-1] if found else None

    def outlets(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for record in self:
            seen.setdefault(record.route.outlet)
        return tuple(seen)

    @property
    def params(self) -> Dict[str, str]:
        """Captures of every recorded route merged root first."""
        merged: Dict[str, str] = {}
        for record in self:
            merged.update(record.context.params)
        return merged

    def chain_params(self, route: CompiledRoute) -> Dict[str, str]:
        """Captures recorded for ``route`` and its ancestors."""
        merged: Dict[str, str] = {}
        for record in self:
            if record.route.is_ancestor_of(route):
                merged.update(record.context.params)
        return merged


def _consume(
    route: CompiledRoute, segments: Sequence[str], query: Mapping[str, str]
) -> Optional[Tuple[int, Dict[str, str]]]:
    if len(segments) < len(route.segments):
        return None
    params: Dict[str, str] = {}
    for token, segment in zip(route.segments, segments):
        if isinstance(token, Placeholder):
            params[token.name] = segment
        elif token != segment:
            return None
    for name in route.query:
        if name in query:
            params[name] = query[name]
    return len(route.segments), params


def _query_bound(route: CompiledRoute, query: Mapping[str, str]) -> Dict[str, str]:
    return {name: query[name] for name in route.query if name in query}


def match_routes(
    tree: RouteTree,
    segments: Sequence[str],
    query: Mapping[str, str],
    *,
    path: str = "",
) -> Snapshot:
    """Resolve ``segments``/``query`` against ``tree`` into a ``Snapshot``."""
    query_params = MappingProxyType(dict(query))
    records: Dict[RouteKey, MatchRecord] = {}

    remaining: Sequence[str] = tuple(segments)
    candidates: Sequence[CompiledRoute] = tree.roots
    parent: Optional[CompiledRoute] = None
    while True:
        for route in candidates:
            consumed = _consume(route, remaining, query_params)
            if consumed is not None:
                break
        else:
            if parent is not None:
                record = records[parent.key]
                records[parent.key] = MatchRecord(
                    parent, replace(record.context, type=MatchType.ERROR)
                )
            elif not remaining and tree.default_route is not None:
                default = tree.default_route
                context = OutletContext(
                    MatchType.INDEX, _query_bound(default, query_params), query_params
                )
                records[default.key] = MatchRecord(default, context)
            break
        count, params = consumed
        remaining = remaining[count:]
        if not remaining:
            records[route.key] = MatchRecord(
                route, OutletContext(MatchType.INDEX, params, query_params)
            )
            break
        records[route.key] = MatchRecord(
            route, OutletContext(MatchType.PARTIAL, params, query_params)
        )
        parent = route
        candidates = route.children

    return Snapshot(path, MappingProxyType(records), query_params)

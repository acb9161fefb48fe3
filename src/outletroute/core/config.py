"""Route configuration model.

``RouteConfig`` is the validated form of one externally supplied
configuration node. Plain mappings are accepted with either ``snake_case``
keys or the camelCase spelling used by JavaScript-style route tables
(``defaultParams``, ``defaultRoute``, ``onEnter``, ``onExit``). Unknown keys
are rejected so typos surface at startup instead of silently disabling a
hook.

``load_configs`` validates a whole forest and converts pydantic's
``ValidationError`` into ``RouteConfigError`` carrying the offending node's
path.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import RouteConfigError

__all__ = ["RouteConfig", "load_configs"]

Hook = Callable[[], Any]


class RouteConfig(BaseModel):
    """One node of the route configuration tree."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    path: str
    outlet: str = Field(min_length=1)
    children: Tuple["RouteConfig", ...] = ()
    default_params: Dict[str, str] = Field(default_factory=dict, alias="defaultParams")
    default_route: bool = Field(default=False, alias="defaultRoute")
    on_enter: Optional[Hook] = Field(default=None, alias="onEnter")
    on_exit: Optional[Hook] = Field(default=None, alias="onExit")


RouteConfig.model_rebuild()


def _describe(node: Any) -> Optional[str]:
    if isinstance(node, RouteConfig):
        return node.path
    if isinstance(node, Mapping):
        path = node.get("path")
        return path if isinstance(path, str) else None
    return None


def load_configs(
    configs: Iterable[Union[RouteConfig, Mapping[str, Any]]],
) -> Tuple[RouteConfig, ...]:
    """Validate ``configs`` into a tuple of ``RouteConfig`` nodes.

    Raises:
        RouteConfigError: when a node is not a mapping/RouteConfig or fails
            validation.
    """
    if isinstance(configs, (str, bytes)) or isinstance(configs, Mapping):
        raise RouteConfigError("Route configuration must be a sequence of route nodes")
    loaded = []
    for node in configs:
        if isinstance(node, RouteConfig):
            loaded.append(node)
            continue
        if not isinstance(node, Mapping):
            raise RouteConfigError(f"Unsupported route configuration node: {node!r}")
        try:
            loaded.append(RouteConfig.model_validate(node))
        except ValidationError as exc:
            raise RouteConfigError(
                f"Invalid route configuration: {exc}", path=_describe(node)
            ) from exc
    return tuple(loaded)

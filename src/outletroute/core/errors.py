"""Exception types raised by the routing core.

Taxonomy
--------
- ``TemplateError``: a path template cannot be parsed (unbalanced braces,
  empty placeholder, repeated name). Raised by the path codec.
- ``RouteConfigError``: the route configuration is unusable (bad shape,
  duplicate default route, duplicate sibling outlet, repeated parameter name
  within one ancestor chain, malformed template). Always raised while the
  router is being built, never while matching.
- ``MissingParam``: a template cannot be rendered because a placeholder has no
  value. ``Router.link`` turns it into ``None``.

Unmatched paths are not errors: they show up as ``error`` outlet contexts or
as an empty snapshot.
"""

from __future__ import annotations

from typing import Optional

__all__ = ["TemplateError", "RouteConfigError", "MissingParam"]


class TemplateError(ValueError):
    """Malformed path template."""

    def __init__(self, message: str, *, path: str):
        super().__init__(f"{message} in template {path!r}")
        self.path = path


class RouteConfigError(ValueError):
    """Invalid route configuration detected at compile time."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        if path is not None:
            message = f"{message} (route path {path!r})"
        super().__init__(message)
        self.path = path


class MissingParam(KeyError):
    """A placeholder could not be resolved while rendering a template."""

    def __init__(self, name: str, *, template: str = ""):
        super().__init__(name)
        self.name = name
        self.template = template

    def __str__(self) -> str:
        if self.template:
            return f"Missing value for parameter '{self.name}' in {self.template!r}"
        return f"Missing value for parameter '{self.name}'"

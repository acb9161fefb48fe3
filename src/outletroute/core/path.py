"""Path codec: parse concrete paths, compile templates, render links.

Template syntax
---------------
- Segments are separated by ``/``; empty segments (leading, trailing or
  doubled slashes) are dropped.
- A segment written as ``{name}`` is a placeholder capturing exactly one path
  segment. Anything else is a literal that must match verbatim.
- An optional query part after ``?`` declares query-bound placeholders:
  ``search?{q}&{page}`` binds ``q`` and ``page`` from the query string instead
  of from path segments.
- There are no wildcards, optional segments or regular expressions.

Concrete paths
--------------
``parse_path("/baz/x?q=1&q=2&flag")`` returns ``(("baz", "x"), {"q": "2",
"flag": ""})``: the last duplicate key wins, a key without ``=`` maps to the
empty string. No percent-decoding is performed.

Rendering
---------
``render`` substitutes placeholders and appends declared query names as
``?name=value``. Every placeholder needs a non-empty value; otherwise
``MissingParam`` is raised. Rendered paths carry no leading slash, the same
form used for ``CompiledRoute.full_path``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .errors import MissingParam, TemplateError

__all__ = [
    "Placeholder",
    "Token",
    "Template",
    "parse_path",
    "parse_query",
    "compile_template",
    "render",
    "join_paths",
]


@dataclass(frozen=True)
class Placeholder:
    """Named dynamic segment of a template."""

    name: str

    def __str__(self) -> str:
        return "{%s}" % self.name


Token = Union[str, Placeholder]


@dataclass(frozen=True)
class Template:
    """Compiled form of a single path template."""

    path: str
    segments: Tuple[Token, ...]
    params: Tuple[str, ...]
    query: Tuple[str, ...]

    def render(self, values: Mapping[str, str]) -> str:
        return render(self.segments, values, self.query, template=self.path)


def parse_query(query_string: str) -> Dict[str, str]:
    query: Dict[str, str] = {}
    for chunk in query_string.split("&"):
        if not chunk:
            continue
        key, _, value = chunk.partition("=")
        if not key:
            continue
        query[key] = value
    return query


def parse_path(raw: str) -> Tuple[Tuple[str, ...], Dict[str, str]]:
    """Split ``raw`` into path segments and a query mapping."""
    path, _, query_string = raw.partition("?")
    segments = tuple(segment for segment in path.split("/") if segment)
    return segments, parse_query(query_string)


def _placeholder_name(chunk: str, *, path: str) -> Optional[str]:
    if "{" not in chunk and "}" not in chunk:
        return None
    if not (chunk.startswith("{") and chunk.endswith("}")):
        raise TemplateError(f"Unbalanced braces in segment {chunk!r}", path=path)
    name = chunk[1:-1]
    if not name or "{" in name or "}" in name:
        raise TemplateError(f"Invalid placeholder {chunk!r}", path=path)
    if name.strip() != name:
        raise TemplateError(f"Placeholder {chunk!r} contains whitespace", path=path)
    return name


def compile_template(path: str) -> Template:
    """Compile ``path`` into literal/placeholder tokens.

    Raises:
        TemplateError: on malformed placeholders or repeated names.
    """
    path_part, _, query_part = path.partition("?")
    segments = []
    params = []
    seen = set()
    for chunk in path_part.split("/"):
        if not chunk:
            continue
        name = _placeholder_name(chunk, path=path)
        if name is None:
            segments.append(chunk)
            continue
        if name in seen:
            raise TemplateError(f"Duplicate placeholder '{name}'", path=path)
        seen.add(name)
        params.append(name)
        segments.append(Placeholder(name))

    query = []
    for chunk in query_part.split("&"):
        chunk = chunk.strip()
        if not chunk:
            continue
        name = _placeholder_name(chunk, path=path)
        if name is None:
            raise TemplateError(
                f"Query declaration {chunk!r} must be written as '{{name}}'", path=path
            )
        if name in seen:
            raise TemplateError(f"Duplicate placeholder '{name}'", path=path)
        seen.add(name)
        query.append(name)

    return Template(
        path="/".join(str(token) for token in segments),
        segments=tuple(segments),
        params=tuple(params),
        query=tuple(query),
    )


def _lookup(values: Mapping[str, str], name: str, template: str) -> str:
    value = values.get(name)
    if value is None or value == "":
        raise MissingParam(name, template=template)
    return str(value)


def render(
    tokens: Sequence[Token],
    values: Mapping[str, str],
    query: Iterable[str] = (),
    *,
    template: str = "",
) -> str:
    """Render ``tokens`` into a concrete path using ``values``.

    Raises:
        MissingParam: when a placeholder or declared query name has no value.
    """
    parts = []
    for token in tokens:
        if isinstance(token, Placeholder):
            parts.append(_lookup(values, token.name, template))
        else:
            parts.append(token)
    rendered = "/".join(parts)
    pairs = [f"{name}={_lookup(values, name, template)}" for name in query]
    if pairs:
        rendered = f"{rendered}?{'&'.join(pairs)}"
    return rendered


def join_paths(parent: str, child: str) -> str:
    if not parent:
        return child
    if not child:
        return parent
    return f"{parent}/{child}"

"""History backends consumed by the router.

Contract
--------
A history exposes ``current`` (the path to resolve), ``set(path)`` (request a
change), ``prefix(path)`` (adapt a generated link to the backend's addressing
scheme) and ``listen(callback)``. The router registers exactly one callback;
the history calls it with the new ``current`` value every time the path
changes, whether the change came from ``set`` or from the embedding
environment (``hash_changed``/``pop_state``).

Backends
--------
- ``MemoryHistory``: plain in-memory path; ``prefix`` is the identity.
- ``HashHistory``: fragment addressing (``#/foo/bar``).
- ``StateHistory``: base-prefixed URLs (``/app/foo/bar`` with base ``/app``).

None of them talks to a real browser: the embedding layer forwards external
changes through the backend's notification method.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

__all__ = ["History", "BaseHistory", "MemoryHistory", "HashHistory", "StateHistory"]

ChangeCallback = Callable[[str], None]


@runtime_checkable
class History(Protocol):
    @property
    def current(self) -> str: ...

    def set(self, path: str) -> None: ...

    def prefix(self, path: str) -> str: ...

    def listen(self, callback: ChangeCallback) -> None: ...


class BaseHistory:
    """Shared listener plumbing for the bundled backends."""

    __slots__ = ("_on_change",)

    def __init__(self) -> None:
        self._on_change: Optional[ChangeCallback] = None

    def listen(self, callback: ChangeCallback) -> None:
        if self._on_change is not None and self._on_change != callback:
            raise RuntimeError(f"{type(self).__name__} is already bound to a router")
        self._on_change = callback

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.current)

    @property
    def current(self) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def set(self, path: str) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    def prefix(self, path: str) -> str:  # pragma: no cover - abstract
        raise NotImplementedError


class MemoryHistory(BaseHistory):
    """In-memory history, the default backend."""

    __slots__ = ("_current",)

    def __init__(self, initial: str = "/"):
        super().__init__()
        self._current = initial

    @property
    def current(self) -> str:
        return self._current

    def set(self, path: str) -> None:
        self._current = path
        self._notify()

    def prefix(self, path: str) -> str:
        return path


class HashHistory(BaseHistory):
    """Fragment-based history: paths live after ``#``."""

    __slots__ = ("_hash",)

    def __init__(self, initial_hash: str = ""):
        super().__init__()
        self._hash = self._normalize(initial_hash)

    @staticmethod
    def _normalize(value: str) -> str:
        path = value[1:] if value.startswith("#") else value
        if not path:
            return ""
        return "#" + (path if path.startswith("/") else f"/{path}")

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def current(self) -> str:
        return self._hash[1:]

    def prefix(self, path: str) -> str:
        return self._normalize(path) or "#/"

    def set(self, path: str) -> None:
        self._hash = self._normalize(path)
        self._notify()

    def hash_changed(self, new_hash: str) -> None:
        """Report a fragment change made outside the router."""
        self._hash = self._normalize(new_hash)
        self._notify()


class StateHistory(BaseHistory):
    """Base-prefixed history: ``current`` is the URL path minus ``base``."""

    __slots__ = ("_base", "_url")

    def __init__(self, base: str = "/", initial: Optional[str] = None):
        super().__init__()
        stripped = base.strip("/")
        self._base = f"/{stripped}/" if stripped else "/"
        self._url = self.prefix(initial or "")

    @property
    def base(self) -> str:
        return self._base

    @property
    def url(self) -> str:
        return self._url

    @property
    def current(self) -> str:
        if self._url.startswith(self._base):
            return self._url[len(self._base) :]
        if self._url == self._base.rstrip("/"):
            return ""
        return self._url.lstrip("/")

    def prefix(self, path: str) -> str:
        if path.startswith(self._base):
            return path
        return self._base + path.lstrip("/")

    def set(self, path: str) -> None:
        self._url = self.prefix(path)
        self._notify()

    def pop_state(self, url: str) -> None:
        """Report a URL change made outside the router (back/forward)."""
        self._url = url if url.startswith("/") else f"/{url}"
        self._notify()

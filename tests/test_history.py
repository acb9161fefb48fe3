import pytest

from outletroute import HashHistory, MemoryHistory, Router, StateHistory
from outletroute.core.history import History

ROUTES = [
    {"path": "foo", "outlet": "foo"},
    {"path": "baz/{baz}", "outlet": "baz"},
]


def test_memory_history_notifies_on_every_set():
    seen = []
    history = MemoryHistory()
    assert history.current == "/"
    history.listen(seen.append)
    history.set("/a")
    history.set("/a")
    assert seen == ["/a", "/a"]
    assert history.prefix("a/b") == "a/b"
    assert isinstance(history, History)


def test_history_binds_a_single_callback():
    history = MemoryHistory()

    def callback(path):
        return None

    history.listen(callback)
    history.listen(callback)
    with pytest.raises(RuntimeError):
        history.listen(lambda path: None)


def test_history_cannot_be_shared_between_routers():
    history = MemoryHistory()
    Router(ROUTES, history=history)
    with pytest.raises(RuntimeError):
        Router(ROUTES, history=history)


def test_hash_history_prefix_and_current():
    history = HashHistory("#/foo")
    assert history.hash == "#/foo"
    assert history.current == "/foo"
    assert history.prefix("baz/x") == "#/baz/x"
    assert history.prefix("/baz/x") == "#/baz/x"
    assert history.prefix("#/baz/x") == "#/baz/x"
    assert history.prefix("") == "#/"

    history.set("baz/x")
    assert history.hash == "#/baz/x"
    history.set("")
    assert history.hash == ""
    assert history.current == ""


def test_hash_history_drives_router_on_external_change():
    history = HashHistory()
    router = Router(ROUTES, history=history)
    assert len(router.snapshot) == 0

    history.hash_changed("#/baz/x")
    assert dict(router.get_outlet("baz").params) == {"baz": "x"}

    router.set_path("foo")
    assert history.hash == "#/foo"
    assert router.has_outlet("foo")


def test_state_history_strips_and_joins_base():
    history = StateHistory(base="/app", initial="foo")
    assert history.base == "/app/"
    assert history.url == "/app/foo"
    assert history.current == "foo"
    assert history.prefix("baz/x") == "/app/baz/x"
    assert history.prefix("/baz/x") == "/app/baz/x"
    assert history.prefix("/app/baz/x") == "/app/baz/x"

    history.pop_state("/app")
    assert history.current == ""
    history.pop_state("/elsewhere/x")
    assert history.current == "elsewhere/x"


def test_state_history_default_base():
    history = StateHistory()
    assert history.url == "/"
    assert history.current == ""
    history.set("baz/x")
    assert history.url == "/baz/x"
    assert history.current == "baz/x"


def test_state_history_drives_router():
    history = StateHistory(base="/app")
    router = Router(ROUTES, history=history)
    history.pop_state("/app/baz/y")
    assert dict(router.current_params) == {"baz": "y"}
    assert router.link("baz") == "/app/baz/y"
    router.set_path("foo")
    assert history.url == "/app/foo"
    assert router.has_outlet("foo")

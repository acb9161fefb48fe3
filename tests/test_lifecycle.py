import pytest

from outletroute.core.compiler import compile_routes
from outletroute.core.config import load_configs
from outletroute.core.lifecycle import LifecycleTracker, TransitionAction
from outletroute.core.matcher import Snapshot, match_routes
from outletroute.core.path import parse_path

SCENARIO = [
    {"path": "/foo", "outlet": "foo", "children": [{"path": "/bar", "outlet": "bar"}]},
    {"path": "baz/{baz}", "outlet": "baz"},
]


@pytest.fixture
def tree():
    return compile_routes(load_configs(SCENARIO))


def snap(tree, raw):
    segments, query = parse_path(raw)
    return match_routes(tree, segments, query, path=raw)


def actions(transitions):
    return [(t.action.value, t.outlet) for t in transitions]


def test_diff_enters_everything_from_empty(tree):
    tracker = LifecycleTracker()
    assert actions(tracker.diff(Snapshot(), snap(tree, "/foo/bar"))) == [
        ("enter", "foo"),
        ("enter", "bar"),
    ]


def test_diff_same_path_is_idempotent(tree):
    tracker = LifecycleTracker()
    assert tracker.diff(snap(tree, "/baz/x"), snap(tree, "/baz/x")) == []


def test_diff_param_change_reenters_without_exit(tree):
    tracker = LifecycleTracker()
    transitions = tracker.diff(snap(tree, "/baz/x"), snap(tree, "/baz/y"))
    assert actions(transitions) == [("enter", "baz")]
    assert dict(transitions[0].context.params) == {"baz": "y"}


def test_diff_type_change_alone_is_not_a_transition(tree):
    tracker = LifecycleTracker()
    assert actions(tracker.diff(snap(tree, "/foo"), snap(tree, "/foo/bar"))) == [("enter", "bar")]
    assert actions(tracker.diff(snap(tree, "/foo/bar"), snap(tree, "/foo/nope"))) == [("exit", "bar")]


def test_diff_lists_exits_before_enters(tree):
    tracker = LifecycleTracker()
    transitions = tracker.diff(snap(tree, "/foo/bar"), snap(tree, "/baz/x"))
    assert actions(transitions) == [("exit", "foo"), ("exit", "bar"), ("enter", "baz")]
    assert transitions[0].action is TransitionAction.EXIT
    assert str(transitions[2].action) == "enter"


def test_hook_precedence_prefers_latest_outlet_binding():
    calls = []
    route_tree = compile_routes(
        load_configs([{"path": "a", "outlet": "a", "onEnter": lambda: calls.append("config")}])
    )
    tracker = LifecycleTracker()
    (enter,) = tracker.diff(Snapshot(), snap(route_tree, "/a"))

    assert tracker.fire(enter) is True
    assert calls == ["config"]

    first = tracker.register("a", on_enter=lambda: calls.append("first"))
    tracker.register("a", on_exit=lambda: calls.append("exit-only"))
    tracker.fire(enter)
    assert calls[-1] == "first"

    second = tracker.register("a", on_enter=lambda: calls.append("second"))
    tracker.fire(enter)
    assert calls[-1] == "second"

    second.remove()
    assert not second.active
    assert first.active
    tracker.fire(enter)
    assert calls[-1] == "first"


def test_fire_without_any_hook_returns_false(tree):
    tracker = LifecycleTracker()
    (enter,) = tracker.diff(Snapshot(), snap(tree, "/foo"))
    assert tracker.fire(enter) is False


def test_register_rejects_non_callable_hooks():
    tracker = LifecycleTracker()
    with pytest.raises(TypeError):
        tracker.register("a", on_enter="not callable")  # type: ignore[arg-type]


def test_unregister_drops_empty_buckets():
    tracker = LifecycleTracker()
    binding = tracker.register("a", on_exit=lambda: None)
    assert tracker.bindings("a") == [binding]
    binding.remove()
    binding.remove()
    assert tracker.bindings("a") == []
    assert "a" in repr(binding)

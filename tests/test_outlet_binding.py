from outletroute import MatchType, Outlet, Router
from outletroute.core.outlet import MapParamsOptions


def build(calls=None):
    calls = calls if calls is not None else []
    return Router(
        [
            {
                "path": "foo",
                "outlet": "foo",
                "onEnter": lambda: calls.append("config:enter"),
                "onExit": lambda: calls.append("config:exit"),
                "children": [{"path": "bar", "outlet": "bar"}],
            },
            {"path": "baz/{baz}", "outlet": "baz"},
        ]
    )


def test_select_follows_match_type():
    router = build()
    outlet = router.outlet("foo", main="Main", index="Index", error="Error")
    assert isinstance(outlet, Outlet)
    assert outlet.select() is None
    assert not outlet.active

    router.set_path("/foo")
    assert outlet.select() == "Index"

    router.set_path("/foo/bar")
    assert outlet.select() == "Main"

    router.set_path("/foo/missing")
    assert outlet.context.type is MatchType.ERROR
    assert outlet.select() == "Index"


def test_select_error_component_without_index():
    router = build()
    outlet = router.outlet("foo", main="Main", error="Error")
    router.set_path("/foo/missing")
    assert outlet.select() == "Error"
    router.set_path("/foo")
    assert outlet.select() == "Main"


def test_select_returns_none_when_nothing_applies():
    router = build()
    outlet = Outlet(router, "foo", index="Index")
    router.set_path("/foo/bar")
    assert outlet.select() is None


def test_default_properties_merge_params_and_type():
    router = build()
    outlet = router.outlet("baz")
    assert outlet.properties() is None
    router.set_path("/baz/x?q=1")
    assert outlet.properties() == {"baz": "x", "type": "index"}


def test_custom_map_params_receives_options():
    received = []

    def map_params(options: MapParamsOptions):
        received.append(options)
        return {"id": options.params["baz"], "q": options.query_params.get("q")}

    router = build()
    outlet = router.outlet("baz", map_params=map_params)
    router.set_path("/baz/x?q=1")
    assert outlet.properties() == {"id": "x", "q": "1"}
    assert received[0].router is router
    assert received[0].type is MatchType.INDEX


def test_outlet_hooks_override_configuration_hooks():
    calls = []
    router = build(calls)
    outlet = router.outlet(
        "foo",
        on_enter=lambda: calls.append("outlet:enter"),
        on_exit=lambda: calls.append("outlet:exit"),
    )
    router.set_path("/foo")
    router.set_path("/baz/x")
    assert calls == ["outlet:enter", "outlet:exit"]

    outlet.remove()
    router.set_path("/foo")
    assert calls[-1] == "config:enter"
    assert "foo" in repr(outlet)


def test_registering_an_outlet_does_not_fire_enter():
    calls = []
    router = build(calls)
    router.set_path("/foo")
    calls.clear()
    router.outlet("foo", on_enter=lambda: calls.append("outlet:enter"))
    assert calls == []
    router.set_path("/foo")
    assert calls == []

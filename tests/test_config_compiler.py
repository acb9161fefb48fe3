import pytest

from outletroute import Router
from outletroute.core.compiler import compile_routes
from outletroute.core.config import RouteConfig, load_configs
from outletroute.core.errors import RouteConfigError, TemplateError


def compile_config(config):
    return compile_routes(load_configs(config))


def test_load_configs_accepts_camel_case_and_snake_case():
    def hook():
        return None

    camel, snake = load_configs(
        [
            {"path": "a", "outlet": "a", "defaultParams": {"x": "1"}, "defaultRoute": True, "onEnter": hook},
            {"path": "b", "outlet": "b", "default_params": {"y": "2"}, "on_exit": hook},
        ]
    )
    assert camel.default_params == {"x": "1"}
    assert camel.default_route is True
    assert camel.on_enter is hook
    assert snake.default_params == {"y": "2"}
    assert snake.on_exit is hook


def test_load_configs_accepts_models():
    node = RouteConfig(path="a", outlet="a", children=[{"path": "b", "outlet": "b"}])
    (loaded,) = load_configs([node])
    assert loaded is node
    assert loaded.children[0].outlet == "b"


@pytest.mark.parametrize(
    "node",
    [
        {"path": "a", "outlet": "a", "colour": "red"},
        {"path": "a", "outlet": ""},
        {"path": "a"},
        {"path": "a", "outlet": "a", "onEnter": 5},
        {"path": "a", "outlet": "a", "children": [{"path": "b", "outlet": "b", "typo": 1}]},
    ],
)
def test_load_configs_rejects_invalid_nodes(node):
    with pytest.raises(RouteConfigError) as exc:
        load_configs([node])
    assert "route path 'a'" in str(exc.value)


def test_load_configs_rejects_wrong_shapes():
    with pytest.raises(RouteConfigError):
        load_configs({"path": "a", "outlet": "a"})
    with pytest.raises(RouteConfigError):
        load_configs("a/b")
    with pytest.raises(RouteConfigError):
        load_configs(["a/b"])


def test_compiled_route_accumulates_chain():
    tree = compile_config(
        [
            {
                "path": "/a/{x}",
                "outlet": "a",
                "defaultParams": {"x": "0"},
                "children": [{"path": "b?{q}", "outlet": "b", "defaultParams": {"q": "1"}}],
            }
        ]
    )
    a = tree.find("a")
    b = tree.find("b")
    assert a.key == (0,)
    assert b.key == (0, 0)
    assert b.path == "b"
    assert b.full_path == "a/{x}/b"
    assert b.full_params == ("x",)
    assert b.full_query == ("q",)
    assert dict(b.default_params) == {"x": "0", "q": "1"}
    assert dict(a.default_params) == {"x": "0"}
    assert a.children == (b,)
    assert b.depth == 1
    assert a.is_ancestor_of(b) and b.is_ancestor_of(b)
    assert not b.is_ancestor_of(a)
    assert tree.chain(b) == (a, b)
    assert b.render({"x": "5", "q": "z"}) == "a/5/b?q=z"


def test_child_defaults_override_parent_defaults():
    tree = compile_config(
        [
            {
                "path": "a/{x}",
                "outlet": "a",
                "defaultParams": {"x": "0", "shared": "parent"},
                "children": [{"path": "b", "outlet": "b", "defaultParams": {"shared": "child"}}],
            }
        ]
    )
    assert dict(tree.find("b").default_params) == {"x": "0", "shared": "child"}


def test_repeated_param_in_chain_is_rejected():
    with pytest.raises(RouteConfigError, match="'x'"):
        compile_config([{"path": "a/{x}", "outlet": "a", "children": [{"path": "{x}", "outlet": "b"}]}])
    with pytest.raises(RouteConfigError, match="'x'"):
        compile_config([{"path": "a/{x}", "outlet": "a", "children": [{"path": "b?{x}", "outlet": "b"}]}])


def test_same_param_name_in_separate_branches_is_allowed():
    tree = compile_config(
        [
            {"path": "a/{id}", "outlet": "a"},
            {"path": "b/{id}", "outlet": "b"},
        ]
    )
    assert tree.find("a").full_params == tree.find("b").full_params == ("id",)


def test_more_than_one_default_route_is_rejected():
    with pytest.raises(RouteConfigError, match="default route"):
        compile_config(
            [
                {"path": "a", "outlet": "a", "defaultRoute": True},
                {"path": "b", "outlet": "b", "children": [{"path": "c", "outlet": "c", "defaultRoute": True}]},
            ]
        )


def test_sibling_outlets_must_be_unique():
    with pytest.raises(RouteConfigError, match="declared twice"):
        compile_config([{"path": "a", "outlet": "x"}, {"path": "b", "outlet": "x"}])


def test_repeated_outlet_in_other_branches_is_allowed():
    tree = compile_config(
        [
            {"path": "a", "outlet": "panel", "children": [{"path": "b", "outlet": "panel"}]},
            {"path": "c", "outlet": "c", "children": [{"path": "d", "outlet": "panel"}]},
        ]
    )
    found = tree.find_all("panel")
    assert [route.key for route in found] == [(0,), (0, 0), (1, 0)]
    assert tree.find("panel") is found[0]


def test_malformed_template_surfaces_as_config_error():
    with pytest.raises(RouteConfigError) as exc:
        compile_config([{"path": "a/{b", "outlet": "a"}])
    assert "a/{b" in str(exc.value)
    assert isinstance(exc.value.__cause__, TemplateError)


def test_route_tree_helpers():
    tree = compile_config(
        [
            {"path": "a", "outlet": "a", "children": [{"path": "b", "outlet": "b"}, {"path": "c", "outlet": "c"}]},
            {"path": "", "outlet": "home", "defaultRoute": True},
        ]
    )
    assert [route.outlet for route in tree.walk()] == ["a", "b", "c", "home"]
    assert [route.outlet for route in tree] == ["a", "home"]
    assert len(tree) == 4
    assert tree.outlets() == ("a", "b", "c", "home")
    assert tree.default_route is tree.find("home")
    assert tree.get((0, 1)) is tree.find("c")
    assert tree.get((9,)) is None
    assert tree.find("missing") is None
    assert tree.find_all("missing") == ()
    assert "home" in repr(tree)


def test_router_construction_raises_config_errors():
    with pytest.raises(RouteConfigError):
        Router([{"path": "a", "outlet": "x"}, {"path": "b", "outlet": "x"}])

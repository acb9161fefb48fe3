import pytest

from outletroute.core.errors import MissingParam, TemplateError
from outletroute.core.path import (
    Placeholder,
    compile_template,
    join_paths,
    parse_path,
    parse_query,
    render,
)


def test_parse_path_splits_segments_and_query():
    segments, query = parse_path("/baz/x?q=1&q=2&flag")
    assert segments == ("baz", "x")
    assert query == {"q": "2", "flag": ""}


def test_parse_path_drops_empty_segments():
    assert parse_path("//a//b/") == (("a", "b"), {})
    assert parse_path("") == ((), {})
    assert parse_path("/") == ((), {})
    assert parse_path("?x=1") == ((), {"x": "1"})


def test_parse_query_ignores_empty_pairs_and_keys():
    assert parse_query("=x&&b=1&c=a=b") == {"b": "1", "c": "a=b"}


def test_compile_template_literals_and_placeholders():
    template = compile_template("/baz/{baz}")
    assert template.path == "baz/{baz}"
    assert template.segments == ("baz", Placeholder("baz"))
    assert template.params == ("baz",)
    assert template.query == ()
    assert str(template.segments[1]) == "{baz}"


def test_compile_template_query_declarations():
    template = compile_template("search?{q}&{page}")
    assert template.path == "search"
    assert template.segments == ("search",)
    assert template.params == ()
    assert template.query == ("q", "page")


def test_compile_template_empty_path():
    for raw in ("", "/"):
        template = compile_template(raw)
        assert template.segments == ()
        assert template.path == ""


@pytest.mark.parametrize(
    "raw",
    ["{a", "a}", "{}", "x{a}", "{a}/{a}", "{ a }", "{{a}}", "s?q", "s?{a}&{a}", "{a}?{a}"],
)
def test_compile_template_rejects_malformed(raw):
    with pytest.raises(TemplateError) as exc:
        compile_template(raw)
    assert exc.value.path == raw
    assert repr(raw) in str(exc.value)


def test_render_substitutes_and_appends_query():
    template = compile_template("user/{id}?{tab}")
    assert template.render({"id": "7", "tab": "x"}) == "user/7?tab=x"
    assert render(("a", Placeholder("n")), {"n": 3}) == "a/3"


def test_render_missing_or_empty_value_raises():
    template = compile_template("user/{id}?{tab}")
    with pytest.raises(MissingParam) as exc:
        template.render({"tab": "x"})
    assert exc.value.name == "id"
    assert "user/{id}" in str(exc.value)

    with pytest.raises(MissingParam) as exc:
        template.render({"id": "7", "tab": ""})
    assert exc.value.name == "tab"
    assert isinstance(exc.value, KeyError)


def test_render_ignores_extra_values():
    assert compile_template("a/{b}").render({"b": "1", "other": "2"}) == "a/1"


def test_join_paths():
    assert join_paths("", "a") == "a"
    assert join_paths("a", "") == "a"
    assert join_paths("a/{b}", "c") == "a/{b}/c"

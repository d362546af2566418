"""Tests for sword.routing.pattern: pattern parsing and compilation."""

import pytest

from sword.errors import ConfigurationError, RoutePatternError
from sword.routing.pattern import (
    Literal,
    OptionalGroup,
    Param,
    Wildcard,
    compile_pattern,
    parse_method_spec,
)


class TestParseMethodSpec:
    def test_no_method(self) -> None:
        assert parse_method_spec("/users") == (None, "/users")

    def test_single_method(self) -> None:
        assert parse_method_spec("GET /users") == (("GET",), "/users")

    def test_multiple_methods_uppercased(self) -> None:
        assert parse_method_spec("get|Post /users") == (("GET", "POST"), "/users")

    def test_extra_whitespace(self) -> None:
        assert parse_method_spec("  PUT    /users/@id ") == (("PUT",), "/users/@id")

    def test_star_means_any(self) -> None:
        assert parse_method_spec("* /users") == (None, "/users")

    def test_empty_method_rejected(self) -> None:
        with pytest.raises(RoutePatternError):
            parse_method_spec("GET| /users")


class TestSegments:
    def test_literal(self) -> None:
        assert compile_pattern("/about").segments == (Literal("/about"),)

    def test_param(self) -> None:
        assert compile_pattern("/users/@id").segments == (Literal("/users/"), Param("id"))

    def test_custom_expression(self) -> None:
        segments = compile_pattern("/@id:[0-9]{3}").segments
        assert segments == (Literal("/"), Param("id", "[0-9]{3}"))
        assert segments[1].regex == "[0-9]{3}"

    def test_default_expression(self) -> None:
        assert Param("id").regex == "[^/]+"

    def test_nested_optional(self) -> None:
        segments = compile_pattern("/blog(/@year(/@month))").segments
        assert segments == (
            Literal("/blog"),
            OptionalGroup(
                (
                    Literal("/"),
                    Param("year"),
                    OptionalGroup((Literal("/"), Param("month"))),
                )
            ),
        )

    def test_wildcard(self) -> None:
        assert compile_pattern("/blog/*").segments == (Literal("/blog/"), Wildcard())

    def test_param_names_in_order(self) -> None:
        pattern = compile_pattern("/@a/@b(/@c)")
        assert pattern.param_names == ("a", "b", "c")


class TestMatching:
    def test_static(self) -> None:
        assert compile_pattern("/users").match("/users") == ({}, ())

    def test_no_match_returns_none(self) -> None:
        assert compile_pattern("/users").match("/posts") is None

    def test_anchored(self) -> None:
        pattern = compile_pattern("/users")
        assert pattern.match("/users/extra") is None
        assert pattern.match("/prefix/users") is None

    def test_trailing_slash_tolerated(self) -> None:
        assert compile_pattern("/users").match("/users/") == ({}, ())

    def test_named_param(self) -> None:
        params, splat = compile_pattern("/users/@name").match("/users/alice")
        assert params == {"name": "alice"}
        assert splat == ()

    def test_param_does_not_cross_slash(self) -> None:
        assert compile_pattern("/users/@name").match("/users/alice/posts") is None

    def test_multiple_params(self) -> None:
        params, _ = compile_pattern("/@name/@id").match("/bob/123")
        assert params == {"name": "bob", "id": "123"}

    def test_custom_expression_accepts(self) -> None:
        params, _ = compile_pattern("/@id:[0-9]{3}").match("/123")
        assert params == {"id": "123"}

    def test_custom_expression_rejects(self) -> None:
        pattern = compile_pattern("/@id:[0-9]{3}")
        assert pattern.match("/12345") is None
        assert pattern.match("/abc") is None

    def test_optional_absent_is_none(self) -> None:
        params, _ = compile_pattern("/blog(/@year(/@month))").match("/blog")
        assert params == {"year": None, "month": None}

    def test_optional_partially_present(self) -> None:
        params, _ = compile_pattern("/blog(/@year(/@month))").match("/blog/2012")
        assert params["year"] == "2012"
        assert params["month"] is None

    def test_optional_fully_present(self) -> None:
        params, _ = compile_pattern("/blog(/@year(/@month))").match("/blog/2012/12")
        assert params == {"year": "2012", "month": "12"}

    def test_optional_with_custom_expression(self) -> None:
        pattern = compile_pattern("/blog(/@year:[0-9]{4}(/@month:[0-9]{2}))")
        assert pattern.match("/blog/2012/5") is None
        assert pattern.match("/blog/2012/05") == ({"year": "2012", "month": "05"}, ())

    def test_wildcard_multiple_segments(self) -> None:
        params, splat = compile_pattern("/blog/*").match("/blog/2000/02/01")
        assert params == {}
        assert splat == ("2000/02/01",)

    def test_wildcard_matches_bare_prefix(self) -> None:
        assert compile_pattern("/blog/*").match("/blog") == ({}, ())

    def test_wildcard_trailing_slash_same_as_bare_prefix(self) -> None:
        pattern = compile_pattern("/blog/*")
        assert pattern.match("/blog/") == pattern.match("/blog") == ({}, ())

    def test_wildcard_does_not_match_other_prefix(self) -> None:
        assert compile_pattern("/blog/*").match("/blogs/1") is None

    def test_bare_wildcard_matches_everything(self) -> None:
        pattern = compile_pattern("*")
        assert pattern.match("/") == ({}, ())
        assert pattern.match("/any/thing/at/all") == ({}, ("any/thing/at/all",))

    def test_param_with_wildcard(self) -> None:
        params, splat = compile_pattern("/files/@owner/*").match("/files/ann/docs/a.txt")
        assert params == {"owner": "ann"}
        assert splat == ("docs/a.txt",)

    def test_case_insensitive_by_default(self) -> None:
        assert compile_pattern("/Users").match("/users") is not None

    def test_case_sensitive(self) -> None:
        pattern = compile_pattern("/Users")
        assert pattern.match("/users", case_sensitive=True) is None
        assert pattern.match("/Users", case_sensitive=True) is not None

    def test_literal_regex_characters_escaped(self) -> None:
        pattern = compile_pattern("/a+b/file.txt")
        assert pattern.match("/a+b/file.txt") is not None
        assert pattern.match("/aab/fileXtxt") is None

    @pytest.mark.parametrize("path", ["/", "/about", "/a/b.c", "/files/report-2020.txt"])
    def test_literal_matches_itself(self, path: str) -> None:
        assert compile_pattern(path).match(path) == ({}, ())


class TestRegexSource:
    def test_param_source(self) -> None:
        assert compile_pattern("/users/@id").source == "/users/(?P<id>[^/]+)/?"

    def test_root_source(self) -> None:
        assert compile_pattern("/").source == "/"

    def test_trailing_slash_pattern(self) -> None:
        assert compile_pattern("/users/").source == "/users/?"


class TestInvalidPatterns:
    @pytest.mark.parametrize(
        "pattern",
        [
            "",
            "/@id:(\\d+)",
            "/@id:[0-9](x)",
            "/blog(/@year",
            "/blog)",
            "/blog()",
            "/a/*/b",
            "/a(/*)",
            "/@",
            "/@1abc",
            "/@id/@id",
            "/@id:",
            "/@id:[0-9",
            "/@_splat",
        ],
    )
    def test_rejected(self, pattern: str) -> None:
        with pytest.raises(RoutePatternError):
            compile_pattern(pattern)

    def test_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_pattern("/@id:(a|b)")

    def test_message_names_pattern(self) -> None:
        with pytest.raises(RoutePatternError) as exc_info:
            compile_pattern("/blog(/@year")
        assert "/blog(/@year" in str(exc_info.value)
        assert exc_info.value.pattern == "/blog(/@year"

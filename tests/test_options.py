"""Tests for driver option merging and URL rendering."""

from __future__ import annotations

import pytest

from mysqlenv.options import (
    DEFAULT_OPTIONS,
    ParameterSet,
    build_jdbc_url,
    merge_default_options,
    parse_query,
)

DEFAULT_QUERY = "useSSL=false&serverTimezone=UTC&allowPublicKeyRetrieval=true&useUnicode=true&characterEncoding=utf8"


def test_parse_query_keeps_first_occurrence_and_drops_blank_keys() -> None:
    parameters = parse_query("a=1&&b&=x&a=2&c=x=y")

    assert parameters.items() == [("a", "1"), ("b", ""), ("c", "x=y")]


def test_parse_query_handles_missing_query() -> None:
    assert len(parse_query(None)) == 0
    assert len(parse_query("   ")) == 0


def test_merge_appends_defaults_in_table_order() -> None:
    merged = merge_default_options(ParameterSet())

    assert merged.render() == DEFAULT_QUERY


def test_merge_respects_case_variant_of_existing_key() -> None:
    merged = merge_default_options(ParameterSet([("USESSL", "true")]))

    assert merged.items()[0] == ("USESSL", "true")
    assert "useSSL" not in list(merged)
    assert len(merged) == len(DEFAULT_OPTIONS)


def test_merge_does_not_mutate_input() -> None:
    original = ParameterSet([("opt", "1")])

    merge_default_options(original)

    assert original.items() == [("opt", "1")]


def test_render_emits_bare_key_for_empty_value() -> None:
    assert ParameterSet([("flag", ""), ("a", "1")]).render() == "flag&a=1"


def test_contains_ignore_case() -> None:
    parameters = ParameterSet([("serverTimezone", "Europe/Madrid")])

    assert parameters.contains_ignore_case("SERVERTIMEZONE")
    assert not parameters.contains_ignore_case("useSSL")


def test_default_options_are_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_OPTIONS["useSSL"] = "true"  # type: ignore[index]


def test_build_jdbc_url_with_database_and_options() -> None:
    url = build_jdbc_url("db.internal", 3307, "app", ParameterSet([("opt", "1")]))

    assert url == f"jdbc:mysql://db.internal:3307/app?opt=1&{DEFAULT_QUERY}"


def test_build_jdbc_url_omits_blank_database_and_non_positive_port() -> None:
    assert build_jdbc_url("db", 0, "  ") == f"jdbc:mysql://db?{DEFAULT_QUERY}"

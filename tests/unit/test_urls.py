"""Tests for URL building and safety checks."""

from json_api_client.urls import (
    build_url,
    encode_params,
    is_safe_url,
    join_url,
    merge_headers,
    merge_params,
)


class TestSafeUrl:
    def test_plain_path(self):
        assert is_safe_url("http://host/a/b")

    def test_traversal(self):
        assert not is_safe_url("http://host/a/../b")

    def test_encoded_traversal(self):
        assert not is_safe_url("http://host/a%2f..%2fb")

    def test_trailing_parent(self):
        assert not is_safe_url("http://host/a/..")

    def test_parent_before_query(self):
        assert not is_safe_url("http://host/a/..?x=1")

    def test_backslash_traversal(self):
        assert not is_safe_url("http://host/a\\..\\b")

    def test_tab(self):
        assert not is_safe_url("http://host/a%09b")

    def test_dots_in_names_are_fine(self):
        assert is_safe_url("http://host/v1.2/file..json")


class TestBuildUrl:
    def test_collapses_slashes_but_keeps_scheme(self):
        assert join_url("http://host/api/", "/items//1") == "http://host/api/items/1"

    def test_appends_query(self):
        assert build_url("http://host", "/a", [("q", "x y")]) == "http://host/a?q=x%20y"

    def test_appends_to_existing_query(self):
        assert build_url("http://host", "/a?b=1", [("c", "2")]) == "http://host/a?b=1&c=2"

    def test_encodes_like_encode_uri_component(self):
        assert encode_params([("a&b", "c/d=e"), ("t", "it's(1)")]) == "a%26b=c%2Fd%3De&t=it's(1)"


class TestMergeParams:
    def test_defaults_then_call_params(self):
        assert merge_params("token=abc", [("id", "1")]) == [("token", "abc"), ("id", "1")]

    def test_duplicate_call_keys_kept(self):
        assert merge_params("", [("id", "1"), ("id", "2")]) == [("id", "1"), ("id", "2")]

    def test_empty_keys_dropped(self):
        assert merge_params("", [("", "x"), ("a", "1")]) == [("a", "1")]

    def test_repeated_default_key_keeps_last_value(self):
        assert merge_params("?a=1&b=2&a=3", None) == [("a", "3"), ("b", "2")]


class TestMergeHeaders:
    def test_no_dedup(self):
        merged = merge_headers([("X-Key", "k1")], [("X-Key", "k2")])
        assert [h for h in merged if h[0] == "X-Key"] == [("X-Key", "k1"), ("X-Key", "k2")]

    def test_default_content_type(self):
        assert merge_headers(None, None) == [("Content-Type", "application/json")]

    def test_explicit_content_type_wins(self):
        assert merge_headers([], [("content-type", "text/plain")]) == [("content-type", "text/plain")]

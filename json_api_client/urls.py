"""URL building and safety checks."""

import re
from urllib.parse import parse_qsl, quote, unquote

Pair = tuple[str, str]

_REPEATED_SLASHES = re.compile(r"([^:]/)/+")


def encode_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="-_.!~*'()")


def encode_params(params: list[Pair]) -> str:
    """Encode pairs as an &-joined query string, keeping order and duplicates."""
    return "&".join(f"{encode_component(k)}={encode_component(v)}" for k, v in params)


def append_query(url: str, params: list[Pair]) -> str:
    """Append encoded params with '?' or '&' depending on the url."""
    if not params:
        return url
    return url + ("&" if "?" in url else "?") + encode_params(params)


def parse_query_string(query: str) -> list[Pair]:
    """Parse a default query-string fragment, later values win, first position kept."""
    merged: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        merged[key] = value
    return list(merged.items())


def merge_params(default_query: str, params: list[Pair] | None) -> list[Pair]:
    """API default params followed by call params with a non-empty key."""
    return parse_query_string(default_query) + [(k, v) for k, v in params or [] if k]


def merge_headers(default_headers: list[Pair] | None, headers: list[Pair] | None) -> list[Pair]:
    """API headers followed by call headers; no dedup, empty keys dropped.

    A JSON Content-Type is prepended unless one of the headers already sets it.
    """
    merged = [(k, v) for k, v in [*(default_headers or []), *(headers or [])] if k]
    if not any(k.lower() == "content-type" for k, _ in merged):
        merged.insert(0, ("Content-Type", "application/json"))
    return merged


def join_url(base_url: str, path: str) -> str:
    """Concatenate base and path and collapse repeated slashes outside the scheme."""
    return _REPEATED_SLASHES.sub(r"\1", base_url + path)


def build_url(base_url: str, path: str, params: list[Pair] | None = None) -> str:
    """Full request URL with the encoded query string."""
    return append_query(join_url(base_url, path), params or [])


def is_safe_url(url: str) -> bool:
    """Reject URLs that traverse above the base path or hold a tab.

    Backslashes are read as slashes, as browsers do, and the check runs on the
    percent-decoded text so encoded traversal is caught too.
    """
    decoded = unquote(url.replace("\\", "/"))
    if decoded.endswith("/.."):
        return False
    if "/../" in decoded or "/..?" in decoded:
        return False
    return "\t" not in decoded

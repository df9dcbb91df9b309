"""Tests for template variable and macro substitution."""

from datetime import datetime, timezone

from app.models.query import TimeRange
from app.services.macros import VariableStore, interpolate, replace_macros

RANGE = TimeRange.from_epoch(1700000000, 1700003600)


class TestReplaceMacros:
    def test_epoch(self):
        assert replace_macros("$__unixEpochFrom()-$__unixEpochTo()", RANGE) == "1700000000-1700003600"

    def test_iso(self):
        assert replace_macros("$__isoFrom()", RANGE) == "2023-11-14T22:13:20.000Z"
        assert replace_macros("$__isoTo()", RANGE) == "2023-11-14T23:13:20.000Z"

    def test_without_range_unchanged(self):
        assert replace_macros("$__unixEpochFrom()-$__unixEpochTo()") == "$__unixEpochFrom()-$__unixEpochTo()"

    def test_unknown_macro_left(self):
        assert replace_macros("$__unixEpochNow()", RANGE) == "$__unixEpochNow()"


class TestTimeRange:
    def test_naive_is_utc(self):
        tr = TimeRange(datetime(2024, 1, 1), datetime(2024, 1, 2))
        assert tr.from_.tzinfo == timezone.utc
        assert tr.from_ms == 1704067200000


class TestVariableStore:
    def setup_method(self):
        self.store = VariableStore({"host": "web1", "region": ["us", "eu"]})

    def test_simple_syntaxes(self):
        assert self.store.replace("$host/${host}/[[host]]") == "web1/web1/web1"

    def test_multi_value_default_glob(self):
        assert self.store.replace("$region") == "{us,eu}"

    def test_formats(self):
        assert self.store.replace("${region:csv}") == "us,eu"
        assert self.store.replace("${region:pipe}") == "us|eu"
        assert self.store.replace("${region:json}") == '["us", "eu"]'
        assert self.store.replace("${region:singlequote}") == "'us','eu'"
        assert self.store.replace("${region:queryparam}") == "var-region=us&var-region=eu"

    def test_unknown_left_verbatim(self):
        assert self.store.replace("$missing and ${other}") == "$missing and ${other}"

    def test_scoped_vars_win(self):
        assert self.store.replace("$host", {"host": {"text": "Web 2", "value": "web2"}}) == "web2"

    def test_values(self):
        assert self.store.values("region") == ["us", "eu"]
        assert self.store.values("host") == ["web1"]
        assert self.store.values("nope") == []


class TestInterpolate:
    def test_variables_then_macros(self):
        store = VariableStore({"id": "42"})
        text = "/items/$id?from=$__unixEpochFrom()"
        assert interpolate(text, store, time_range=RANGE) == "/items/42?from=1700000000"

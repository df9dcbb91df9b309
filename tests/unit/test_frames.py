"""Tests for frame building and grouping."""

from datetime import datetime, timezone

import polars as pl
import pytest

from app.errors import LengthMismatchError
from app.models.frame import ApiHealth, DataField, Frame, HealthResult
from app.models.query import FieldType
from app.services.frames import apply_metric_field, build_frame, group_by


def region_frame() -> Frame:
    return build_frame(
        "A",
        [
            DataField("region", FieldType.STRING, ["us", "eu", "us"]),
            DataField("value", FieldType.NUMBER, [1, 2, 3]),
        ],
        ref_id="A",
    )


class TestBuildFrame:
    def test_equal_lengths(self):
        frame = region_frame()
        assert frame.length == 3
        assert frame.name == "A"

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError) as exc:
            build_frame(
                "A",
                [DataField("a", FieldType.NUMBER, [1, 2]), DataField("b", FieldType.NUMBER, [1])],
            )
        assert exc.value.lengths == {"a": 2, "b": 1}

    def test_no_fields(self):
        assert build_frame("A", []).length == 0


class TestGroupBy:
    def test_splits_by_value(self):
        frames = group_by(region_frame(), "region")
        assert [f.name for f in frames] == ["us", "eu"]
        assert [f.name for f in frames[0].fields] == ["value"]
        assert frames[0].fields[0].values == [1, 3]
        assert frames[1].fields[0].values == [2]
        assert all(f.ref_id == "A" for f in frames)

    def test_null_and_time_keys(self):
        when = datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)
        frame = build_frame(
            "A",
            [
                DataField("t", FieldType.TIME, [when, None, when]),
                DataField("v", FieldType.NUMBER, [1, 2, 3]),
            ],
        )
        frames = group_by(frame, "t")
        assert [f.name for f in frames] == ["2024-01-01T12:30:00.000Z", ""]
        assert frames[1].fields[0].values == [2]

    def test_boolean_keys(self):
        frame = build_frame(
            "A",
            [DataField("up", FieldType.BOOLEAN, [True, False]), DataField("v", FieldType.NUMBER, [1, 2])],
        )
        assert [f.name for f in group_by(frame, "up")] == ["true", "false"]

    def test_missing_column(self):
        frame = region_frame()
        assert group_by(frame, "nope") == [frame]


class TestMetricField:
    def test_display_name_from_frame(self):
        frames = apply_metric_field(group_by(region_frame(), "region"), "value")
        assert frames[0].fields[0].config == {"displayNameFromDS": "us"}
        assert frames[1].fields[0].config == {"displayNameFromDS": "eu"}


class TestToDict:
    def test_json_ready(self):
        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        frame = build_frame("A", [DataField("t", FieldType.TIME, [when, None])], ref_id="A")
        assert frame.to_dict() == {
            "name": "A",
            "ref_id": "A",
            "fields": [{"name": "t", "type": "time", "values": ["2024-01-01T00:00:00.000Z", None], "config": {}}],
        }

    def test_health_result(self):
        result = HealthResult("error", "down", [ApiHealth("a", "A", "error", "Not Found")])
        assert result.to_dict()["details"] == [
            {"api_id": "a", "api_name": "A", "status": "error", "message": "Not Found"}
        ]


class TestToPolars:
    def test_dtypes(self):
        frame = build_frame(
            "A",
            [
                DataField("n", FieldType.NUMBER, [1, None]),
                DataField("s", FieldType.STRING, ["a", "b"]),
                DataField("b", FieldType.BOOLEAN, [True, None]),
                DataField("t", FieldType.TIME, [datetime(2024, 1, 1, tzinfo=timezone.utc), None]),
            ],
        )
        df = frame.to_polars()
        assert df.shape == (2, 4)
        assert df.schema["n"] == pl.Float64
        assert df.schema["s"] == pl.String
        assert df.schema["b"] == pl.Boolean
        assert df["n"].to_list() == [1.0, None]

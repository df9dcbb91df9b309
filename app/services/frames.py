"""Frame building and grouping."""

from datetime import datetime
from typing import Any

from app.errors import LengthMismatchError
from app.models.frame import DataField, Frame
from app.models.query import format_iso


def build_frame(name: str, fields: list[DataField], ref_id: str | None = None) -> Frame:
    """Assemble fields into a frame; all fields must have the same length."""
    lengths = {f.name: len(f) for f in fields}
    if len(set(lengths.values())) > 1:
        raise LengthMismatchError(lengths)
    return Frame(name=name, fields=fields, ref_id=ref_id)


def group_name(value: Any) -> str:
    """Frame name for a group key; null groups are unnamed."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return format_iso(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def group_by(frame: Frame, field_name: str) -> list[Frame]:
    """Split a frame into one frame per distinct value of a field.

    Output frames follow the order of first occurrence, are named after the
    value, and no longer carry the grouping field. An unknown field returns
    the frame unchanged.
    """
    group_field = frame.get_field(field_name)
    if group_field is None:
        return [frame]

    rows_by_value: dict[Any, list[int]] = {}
    for idx, value in enumerate(group_field.values):
        rows_by_value.setdefault(value, []).append(idx)

    return [
        Frame(
            name=group_name(value),
            ref_id=frame.ref_id,
            fields=[
                DataField(
                    name=f.name,
                    type=f.type,
                    values=[f.values[i] for i in rows],
                    config=dict(f.config),
                )
                for f in frame.fields
                if f.name != group_field.name
            ],
        )
        for value, rows in rows_by_value.items()
    ]


def apply_metric_field(frames: list[Frame], metric_field: str | None) -> list[Frame]:
    """Display the named field under its frame's name."""
    if not metric_field:
        return frames
    for frame in frames:
        for f in frame.fields:
            if f.name == metric_field:
                f.config = {**f.config, "displayNameFromDS": frame.name}
    return frames

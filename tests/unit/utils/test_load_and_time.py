from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tsreduce.aggregates.asap import AsapAggregate
from tsreduce.aggregates.lttb import LttbAggregate
from tsreduce.utils.load import AGGREGATES_GROUP, available_names, load_aggregate, load_yaml
from tsreduce.utils.time import from_micros, to_micros


def test_builtin_aggregates_are_registered():
    assert {"asap", "lttb"} <= set(available_names(AGGREGATES_GROUP))
    assert load_aggregate("lttb") is LttbAggregate
    assert load_aggregate("asap") is AsapAggregate


def test_unknown_aggregate_lists_available_names():
    with pytest.raises(ValueError, match="lttb"):
        load_aggregate("m4")


def test_load_yaml_requires_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_yaml(path)

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_yaml(empty) == {}


@pytest.mark.parametrize(
    "raw, expected",
    [
        (42, 42),
        ("  1700000000000000 ", 1_700_000_000_000_000),
        ("1970-01-01T00:00:01.500Z", 1_500_000),
        ("1970-01-02T00:00:00", 86_400_000_000),
        (datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc), 60_000_000),
        ("", None),
        (None, None),
    ],
)
def test_to_micros(raw, expected):
    assert to_micros(raw) == expected


def test_to_micros_rejects_booleans():
    with pytest.raises(TypeError):
        to_micros(True)


def test_from_micros_is_utc():
    assert from_micros(1_500_000) == datetime(1970, 1, 1, 0, 0, 1, 500_000, tzinfo=timezone.utc)

"""Tests for ledger record models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from driveaudit.codec import Behavior
from driveaudit.models import (
    DriverScore,
    GeoFix,
    ReportBatch,
    SeverityBand,
    Tag,
    classify_score,
    parse_ledger_timestamp,
)

REPORTER = "0x627306090abaB3A6e1400e9345bC60c78a8BEf57"


def _batch(flags: list[int], *, count: int | None = None) -> ReportBatch:
    n = len(flags)
    return ReportBatch.from_call_result(
        (
            n if count is None else count,
            flags,
            [REPORTER] * n,
            [1, 2, 3, 4, 5][:n] + [9] * max(0, n - 5),
            [1_700_000_000 + i for i in range(n)],
            [4071280 + i for i in range(n)],
            [-7400600 - i for i in range(n)],
        )
    )


class TestTag:
    def test_tag_id_and_display(self) -> None:
        tag = Tag(state="NY", plate_number="ABC123")
        assert tag.tag_id == "NYABC123"
        assert tag.display == "NY--ABC123"

    def test_values_kept_verbatim(self) -> None:
        tag = Tag(state=" ny", plate_number="abc ")
        assert tag.tag_id == " nyabc "


class TestReportBatch:
    def test_mixed_valid_flags(self) -> None:
        records = _batch([1, 0, 1, 1, 0]).records()
        assert [r.index for r in records] == [0, 2, 3]
        assert [r.behavior for r in records] == [Behavior.AGGRESSIVE, Behavior.PROXIMITY, Behavior.ERRATIC]

    def test_only_first_count_slots_considered(self) -> None:
        records = _batch([1, 1, 1, 1], count=2).records()
        assert [r.index for r in records] == [0, 1]

    def test_arrays_shorter_than_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReportBatch.from_call_result((3, [1, 1], [REPORTER] * 3, [1] * 3, [0] * 3, [0] * 3, [0] * 3))

    def test_wrong_arity_rejected(self) -> None:
        with pytest.raises(ValueError):
            ReportBatch.from_call_result((0, [], []))

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReportBatch.from_call_result((-1, [], [], [], [], [], []))

    def test_rows(self) -> None:
        rows = _batch([2, 0, 7]).rows()
        assert len(rows) == 2
        first = rows[0]
        assert first.index == 0
        assert first.marker == 2
        assert first.behavior_label == "Aggressive"
        assert first.coordinates == "40.7128, -74.006"
        assert first.reporter == "0x627306..."
        assert first.timestamp == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)
        assert first.cells() == ("2", "Aggressive", "40.7128, -74.006", "0x627306...", "2023-11-14 22:13:20 UTC")
        assert rows[1].index == 2
        assert rows[1].marker == 7

    def test_unmapped_behavior_row(self) -> None:
        batch = ReportBatch.from_call_result((1, [1], [REPORTER], [42], [0], [0], [0]))
        assert batch.rows()[0].behavior_label == "Unknown"

    def test_out_of_range_timestamp_rejected(self) -> None:
        batch = ReportBatch.from_call_result((1, [1], [REPORTER], [1], [2**70], [0], [0]))
        with pytest.raises(ValidationError):
            batch.rows()


class TestScore:
    @pytest.mark.parametrize(
        ("value", "band"),
        [
            (-3, SeverityBand.LOW),
            (0, SeverityBand.LOW),
            (19.9, SeverityBand.LOW),
            (20, SeverityBand.MEDIUM),
            (49.9, SeverityBand.MEDIUM),
            (50, SeverityBand.HIGH),
            (1000, SeverityBand.HIGH),
        ],
    )
    def test_bands(self, value: float, band: SeverityBand) -> None:
        assert classify_score(value) is band
        assert DriverScore(value=value).band is band

    def test_colors(self) -> None:
        assert DriverScore(value=5).color == "green"
        assert DriverScore(value=25).color == "orange"
        assert DriverScore(value=75).color == "red"

    def test_string_values_parsed(self) -> None:
        assert DriverScore(value="42").value == 42.0

    def test_rendering(self) -> None:
        assert str(DriverScore(value=20)) == "20"
        assert str(DriverScore(value=20.0)) == "20"
        assert str(DriverScore(value=19.9)) == "19.9"

    @pytest.mark.parametrize("value", ["high", float("nan"), True, None])
    def test_invalid_values(self, value: object) -> None:
        with pytest.raises(ValidationError):
            DriverScore(value=value)


class TestGeoFix:
    def test_from_degrees(self) -> None:
        fix = GeoFix.from_degrees(40.712776, -74.005974)
        assert fix.latitude_fixed == 4071278
        assert fix.longitude_fixed == -7400597
        assert fix.latitude == pytest.approx(40.71278)
        assert str(fix) == "40.71278, -74.00597"


class TestTimestamp:
    def test_seconds(self) -> None:
        assert parse_ledger_timestamp(1_700_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_milliseconds(self) -> None:
        assert parse_ledger_timestamp(1_700_000_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_none(self) -> None:
        assert parse_ledger_timestamp(None) is None

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            parse_ledger_timestamp(2**70)

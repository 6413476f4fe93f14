"""Tests for CSV export."""

import csv
import json
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest

from food_log.domain.food_logs import FoodLogEntry, FoodLogMetrics, TimeSpan
from food_log.services.export import EXPORT_COLUMNS, export_food_logs, to_export_row


def _entry(name: str, labels: list[str]) -> FoodLogEntry:
    return FoodLogEntry(
        id=uuid4(),
        name=name,
        labels=labels,
        time=TimeSpan(
            start=datetime(2022, 2, 2, 8, 30, 15, 123456, tzinfo=UTC),
            end=datetime(2022, 2, 2, 9, tzinfo=UTC),
        ),
        metrics=FoodLogMetrics(calories=812.25),
    )


def test_export_quotes_awkward_text(tmp_path: Path) -> None:
    entry = _entry('Toast, "buttered"\nwith jam', ["a,b", 'quote "q"', ""])

    path, count = export_food_logs([entry], tmp_path)

    assert count == 1
    assert path.parent == tmp_path
    with path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 1
    assert rows[0]["name"] == entry.name
    assert json.loads(rows[0]["labels"]) == entry.labels
    assert json.loads(rows[0]["metrics"]) == {"calories": 812.25}
    assert datetime.fromisoformat(rows[0]["timeStart"]) == entry.time.start


def test_export_row_uses_utc_iso_timestamps() -> None:
    entry = _entry("Dinner", [])
    plus_five = timezone(timedelta(hours=5))
    shifted = FoodLogEntry(
        id=entry.id,
        name=entry.name,
        labels=entry.labels,
        time=TimeSpan(
            start=datetime(2022, 2, 2, 13, tzinfo=plus_five),
            end=datetime(2022, 2, 2, 14, tzinfo=plus_five),
        ),
        metrics=entry.metrics,
    )

    row = to_export_row(shifted)

    assert list(row) == EXPORT_COLUMNS
    assert row["id"] == str(entry.id)
    assert row["labels"] == "[]"
    assert row["timeStart"] == "2022-02-02T08:00:00+00:00"
    assert row["timeEnd"] == "2022-02-02T09:00:00+00:00"


def test_export_consumes_entries_lazily(tmp_path: Path) -> None:
    produced: list[int] = []

    def entries() -> Iterator[FoodLogEntry]:
        for index in range(3):
            produced.append(index)
            yield _entry(f"Snack {index}", [str(index)])

    path, count = export_food_logs(entries(), tmp_path)

    assert produced == [0, 1, 2]
    assert count == 3
    assert len(path.read_text(encoding="utf-8").splitlines()) == 4


def test_export_removes_partial_file_on_failure(tmp_path: Path) -> None:
    def entries() -> Iterator[FoodLogEntry]:
        yield _entry("First", [])
        raise RuntimeError("storage went away")

    with pytest.raises(RuntimeError, match="storage went away"):
        export_food_logs(entries(), tmp_path)

    assert list(tmp_path.iterdir()) == []

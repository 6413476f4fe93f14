"""CSV export of food log entries."""

import csv
import json
import tempfile
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from food_log.domain.food_logs import FoodLogEntry, whole_calories

EXPORT_COLUMNS = ["id", "name", "labels", "timeStart", "timeEnd", "metrics"]


def export_food_logs(
    entries: Iterable[FoodLogEntry], directory: str | Path | None = None
) -> tuple[Path, int]:
    """Write entries to a new CSV file and return its path and row count.

    Rows are written as the iterable yields them, so a repository cursor can
    feed the file without the whole result set in memory. `labels` and
    `metrics` cells hold JSON text and timestamps are UTC ISO-8601 strings.
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        prefix="food-logs-",
        suffix=".csv",
        dir=directory,
        delete=False,
    ) as handle:
        path = Path(handle.name)
        try:
            writer = csv.DictWriter(handle, fieldnames=EXPORT_COLUMNS)
            writer.writeheader()
            count = 0
            for entry in entries:
                writer.writerow(to_export_row(entry))
                count += 1
        except Exception:
            handle.close()
            path.unlink(missing_ok=True)
            raise
    return path, count


def to_export_row(entry: FoodLogEntry) -> dict[str, str]:
    """Return the CSV cells for a single entry."""
    return {
        "id": str(entry.id),
        "name": entry.name,
        "labels": json.dumps(list(entry.labels)),
        "timeStart": _isoformat(entry.time.start),
        "timeEnd": _isoformat(entry.time.end),
        "metrics": json.dumps({"calories": whole_calories(entry.metrics.calories)}),
    }


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()

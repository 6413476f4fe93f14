"""Shared test fixtures."""

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from food_log.adapters.in_memory_food_log_repository import InMemoryFoodLogRepository
from food_log.adapters.sql_food_log_repository import SqlFoodLogRepository
from food_log.config import Settings
from food_log.containers import AppContainer
from food_log.services.food_logs import FoodLogRepository, FoodLogService

STORAGE_BACKENDS = ["memory", "sql"]


def make_payload(
    name: str = "My Food Log",
    labels: list[str] | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    calories: object = 500,
) -> dict[str, object]:
    """Build a create payload shaped like decoded JSON."""
    return {
        "name": name,
        "labels": ["Some Label", "Some other label"] if labels is None else labels,
        "time": {
            "start": start or datetime(1999, 11, 10, tzinfo=UTC),
            "end": end or datetime(1999, 11, 11, tzinfo=UTC),
        },
        "metrics": {"calories": calories},
    }


def nov_1999(day: int) -> datetime:
    return datetime(1999, 11, day, tzinfo=UTC)


@pytest.fixture(params=STORAGE_BACKENDS)
def repository(
    request: pytest.FixtureRequest, tmp_path: Path
) -> Iterator[FoodLogRepository]:
    if request.param == "memory":
        yield InMemoryFoodLogRepository()
        return
    database_url = f"sqlite:///{tmp_path / 'food_logs.db'}"
    sql_repository = SqlFoodLogRepository.create(database_url)
    yield sql_repository
    sql_repository.close()


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "exports"
    directory.mkdir()
    return directory


@pytest.fixture
def service(repository: FoodLogRepository, export_dir: Path) -> FoodLogService:
    return FoodLogService(repository=repository, export_dir=export_dir)


@pytest.fixture
def settings(export_dir: Path) -> Settings:
    return Settings(storage_backend="memory", export_dir=str(export_dir))


@pytest.fixture
def container(settings: Settings, export_dir: Path) -> AppContainer:
    food_log_service = FoodLogService(
        repository=InMemoryFoodLogRepository(),
        export_dir=export_dir,
        export_batch_size=settings.export_batch_size,
    )

    def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )

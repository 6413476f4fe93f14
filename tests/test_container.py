"""Tests for container wiring."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from food_log.adapters.in_memory_food_log_repository import InMemoryFoodLogRepository
from food_log.adapters.sql_food_log_repository import SqlFoodLogRepository
from food_log.config import Settings, normalize_backend
from food_log.containers import build_container


def test_build_container_defaults_to_memory(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.food_log_service.repository, InMemoryFoodLogRepository)
    assert container.food_log_service.export_dir == settings.export_dir
    container.close_resources()


def test_build_container_with_sql_backend(tmp_path: Path) -> None:
    settings = Settings(
        storage_backend="sql",
        database_url=f"sqlite:///{tmp_path / 'container.db'}",
        export_batch_size=50,
    )

    container = build_container(settings)

    assert isinstance(container.food_log_service.repository, SqlFoodLogRepository)
    assert container.food_log_service.export_batch_size == 50
    container.close_resources()


def test_build_container_requires_supabase_credentials() -> None:
    settings = Settings(storage_backend="supabase")

    with pytest.raises(ValueError, match="supabase_url"):
        build_container(settings)


def test_normalize_backend() -> None:
    assert normalize_backend(" SQL ") == "sql"
    with pytest.raises(ValueError, match="Unknown storage backend"):
        normalize_backend("redis")


def test_settings_reject_non_positive_export_batch_size() -> None:
    with pytest.raises(PydanticValidationError, match="export_batch_size"):
        Settings(export_batch_size=0)

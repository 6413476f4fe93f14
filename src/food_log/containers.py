"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from supabase import create_client

from food_log.adapters.in_memory_food_log_repository import InMemoryFoodLogRepository
from food_log.adapters.sql_food_log_repository import SqlFoodLogRepository
from food_log.adapters.supabase_food_log_repository import SupabaseFoodLogRepository
from food_log.config import Settings, normalize_backend
from food_log.services.food_logs import FoodLogRepository, FoodLogService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_log_service: FoodLogService
    close_resources: Callable[[], None]


def build_food_log_repository(settings: Settings) -> FoodLogRepository:
    """Create the repository for the configured storage backend."""
    backend = normalize_backend(settings.storage_backend)
    if backend == "sql":
        return SqlFoodLogRepository.create(settings.database_url)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseFoodLogRepository(client)
    return InMemoryFoodLogRepository()


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    repository = build_food_log_repository(resolved_settings)
    food_log_service = FoodLogService(
        repository=repository,
        export_dir=resolved_settings.export_dir,
        export_batch_size=resolved_settings.export_batch_size,
    )

    def close_resources() -> None:
        if isinstance(repository, SqlFoodLogRepository):
            repository.close()

    return AppContainer(
        settings=resolved_settings,
        food_log_service=food_log_service,
        close_resources=close_resources,
    )

"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import Body, FastAPI, Request, status
from fastapi.responses import FileResponse, JSONResponse
from starlette.background import BackgroundTask

from food_log.app_logging import configure_logging
from food_log.containers import AppContainer
from food_log.domain.food_logs import FoodLogEntry
from food_log.domain.results import NotFoundError, ValidationError
from food_log.services.food_logs import FoodLogService


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.close_resources()
        logger.info("Released storage resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/users/{user_id}/food-logs", status_code=status.HTTP_201_CREATED)
    def store_food_log(
        user_id: str, request: Request, payload: dict[str, Any] = Body(...)
    ) -> Any:
        """Create a food log entry for the user."""
        result = _service(request).store_food_log(user_id, payload)
        if result.is_err():
            return _error_response(result.unwrap_err())
        return {"id": str(result.unwrap())}

    @app.get("/users/{user_id}/food-logs")
    def query_food_logs(
        user_id: str, start: datetime, end: datetime, request: Request
    ) -> Any:
        """Return entries overlapping the [start, end] window."""
        result = _service(request).query_food_logs(user_id, start, end)
        if result.is_err():
            return _error_response(result.unwrap_err())
        return {"food_logs": [_serialize_entry(entry) for entry in result.unwrap()]}

    @app.get("/users/{user_id}/food-logs/export")
    def export_food_logs(user_id: str, request: Request) -> FileResponse:
        """Download every entry for the user as CSV."""
        path = _service(request).bulk_export_food_logs(user_id).unwrap()
        return FileResponse(
            path,
            media_type="text/csv",
            filename=f"food-logs-{user_id}.csv",
            background=BackgroundTask(path.unlink, missing_ok=True),
        )

    @app.delete("/users/{user_id}/food-logs")
    def purge_food_logs(user_id: str, request: Request) -> dict[str, bool]:
        """Delete every entry for the user."""
        return {"purged": _service(request).purge_food_logs(user_id).unwrap()}

    @app.get("/users/{user_id}/food-logs/{food_log_id}")
    def retrieve_food_log(user_id: str, food_log_id: UUID, request: Request) -> Any:
        """Return a single entry."""
        result = _service(request).retrieve_food_log(user_id, food_log_id)
        if result.is_err():
            return _error_response(result.unwrap_err())
        return _serialize_entry(result.unwrap())

    @app.put("/users/{user_id}/food-logs/{food_log_id}")
    def edit_food_log(
        user_id: str,
        food_log_id: UUID,
        request: Request,
        payload: dict[str, Any] = Body(...),
    ) -> Any:
        """Replace an entry in full; the path carries the entry id."""
        result = _service(request).edit_food_log(
            user_id, {**payload, "id": str(food_log_id)}
        )
        if result.is_err():
            return _error_response(result.unwrap_err())
        return _serialize_entry(result.unwrap())

    @app.delete("/users/{user_id}/food-logs/{food_log_id}")
    def delete_food_log(
        user_id: str, food_log_id: UUID, request: Request
    ) -> dict[str, bool]:
        """Delete an entry; deleting a missing entry also succeeds."""
        result = _service(request).delete_food_log(user_id, food_log_id)
        return {"deleted": result.unwrap()}

    return app


def _service(request: Request) -> FoodLogService:
    container: AppContainer = request.app.state.container
    return container.food_log_service


def _error_response(error: object) -> JSONResponse:
    if isinstance(error, NotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": error.message},
        )
    if isinstance(error, ValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": error.message, "issues": list(error.issues)},
        )
    raise TypeError(f"Unexpected error value: {error!r}")


def _serialize_entry(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "name": entry.name,
        "labels": list(entry.labels),
        "time": {
            "start": entry.time.start.isoformat(),
            "end": entry.time.end.isoformat(),
        },
        "metrics": {"calories": entry.metrics.calories},
    }

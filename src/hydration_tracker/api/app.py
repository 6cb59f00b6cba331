"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from hydration_tracker.api.models import IntakeCommandResponse, IntakeSnapshotResponse
from hydration_tracker.app_logging import configure_logging
from hydration_tracker.containers import AppContainer
from hydration_tracker.services.intake import AppStateController


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state = await app.state.container.controller.load()
        logger.info("Intake ready for %s: %s ml", state.current_day, state.total_ml)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/intake")
    async def get_intake(request: Request) -> IntakeSnapshotResponse:
        """Return today's intake."""
        controller = _controller(request)
        controller.roll_over_if_needed()
        return IntakeSnapshotResponse.from_snapshot(controller.snapshot())

    @app.post("/intake/glasses")
    async def add_glass(request: Request) -> IntakeCommandResponse:
        """Add one glass to today's intake."""
        controller = _controller(request)
        celebrated: list[bool] = []
        unsubscribe = controller.on_celebrate(lambda _state: celebrated.append(True))
        try:
            controller.add_glass()
        finally:
            unsubscribe()
        return IntakeCommandResponse(
            intake=IntakeSnapshotResponse.from_snapshot(controller.snapshot()),
            celebrated=bool(celebrated),
        )

    @app.delete("/intake/glasses")
    async def remove_glass(request: Request) -> IntakeCommandResponse:
        """Remove one glass from today's intake."""
        controller = _controller(request)
        controller.remove_glass()
        return IntakeCommandResponse(
            intake=IntakeSnapshotResponse.from_snapshot(controller.snapshot())
        )

    return app


def _controller(request: Request) -> AppStateController:
    container: AppContainer = request.app.state.container
    return container.controller

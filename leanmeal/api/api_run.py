import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from leanmeal.api.api_tools import ToolService
from leanmeal.api.routes import tools
from leanmeal.utilities.errors import (
    LeanMealError,
    MealCompositionError,
    MenuPersistenceError,
    MenuStoreUnavailableError,
)

# Logging
logger = logging.getLogger("leanmeal")


def _format_validation_errors(errors) -> str:
    lines = []
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        lines.append(f"- {loc or 'input'}: {err.get('msg')}")
    return "Invalid arguments:\n" + "\n".join(lines)


def _register_error_handlers(app: FastAPI):
    @app.exception_handler(ValidationError)
    async def _invalid_arguments(request: Request, exc: ValidationError):
        return PlainTextResponse(_format_validation_errors(exc.errors()), status_code=422)

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        return PlainTextResponse(_format_validation_errors(exc.errors()), status_code=422)

    @app.exception_handler(MenuPersistenceError)
    async def _persistence_failed(request: Request, exc: MenuPersistenceError):
        logger.error("Menu store write failed: %s", exc)
        return PlainTextResponse(
            f"Error: {exc}. The change was applied in memory but may not survive a restart.",
            status_code=500,
        )

    @app.exception_handler(MenuStoreUnavailableError)
    async def _store_missing(request: Request, exc: MenuStoreUnavailableError):
        return PlainTextResponse(f"Error: {exc}", status_code=503)

    @app.exception_handler(MealCompositionError)
    async def _composition_failed(request: Request, exc: MealCompositionError):
        logger.warning("Meal composition failed: %s", exc)
        return PlainTextResponse(f"Error: {exc}", status_code=422)

    @app.exception_handler(LeanMealError)
    async def _other_error(request: Request, exc: LeanMealError):
        logger.error("Tool call failed: %s", exc)
        return PlainTextResponse(f"Error: {exc}", status_code=500)


def create_app(service: Optional[ToolService] = None) -> FastAPI:
    """Build the API. Without an explicit service, one is built from configuration."""
    app = FastAPI(title="Low-fat High-protein Meal Planner", version="1.0.0")
    app.state.tool_service = service or ToolService.from_config()
    app.include_router(tools.router)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        svc: ToolService = app.state.tool_service
        return {
            "status": "ok",
            "foods": len(svc.table),
            "menus": svc.store.count() if svc.store is not None else None,
        }

    return app

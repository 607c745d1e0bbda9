"""
SnapDish API
In-memory reference server for lobby sessions.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.api.routers import api_router
from backend.lobby import LobbyStore
from backend.recipe_service import RecipeService, VisionUnavailable
from snapdish.errors import InvalidInput, NotFound
from snapdish.schemas import HealthResponse


def create_app(
    store: Optional[LobbyStore] = None, recipe_service: Optional[RecipeService] = None
) -> FastAPI:
    app = FastAPI(
        title="SnapDish API",
        description="Lobbies, shared ingredients, recipe generation and voting.",
        version="0.1.0",
    )
    app.state.lobby_store = store or LobbyStore()
    app.state.recipe_service = recipe_service or RecipeService(app.state.lobby_store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(VisionUnavailable)
    async def vision_unavailable_handler(request: Request, exc: VisionUnavailable):
        return JSONResponse(status_code=501, content={"detail": str(exc)})

    @app.get("/health", response_model=HealthResponse, tags=["Root"])
    async def health():
        return HealthResponse(status="ok")

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from snapdish.config import Settings, configure_logging

    settings = Settings()
    configure_logging(settings)
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=3000,
        log_level=settings.log_level.lower(),
    )

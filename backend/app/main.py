from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .coaching import router as coaching_router
from .config import settings
from .logging_config import setup_logging
from .progress import router as progress_router


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(progress_router)
    app.include_router(coaching_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

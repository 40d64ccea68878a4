from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from readflow.config import ReaderConfig
from readflow.logging_config import setup_logging

from api.routes.documents import router as documents_router
from api.routes.reading import router as reading_router


def create_app() -> FastAPI:
    setup_logging(ReaderConfig.from_env().log_level)

    app = FastAPI(title="Readflow API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(documents_router)
    app.include_router(reading_router)

    @app.get("/healthz")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()

"""
FML API Server

Usage:
    uvicorn fml.api.app:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fml import __version__
from fml.api.routes import router
from fml.config import settings


def create_app() -> FastAPI:
    app = FastAPI(title="FML", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()

"""FastAPI app factory."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from breakapart import __version__
from breakapart.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="SVG Break Apart",
        description="Decomposes embedded SVG images into native drawing shapes",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all action modules to trigger registration
    _register_actions()

    from breakapart.api.router import api_router

    app.include_router(api_router)

    return app


def _register_actions() -> None:
    """Import every module under breakapart.actions so `register` calls fire."""
    import importlib
    import pkgutil

    package = importlib.import_module("breakapart.actions")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"breakapart.actions.{module_name}")


app = create_app()

"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from iconsplit.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.iconsplit_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Iconsplit",
        description="SVG sprite-sheet splitter — extracts standalone icons from icon sheets",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import strategy modules to trigger registration
    _register_strategies()

    from iconsplit.api.router import api_router

    app.include_router(api_router)

    return app


def _register_strategies() -> None:
    """Import the strategy module so @strategy decorators fire."""
    import importlib

    importlib.import_module("iconsplit.engine.strategies")


app = create_app()

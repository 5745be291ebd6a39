# src/tenebra/api/server.py
from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from tenebra.api.cache import SearchCache
from tenebra.api.routes import router as api_router
from tenebra.settings import Cfg

logger = logging.getLogger(__name__)


def create_app(cache: SearchCache) -> FastAPI:
    app = FastAPI(title="tenebra", version="0.1.0")
    app.state.cache = cache
    app.include_router(api_router)
    return app


def run_server(cfg: Cfg) -> None:
    cache = SearchCache(cfg.merged_output)
    cache.load()

    app = create_app(cache)
    logger.info("[API] listening on %s:%d", cfg.host, cfg.port)
    uvicorn.run(app, host=cfg.host, port=cfg.port)

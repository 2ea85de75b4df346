"""Homecook API service entrypoint."""

import asyncio
import logging
import os

from fastapi import FastAPI

from services.api.app.container import build_container
from services.api.app.db.init_db import init_db
from services.api.app.routers.auth import router as auth_router
from services.api.app.routers.cart import router as cart_router
from services.api.app.routers.cook_spots import router as cook_spots_router
from services.api.app.routers.location import router as location_router
from services.api.app.routers.order import router as order_router
from services.api.app.services.catalog_sync import loop_dispatcher


def _configure_logging() -> None:
    level = os.getenv("HOMECOOK_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


_configure_logging()

app = FastAPI(title="Homecook API")

app.include_router(cook_spots_router)
app.include_router(location_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(auth_router)


@app.on_event("startup")
async def _startup() -> None:
    init_db()
    container = build_container(dispatcher=loop_dispatcher(asyncio.get_running_loop()))
    container.start()
    app.state.container = container


@app.on_event("shutdown")
async def _shutdown() -> None:
    container = getattr(app.state, "container", None)
    if container is not None:
        container.close()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

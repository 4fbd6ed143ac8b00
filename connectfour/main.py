"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

import connectfour.runtime as runtime
from connectfour.api.static import router as static_router
from connectfour.ws.routers import router as ws_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    runtime.startup()
    yield
    runtime.shutdown()


app = FastAPI(title="connectfour", lifespan=lifespan)


@app.get("/healthz")
def healthz() -> dict[str, object]:
    """Liveness probe with the number of live rooms."""
    return {"status": "ok", "rooms": len(runtime.room_registry)}


app.include_router(ws_router)
# catch-all file route goes last
app.include_router(static_router)


__all__ = [
    "app",
    "healthz",
    "lifespan",
]

"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET    /v1/health
    GET    /v1/days
    POST   /v1/days
    PUT    /v1/days/{day_id}
    DELETE /v1/days/{day_id}
    POST   /v1/days/{day_id}/activities
    GET    /v1/days/{day_id}/schedule
    GET    /v1/reservations/upcoming
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import days, health
from db.selector import reset_backend


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    days.get_coordinator()
    yield
    days.shutdown_coordinator()
    reset_backend()


app = FastAPI(
    title="Itinerary Sync API",
    version="1.1.0",
    description=(
        "Day-by-day travel itinerary store with optimistic writes. "
        "Syncs through Redis when configured, otherwise a local file store."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Allow the web frontend (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/v1", tags=["Health"])
app.include_router(days.router,   prefix="/v1", tags=["Days"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)

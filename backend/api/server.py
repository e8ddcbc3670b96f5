"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET    /v1/health
    POST   /v1/programs/generate
    GET    /v1/programs/{program_id}
    GET    /v1/programs/{program_id}/stats
    PUT    /v1/programs/{program_id}/options/{option_id}/select
    PUT    /v1/programs/{program_id}/activities/{group_id}/select
    POST   /v1/programs/{program_id}/options/{option_id}/regenerate
    PUT    /v1/programs/{program_id}/activities/{group_id}/switch-type
    PUT    /v1/programs/{program_id}/activities/{group_id}/rest
    PUT    /v1/programs/{program_id}/activities/{group_id}/time
    PUT    /v1/programs/{program_id}/activities/{group_id}/notes
    PUT    /v1/programs/{program_id}/title
    PUT    /v1/programs/{program_id}/days/{day_number}/title
    POST   /v1/programs/{program_id}/validate
    POST   /v1/programs/{program_id}/exclude
    GET    /v1/exclusions/{user_id}
    DELETE /v1/exclusions/{user_id}
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from api.routes import exclusions, health, programs
from modules.errors import ConciergeError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ConciergeError.code → HTTP status
ERROR_STATUS: dict[str, int] = {
    "NO_ALTERNATIVES":   400,
    "NO_VENUES":         400,
    "INVALID_SELECTION": 400,
    "NOT_FOUND":         404,
    "INVALID_INPUT":     422,
}

app = FastAPI(
    title="Concierge Itinerary API",
    version="1.0.0",
    description=(
        "Luxury concierge itinerary engine: builds day-by-day programs from "
        "curated venue catalogs and applies concierge edits."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the concierge dashboard (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConciergeError)
async def concierge_error_handler(request: Request, exc: ConciergeError) -> JSONResponse:
    return JSONResponse(status_code=ERROR_STATUS.get(exc.code, 400), content=exc.to_dict())


app.include_router(health.router,     prefix="/v1",            tags=["Health"])
app.include_router(programs.router,   prefix="/v1/programs",   tags=["Programs"])
app.include_router(exclusions.router, prefix="/v1/exclusions", tags=["Exclusions"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)

"""
===========================================================================
main.py — Application Entry Point
===========================================================================

PURPOSE:
    Builds the FastAPI app and plugs in all the routers.

    Run it with:
        python main.py
    or
        uvicorn main:app --reload

WHAT LIVES WHERE:
    config_loader.py     — settings from config.json
    database.py          — where locations/queries/conversations are kept
    extraction.py        — prompt → years, topics, aggregation
    responses.py         — topics → canned HTML answer
    visualization.py     — topics → chart data
    geocoding.py         — address → coordinates (static table)
    routes/              — the HTTP endpoints
===========================================================================
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config_loader import config
from database import storage
from routes import conversation_routes, location_routes, query_routes

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=config.get("log_level", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# The app
# ---------------------------------------------------------------------------
app = FastAPI(title="GeoChat")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("cors_origins", ["*"]),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(location_routes.router)
app.include_router(query_routes.router)
app.include_router(conversation_routes.router)


@app.get("/health")
async def health():
    """Liveness check; also reports which storage backend is active."""
    return {"status": "ok", "storage": storage.backend_name}


logger.info("GeoChat ready (storage backend: %s)", storage.backend_name)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""
===========================================================================
routes/query_routes.py — Prompt Processing Routes
===========================================================================

PURPOSE:
    This file contains the HEART of the application — the route that
    takes a prompt and answers it.

    - POST /api/queries                 — process a prompt, save & return it
    - GET  /api/queries/{id}            — fetch one processed prompt
    - GET  /api/locations/{id}/queries  — chat history for a location
    - GET  /api/suggestions             — example prompts for the UI tags

HOW THE QUERY FLOW WORKS:
    ┌─────────────┐     ┌──────────────┐     ┌──────────────────┐
    │ User sends   │ ──→ │ Look up the   │ ──→ │ analyze_prompt   │
    │ a prompt     │     │ location name │     │ (params, HTML,   │
    └─────────────┘     └──────────────┘     │  chart)          │
                                              └────────┬─────────┘
    ┌─────────────┐     ┌──────────────┐              │
    │ Return the  │ ←── │ Save as a     │ ←────────────┘
    │ Query       │     │ Query record  │
    └─────────────┘     └──────────────┘

USED BY:
    main.py (included via the router)
===========================================================================
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from database import RecordStore, get_storage
from responses import analyze_prompt, resolve_location_name
from schemas import Query, QueryCreate, QueryRequest, Suggestion

logger = logging.getLogger(__name__)

router = APIRouter()

# The clickable tags shown above the chat box
SUGGESTIONS = [
    Suggestion(tag="rainfall", sentence="Show me rainfall patterns from 2001 to 2020"),
    Suggestion(tag="temperature", sentence="What are the temperature trends over the last decade?"),
    Suggestion(tag="population", sentence="Analyze population density changes in this area"),
    Suggestion(tag="weather", sentence="Compare monthly weather averages"),
    Suggestion(tag="climate", sentence="How has climate changed in recent years?"),
    Suggestion(tag="seasonal", sentence="Show seasonal weather variations"),
    Suggestion(tag="demographics", sentence="What are the demographic trends?"),
    Suggestion(tag="economy", sentence="Analyze economic indicators for this region"),
]


# ===========================================================================
# ROUTE 1: Process a prompt
# ===========================================================================

@router.post("/api/queries", response_model=Query)
async def create_query(request: QueryRequest, storage: RecordStore = Depends(get_storage)):
    """
    Answer a prompt about a location.

    Example JSON body:
        {"prompt": "Show me rainfall patterns from 2001 to 2020", "locationId": 1}

    STEP-BY-STEP:
    1. Reject the request if the prompt or location id is missing
    2. Find the location's name (or "the selected location")
    3. Extract parameters, pick the HTML response, build the chart
    4. Save everything as one Query record and return it
    """
    if not request.prompt or not request.location_id:
        raise HTTPException(status_code=400, detail="Prompt and locationId are required")

    location_name = resolve_location_name(storage, request.location_id)
    result = analyze_prompt(request.prompt, location_name)

    query = storage.create_query(QueryCreate(
        location_id=request.location_id,
        prompt=request.prompt,
        extracted_params=result.extracted_params.to_record(),
        response=result.response,
        visualization_data=result.visualization_data
    ))
    logger.info(
        "Stored query %d for location %d (dataTypes=%s)",
        query.id, query.location_id, query.extracted_params.get("dataTypes")
    )
    return query


# ===========================================================================
# ROUTE 2: Fetch one query
# ===========================================================================

@router.get("/api/queries/{query_id}", response_model=Query)
async def get_query(query_id: int, storage: RecordStore = Depends(get_storage)):
    query = storage.get_query(query_id)
    if query is None:
        raise HTTPException(status_code=404, detail="Query not found")
    return query


# ===========================================================================
# ROUTE 3: Chat history for a location
# ===========================================================================

@router.get("/api/locations/{location_id}/queries", response_model=List[Query])
async def get_location_queries(location_id: int, storage: RecordStore = Depends(get_storage)):
    """
    Every query asked about one location. An unknown location id just
    returns an empty list, the same as a location nobody asked about yet.
    """
    return storage.get_queries_by_location(location_id)


# ===========================================================================
# ROUTE 4: Suggestion tags
# ===========================================================================

@router.get("/api/suggestions", response_model=List[Suggestion])
async def get_suggestions():
    return SUGGESTIONS

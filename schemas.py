"""
===========================================================================
schemas.py — Pydantic Data Models (Records & Request/Response Schemas)
===========================================================================

PURPOSE:
    This file defines the "shape" of every piece of data the app handles:
    - The three stored records: Location, Query, Conversation
    - The transient ExtractedParameters pulled out of a prompt
    - The chart descriptor handed to the frontend's charting code
    - The request bodies the API accepts

NAMING:
    Python attributes are snake_case (location_id), but the JSON that
    goes over the wire is camelCase (locationId) — that's what the
    browser client expects. The 'alias_generator' below does the
    translation in both directions, and 'populate_by_name' lets our own
    code keep using the snake_case names.

USED BY:
    database.py, extraction.py, responses.py, visualization.py, routes/*
===========================================================================
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LocationType = Literal["auto", "map", "manual"]
DataType = Literal["temperature", "rainfall", "population", "demographics"]


class CamelModel(BaseModel):
    """Base class: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===========================================================================
# SECTION 1: Stored Records
# ===========================================================================

class LocationCreate(CamelModel):
    """
    Schema for POST /api/locations.

    Example JSON:
        {
            "name": "San Francisco",
            "latitude": "37.7749",
            "longitude": "-122.4194",
            "type": "manual"
        }

    Fields:
        name      (str)           : Display name shown in the chat header
        latitude  (str, optional) : Decimal degrees, kept as a string
        longitude (str, optional) : Decimal degrees, kept as a string
        type      (str)           : How the location was picked:
                                     "auto"   = browser geolocation
                                     "map"    = clicked on the map
                                     "manual" = typed in by the user
    """
    name: str = Field(min_length=1)
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    type: LocationType


class Location(LocationCreate):
    """A stored location. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: int
    created_at: datetime


class ChartSeries(CamelModel):
    """One line/bar series of a chart."""
    label: str
    values: List[float]
    border_color: Optional[str] = None
    background_color: Optional[str] = None


class ChartDescriptor(CamelModel):
    """
    Chart data handed to the frontend's charting component.

    Example JSON:
        {
            "type": "bar",
            "labels": ["Jan", "Feb", ..., "Dec"],
            "series": [{"label": "Rainfall (inches)", "values": [4.5, ...]}]
        }
    """
    type: Literal["line", "bar"]
    labels: List[str]
    series: List[ChartSeries]


class QueryCreate(CamelModel):
    """Everything needed to store a processed prompt (the store adds id/createdAt)."""
    location_id: int
    prompt: str
    extracted_params: Dict[str, Any] = Field(default_factory=dict)
    response: Optional[str] = None
    visualization_data: Optional[ChartDescriptor] = None


class Query(QueryCreate):
    """A stored, processed prompt. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: int
    created_at: datetime


class ConversationCreate(CamelModel):
    """
    Schema for POST /api/conversations.

    Example JSON:
        {"locationId": 1, "sessionId": "k3j9x0a2b"}

    The session id is an opaque string made up by the browser; it only
    groups queries together, there is no login behind it.
    """
    location_id: int
    session_id: str = Field(min_length=1)


class Conversation(ConversationCreate):
    """A stored conversation. Never mutated."""
    model_config = ConfigDict(frozen=True)

    id: int
    created_at: datetime


# ===========================================================================
# SECTION 2: Prompt Analysis
# ===========================================================================

class ExtractedParameters(CamelModel):
    """
    Parameters pulled out of a prompt by keyword matching.

    A field that is None means "nothing detected". When the record is
    persisted, those fields are left out entirely (see to_record).
    """
    start_year: Optional[str] = None
    end_year: Optional[str] = None
    data_types: Optional[List[DataType]] = None
    aggregation: Optional[Literal["average"]] = None
    timeframe: Optional[Literal["monthly", "yearly"]] = None

    def to_record(self) -> Dict[str, Any]:
        """camelCase dict with the undetected fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AnalysisResult(CamelModel):
    """What the analysis core produces for one prompt."""
    extracted_params: ExtractedParameters
    response: str
    visualization_data: Optional[ChartDescriptor] = None


# ===========================================================================
# SECTION 3: API Request Bodies
# ===========================================================================

class QueryRequest(CamelModel):
    """
    Schema for POST /api/queries.

    Example JSON:
        {"prompt": "Show me rainfall patterns from 2001 to 2020", "locationId": 1}
    """
    prompt: Optional[str] = None
    location_id: Optional[int] = None


class GeocodeRequest(BaseModel):
    """Schema for POST /api/geocode: {"address": "London, UK"}"""
    address: Optional[str] = None


class GeocodeResult(BaseModel):
    name: str
    lat: str
    lng: str


class Suggestion(BaseModel):
    tag: str
    sentence: str

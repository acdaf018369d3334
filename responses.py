"""
===========================================================================
responses.py — Canned Analysis Responses
===========================================================================

PURPOSE:
    Pick one of three HTML fragments for a prompt, fill in the location
    name (and years, for weather), and bundle it with the extracted
    parameters and chart data.

    ┌──────────────┐     ┌────────────────────┐     ┌─────────────────┐
    │ prompt       │ ──→ │ extract_parameters │ ──→ │ select_response │
    └──────────────┘     └─────────┬──────────┘     └─────────────────┘
                                   │
                                   └──────────────→ build_visualization

WHICH FRAGMENT? (first match wins)
    1. dataTypes has "temperature" or "rainfall"     → weather.html
    2. dataTypes has "population" or "demographics"  → demographics.html
    3. anything else                                 → generic.html

⚠ SECURITY NOTE:
    generic.html embeds the user's prompt VERBATIM (autoescape is off).
    Whoever puts this HTML into a page must encode it first.

USED BY:
    routes/query_routes.py
===========================================================================
"""

import logging
import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from extraction import extract_parameters
from schemas import AnalysisResult, ExtractedParameters
from visualization import build_visualization

logger = logging.getLogger(__name__)

FALLBACK_LOCATION_NAME = "the selected location"

FRAGMENTS_DIR = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "templates", "fragments"
)

# Fragments are loaded once; rendering is read-only so it is safe to share.
fragments = Environment(
    loader=FileSystemLoader(FRAGMENTS_DIR),
    autoescape=False,
    keep_trailing_newline=True
)


def resolve_location_name(storage, location_id: int) -> str:
    """Name of the stored location, or "the selected location" if unknown."""
    location = storage.get_location(location_id)
    if location is None:
        return FALLBACK_LOCATION_NAME
    return location.name


def select_response(prompt: str, params: ExtractedParameters, location_name: str) -> str:
    """
    Render the HTML fragment for this prompt.

    Only params.data_types decides WHICH fragment is used; the years only
    change the weather fragment's opening sentence.
    """
    if not isinstance(prompt, str):
        raise TypeError(f"prompt must be a string, got {type(prompt).__name__}")
    if not isinstance(location_name, str):
        raise TypeError(f"location_name must be a string, got {type(location_name).__name__}")

    data_types = params.data_types or []

    if "temperature" in data_types or "rainfall" in data_types:
        template_name = "weather.html"
    elif "population" in data_types or "demographics" in data_types:
        template_name = "demographics.html"
    else:
        template_name = "generic.html"

    return fragments.get_template(template_name).render(
        location_name=location_name,
        params=params,
        prompt=prompt
    )


def analyze_prompt(prompt: str, location_name: str,
                   current_year: Optional[int] = None) -> AnalysisResult:
    """
    Run the full analysis for one prompt.

    Args:
        prompt        : What the user typed
        location_name : Name to show in the response heading
        current_year  : Passed to extract_parameters (pin it in tests)

    Returns:
        AnalysisResult: extracted parameters, HTML response, optional chart
    """
    params = extract_parameters(prompt, current_year=current_year)
    logger.debug("Extracted parameters for %r: %s", prompt, params.to_record())

    return AnalysisResult(
        extracted_params=params,
        response=select_response(prompt, params, location_name),
        visualization_data=build_visualization(params)
    )

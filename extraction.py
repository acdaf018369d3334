"""
===========================================================================
extraction.py — Prompt Parameter Extraction
===========================================================================

PURPOSE:
    Turn a free-text prompt like
        "Show me average rainfall from 2001 to 2020"
    into a small structured record:
        startYear="2001", endYear="2020", dataTypes=["rainfall"],
        aggregation="average"

HOW IT WORKS:
    Plain keyword matching — no language model involved. The checks run
    in a fixed order and later topic checks OVERWRITE earlier ones,
    except the rainfall check which APPENDS. So:
        "temperature and rainfall"    → ["temperature", "rainfall"]
        "temperature and population"  → ["population"]
    The API's clients depend on this exact behaviour, so keep the order.

USED BY:
    responses.py (analyze_prompt)
===========================================================================
"""

import re
from datetime import datetime
from typing import Optional

from schemas import ExtractedParameters

# A 4-digit year, optionally followed by "to" or "-" and a second year.
# Digits are 0-9 only; \s still matches Unicode spaces such as NBSP.
YEAR_RANGE_PATTERN = re.compile(r"([0-9]{4})\s*(?:to|-)?\s*([0-9]{4})?")


def extract_parameters(prompt: str, current_year: Optional[int] = None) -> ExtractedParameters:
    """
    Extract years, topics and aggregation hints from a prompt.

    Args:
        prompt       : Any string, including "" — this never fails on text.
        current_year : Used as endYear when only one year is given.
                       Defaults to this year on the local clock.

    Returns:
        ExtractedParameters: fields left as None when nothing matched.

    Raises:
        TypeError: if 'prompt' is not a string.
    """
    if not isinstance(prompt, str):
        raise TypeError(f"prompt must be a string, got {type(prompt).__name__}")

    params = {}
    text = prompt.lower()

    # -----------------------------------------------------------------------
    # Step 1: Time period
    # -----------------------------------------------------------------------
    year_match = YEAR_RANGE_PATTERN.search(prompt)
    if year_match:
        if current_year is None:
            current_year = datetime.now().year
        params["start_year"] = year_match.group(1)
        params["end_year"] = year_match.group(2) or str(current_year)

    # -----------------------------------------------------------------------
    # Step 2: Data types (order matters, see module docstring)
    # -----------------------------------------------------------------------
    if "temperature" in text:
        params["data_types"] = ["temperature"]
    if "rainfall" in text or "precipitation" in text:
        params["data_types"] = params.get("data_types", []) + ["rainfall"]
    if "population" in text:
        params["data_types"] = ["population"]
    if "demographics" in text:
        params["data_types"] = ["demographics"]

    # -----------------------------------------------------------------------
    # Step 3: Aggregation & timeframe
    # -----------------------------------------------------------------------
    if "average" in text:
        params["aggregation"] = "average"
    if "monthly" in text:
        params["timeframe"] = "monthly"
    if "yearly" in text or "annual" in text:
        params["timeframe"] = "yearly"

    return ExtractedParameters(**params)

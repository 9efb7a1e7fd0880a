from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from datetime import date as Date
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote
from pydantic import BaseModel
import calendar as cal
import json
import logging
import os
import re

from events_prompt import get_events_prompt, format_event_date
from gemini_client import Gemini

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="AI World Events Calendar API")

# ============= MODEL CLIENT =============
# Created on first use so the app can start without GOOGLE_API_KEY.
model_client: Optional[Gemini] = None

def get_model_client() -> Gemini:
    global model_client
    if model_client is None:
        model_client = Gemini()
        logger.info(f"Gemini client initialized with model {model_client.model}")
    return model_client

# ============= DATA MODELS =============
class WorldEvent(BaseModel):
    category: str
    event: str

class ErrorResponse(BaseModel):
    error: str

class InvalidModelResponse(Exception):
    """Raised when the model reply cannot be read as a JSON array."""

INVALID_FORMAT_MESSAGE = "Invalid response format from AI"

# ============= RESPONSE PARSING =============
FENCE_PATTERN = re.compile(r"```json\n?|\n?```")
ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")

def clean_json_response(response: str) -> str:
    """Strip markdown fences and cut out the outermost [...] span if there is one"""
    cleaned = FENCE_PATTERN.sub("", response)
    match = ARRAY_PATTERN.search(cleaned)
    return match.group(0) if match else cleaned

def reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")

def parse_events(response: str) -> List[Any]:
    cleaned = clean_json_response(response)
    try:
        events = json.loads(cleaned, parse_constant=reject_constant)
    except ValueError as e:
        raise InvalidModelResponse(f"Reply is not valid JSON: {e}")

    if not isinstance(events, list):
        raise InvalidModelResponse(f"Expected a JSON array, got {type(events).__name__}")
    return events

# ============= CALENDAR GRID =============
WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

def build_month_grid(year: int, month: int) -> List[Dict[str, Any]]:
    """
    Sunday-first month grid: blank cells up to the weekday of the 1st,
    then one cell per day carrying its ISO date and "Month Day" label.
    """
    first_weekday, days_in_month = cal.monthrange(year, month)
    # calendar counts Monday as 0
    leading_blanks = (first_weekday + 1) % 7

    days: List[Dict[str, Any]] = [{"day": "", "date": None, "label": None} for _ in range(leading_blanks)]
    for day in range(1, days_in_month + 1):
        current = Date(year, month, day)
        days.append({
            "day": day,
            "date": current.isoformat(),
            "label": format_event_date(current)
        })
    return days

def adjacent_months(year: int, month: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    previous = (year - 1, 12) if month == 1 else (year, month - 1)
    following = (year + 1, 1) if month == 12 else (year, month + 1)
    return previous, following

# ============= API ENDPOINTS =============

@app.get("/")
def read_root():
    return {
        "message": "AI World Events Calendar API",
        "version": "1.0",
        "endpoints": {
            "/api/events?date=Month%20Day": "World events for a calendar day, generated by Gemini",
            "/calendar/{year}/{month}": "Month grid for the calendar widget",
            "/health": "Service status"
        }
    }

@app.get("/health")
def health():
    return {"status": "ok", "model": get_model_client().model}

@app.get(
    "/api/events",
    responses={
        200: {"model": List[WorldEvent]},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    }
)
def get_events(
    date: Optional[str] = Query(None, description='Calendar day as "Month Day", e.g. "October 19"')
):
    """Ask the model for world events that happened on the given day"""
    if not date or not date.strip():
        return JSONResponse(status_code=400, content={"error": "Date parameter is required"})

    try:
        # the widget encodes its parts before joining them, so decode once more
        event_date = " ".join(unquote(date, errors="strict").split())
        logger.info(f"Fetching world events for {event_date}")

        result = get_model_client().generate(get_events_prompt(event_date))

        try:
            events = parse_events(result)
        except InvalidModelResponse as e:
            logger.error(f"Error parsing AI response: {e}")
            return JSONResponse(status_code=500, content={"error": INVALID_FORMAT_MESSAGE})

        logger.info(f"Returning {len(events)} events for {event_date}")
        return events
    except Exception as e:
        logger.error(f"Error fetching events for {date}: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch events"})

@app.get("/calendar/{year}/{month}")
def get_month_calendar(year: int, month: int):
    """Get the grid for a month plus its navigation targets"""
    if month < 1 or month > 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    if year < 1 or year > 9999:
        raise HTTPException(status_code=400, detail="Year must be between 1 and 9999")

    (prev_year, prev_month), (next_year, next_month) = adjacent_months(year, month)
    return {
        "year": year,
        "month": month,
        "month_name": cal.month_name[month],
        "weekdays": WEEKDAYS,
        "days": build_month_grid(year, month),
        "previous": {"year": prev_year, "month": prev_month},
        "next": {"year": next_year, "month": next_month}
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))

# World Events Prompt
# This prompt asks the model for notable events that happened on a given calendar day.

import calendar as cal
from datetime import date

PROMPT_TEMPLATE = (
    "Generate 10 world events in bangla text that occurred on {date} (format: Month Day). "
    "Include a mix of education, research, political, historical, scientific, and cultural events. "
    "Format the output as a JSON array of objects, each with 'category' and 'event' keys. "
    "Do not include any markdown formatting or additional text."
)

def get_events_prompt(date: str) -> str:
    """
    Fill the events prompt with a "Month Day" label (e.g. "October 19")
    """
    return PROMPT_TEMPLATE.format(date=date)

def format_event_date(day: date) -> str:
    return f"{cal.month_name[day.month]} {day.day}"

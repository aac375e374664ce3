"""Ticketmaster Discovery API client constants and sessions.

API docs: https://developer.ticketmaster.com/products-and-docs/apis/discovery-api/v2/
"""

import requests

from restaurant_signals.services.http import create_session

DISCOVERY_EVENTS_API = "https://app.ticketmaster.com/discovery/v2/events.json"

PLACEHOLDER_API_KEY = "your_ticketmaster_api_key_here"
SIGNUP_URL = "https://developer.ticketmaster.com/"

REQUEST_TIMEOUT = 15  # seconds

# Ticketmaster caps a page at 200; one page of 50 covers a city-week.
PAGE_SIZE = 50


def new_session() -> requests.Session:
    """Session for one collector run. Overlapping runs never share one."""
    return create_session(timeout=REQUEST_TIMEOUT)


# Default for direct calls outside a collector (scripts, the REPL).
session = new_session()

"""Forward windows each collector considers on a run."""

# Events: now through now + 7 days.
EVENTS_WINDOW_DAYS: int = 7

# Calendar: today through today + 90 days, both ends included.
CALENDAR_WINDOW_DAYS: int = 90

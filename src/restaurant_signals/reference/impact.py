"""Event impact model weights."""

UNKNOWN_CATEGORY = "Unknown"

# Base impact by Ticketmaster segment name. Anything not listed scores as Unknown.
CATEGORY_BASE_SCORES: dict[str, float] = {
    "Sports": 0.85,
    "Music": 0.75,
    "Arts & Theatre": 0.65,
    "Family": 0.70,
    "Film": 0.55,
    "Miscellaneous": 0.50,
    UNKNOWN_CATEGORY: 0.40,
}

# (max distance km, factor), checked in order. A distance equal to the bound
# belongs to that bucket.
DISTANCE_DECAY_STEPS: tuple[tuple[float, float], ...] = (
    (1.0, 1.00),
    (3.0, 0.85),
    (5.0, 0.65),
    (8.0, 0.45),
)

# Factor for anything beyond the last step.
FAR_DECAY: float = 0.25

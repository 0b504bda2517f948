"""
Centralized constants for planning (Encapsulate What Changes).

Change categories, item lists or limits here instead of scattering literals across services and routes.
Overlap threshold/cap and sync cadence come from planning_config (env-driven).
"""
from tribe.core.planning_config import (
    MAX_OVERLAP_CANDIDATES,
    MIN_OVERLAP_MINUTES,
    SLUG_LENGTH,
    SYNC_INTERVAL_SECONDS,
)

# Hang categories (stored verbatim in hang_requests.type / plans.type)
CATEGORY_POTLUCK = "Potluck"
CATEGORY_COWORKING = "Cabin creative coworking"
CATEGORY_DANCE_CLASS = "Dance class"
CATEGORY_PLAYDATE = "Playdate"
CATEGORIES = (CATEGORY_POTLUCK, CATEGORY_COWORKING, CATEGORY_DANCE_CLASS, CATEGORY_PLAYDATE)

# Attendance
RESPONSE_STATUSES = ("in", "maybe", "out")
# Status written when only an arrival estimate is set and no response exists yet
DEFAULT_RESPONSE_STATUS = "maybe"
# Arrival estimates (only shown for playdates)
ARRIVAL_OPTIONS = ("On time", "5–10 late", "10–20 late", "Not sure")

# Seeded as unclaimed claims the first time a potluck plan is viewed
DEFAULT_POTLUCK_ITEMS = (
    "Main dish",
    "Salad / Veg",
    "Snack / App",
    "Dessert",
    "Drinks",
)

# Public slugs: nanoid's URL-safe alphabet
SLUG_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
SLUG_CREATE_ATTEMPTS = 3

# Header / query param carrying the participant identity token
PARTICIPANT_TOKEN_HEADER = "X-Participant-Token"


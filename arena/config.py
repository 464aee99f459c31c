import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./arena.db")

# Pricing
# Hourly rate used when no active pricing rule covers the requested slot
DEFAULT_PRICE_PER_HOUR = float(os.getenv("DEFAULT_PRICE_PER_HOUR", "500"))

# Booking allocation
DEFAULT_BOOKING_DURATION = int(os.getenv("DEFAULT_BOOKING_DURATION", "60"))  # minutes
# How long an allocation waits for another request holding the same slot
SLOT_LOCK_TIMEOUT_SECONDS = float(os.getenv("SLOT_LOCK_TIMEOUT_SECONDS", "10"))
# Upper bound on generated occurrences for one recurring request (two years of weeklies)
MAX_SERIES_OCCURRENCES = int(os.getenv("MAX_SERIES_OCCURRENCES", "104"))

# Rate limiting (Redis-backed, see rate_limiter.py)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
BOOKING_RATE_LIMIT = int(os.getenv("BOOKING_RATE_LIMIT", "30"))
BOOKING_RATE_WINDOW_SECONDS = int(os.getenv("BOOKING_RATE_WINDOW_SECONDS", "60"))

# Frontend base URL, used for CORS defaults
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Redis connection for rate limiting; REDIS_URL wins over the individual settings
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"

# CORS
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")

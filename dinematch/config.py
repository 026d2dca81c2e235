import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dinematch.db")

# Scheduling rules
CONFLICT_BUFFER_MINUTES = int(os.getenv("CONFLICT_BUFFER_MINUTES", "120"))
INVITATION_TTL_DAYS = int(os.getenv("INVITATION_TTL_DAYS", "7"))
# Extra attempts after a stale write (optimistic concurrency)
CONCURRENCY_RETRIES = int(os.getenv("CONCURRENCY_RETRIES", "1"))

# Completion split for personal dining. Flat rates, restaurant-specific
# percentages are not applied here.
PERSONAL_DINING_COMMISSION_RATE = float(os.getenv("PERSONAL_DINING_COMMISSION_RATE", "0.05"))
PERSONAL_DINING_DISCOUNT_RATE = float(os.getenv("PERSONAL_DINING_DISCOUNT_RATE", "0.05"))

# Event suggestion scoring
MATCH_RADIUS_METERS = float(os.getenv("MATCH_RADIUS_METERS", "5000"))
SCORE_WEIGHT_INTEREST = float(os.getenv("SCORE_WEIGHT_INTEREST", "3"))
SCORE_WEIGHT_GOAL = float(os.getenv("SCORE_WEIGHT_GOAL", "2"))
SCORE_WEIGHT_SOFT = float(os.getenv("SCORE_WEIGHT_SOFT", "1"))
SCORE_WEIGHT_LOCATION = float(os.getenv("SCORE_WEIGHT_LOCATION", "2"))
SCORE_WEIGHT_TIME_HIGH = float(os.getenv("SCORE_WEIGHT_TIME_HIGH", "2"))
SCORE_WEIGHT_TIME_MEDIUM = float(os.getenv("SCORE_WEIGHT_TIME_MEDIUM", "1"))

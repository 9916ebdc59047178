import os
from zoneinfo import ZoneInfo

# Render-style URLs start with "postgres://..."
# SQLAlchemy 2.x requires "postgresql://...", so patch it here.
_raw_db_url = os.getenv("DATABASE_URL", "sqlite:///./medicines.db")
DATABASE_URL = _raw_db_url.replace("postgres://", "postgresql://", 1)

# Every "today" in the service (dose materialization, edit window, stats)
# is computed in this zone.
APP_TIMEZONE_NAME = os.getenv("APP_TIMEZONE", "UTC")
APP_TIMEZONE = ZoneInfo(APP_TIMEZONE_NAME)

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173")

LOGS_DIR = os.getenv("LOGS_DIR", os.path.join(os.path.dirname(__file__), "logs"))

SERVICE_NAME = "MedTrack API"
SERVICE_VERSION = "1.0.0"

import os
from typing import Optional, Tuple
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Allow requests from this origin
ALLOW_ORIGIN: Optional[str] = os.environ.get("ALLOW_ORIGIN")

# If true, enable docs and openapi.json endpoints
ENABLE_DOCS: bool = os.environ.get("ENABLE_DOCS") == "1"

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "info")

# JSON file of {role-id: [permission, ...]}; built-in table when unset
ROLE_GRANTS_FILE: Optional[str] = os.environ.get("ROLE_GRANTS_FILE")

# Days-remaining values that trigger a deadline alert
DEADLINE_THRESHOLDS: Tuple[int, ...] = tuple(
    int(value) for value in os.environ.get("DEADLINE_THRESHOLDS", "7,3,1").split(",") if value.strip()
)

# Maximum number of notifications kept in the in-app feed
NOTIFICATION_FEED_LIMIT: int = int(os.environ.get("NOTIFICATION_FEED_LIMIT", "100"))

# HS256 key for session tokens; every token is rejected while unset
JWT_SECRET: Optional[str] = os.getenv("JWT_SECRET")

# Development server bind address
HOST: str = os.environ.get("HOST", "127.0.0.1")
PORT: int = int(os.environ.get("PORT", "8000"))

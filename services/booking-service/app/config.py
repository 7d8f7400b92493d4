import os

SERVICE_NAME = "booking-service"

BOOKING_DB = os.getenv("BOOKING_DB")
if not BOOKING_DB:
    raise RuntimeError("BOOKING_DB environment variable is not set")

SQL_ECHO = os.getenv("SQL_ECHO", "0").lower() in ("1", "true", "yes")

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"

if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is not set")

# optional; rate limiting is disabled without it
REDIS_URL = os.getenv("REDIS_URL")
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "120"))

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import SERVICE_NAME, RATE_LIMIT_PER_MINUTE
from .db import init_db, engine
from .errors import BookingError
from .middleware import RequestLoggingMiddleware, RateLimitMiddleware
from .redis_client import redis_client
from .routes import router

OPENAPI_TAGS = [
    {"name": "System", "description": "Operational endpoints."},
    {"name": "Classrooms", "description": "Classroom availability and reservations."},
    {"name": "Mentors", "description": "Faculty mentor catalog and free appointment times."},
    {"name": "Mentor bookings", "description": "Mentor appointment requests and approvals."},
]

app = FastAPI(title="Booking Service", openapi_tags=OPENAPI_TAGS)

app.add_middleware(RateLimitMiddleware, max_per_minute=RATE_LIMIT_PER_MINUTE)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(router)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health", tags=["System"])
async def health():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "rate_limit_enabled": redis_client is not None,
    }


@app.on_event("startup")
async def startup():
    await init_db()
    print(f"[{SERVICE_NAME}] tables ready")


@app.on_event("shutdown")
async def shutdown():
    try:
        if redis_client is not None:
            await redis_client.aclose()
    except Exception as e:
        print(f"[{SERVICE_NAME}] redis close failed: {e}")
    await engine.dispose()

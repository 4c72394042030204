"""Campus FastAPI application.

Web server for event management and the notification inbox. Commands are
processed synchronously; each request runs inside the campus domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (notifications fan out in the request)
#   - "production" → event_processing = "async" (notifications fan out via Engine)
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus.domain import campus  # noqa: E402
from campus.utils.logging import add_context, clear_context, configure_logging

configure_logging()
campus.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Campus Events API",
    description="Campus events, registrations and notification fan-out",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the campus domain context and a request id for each request."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-Id") or uuid4().hex)
    with campus.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from campus.api import (  # noqa: E402
    event_router,
    notification_router,
    register_exception_handlers,
    reminder_router,
    user_router,
)

register_exception_handlers(app)
app.include_router(event_router)
app.include_router(user_router)
app.include_router(notification_router)
app.include_router(reminder_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": campus.name})

import os

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from splitlah.errors import InvalidReceiptState, InvalidTransition, RequestInFlight
from splitlah.logging_config import setup_logging
from splitlah.middleware import SessionCookieMiddleware, RequestLoggingMiddleware
from splitlah.ratelimit import limiter
from splitlah.routes import assignments, bill, people, receipts, voice
from splitlah.sessions import SessionStore

load_dotenv()

# Sentry
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    # Disable the auto-detected OpenAI Agents integration due to
    # version incompatibility (sentry-sdk expects a different internal API)
    _disabled = []
    try:
        from sentry_sdk.integrations.openai_agents import OpenAIAgentsIntegration
        _disabled.append(OpenAIAgentsIntegration)
    except ImportError:
        pass
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        send_default_pii=False,
        disabled_integrations=_disabled,
    )

logger = setup_logging()

app = FastAPI(title="Splitlah API", version="0.1.0")
app.state.limiter = limiter
app.state.sessions = SessionStore()
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc), "step": exc.step})


@app.exception_handler(RequestInFlight)
async def request_in_flight_handler(request: Request, exc: RequestInFlight):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(InvalidReceiptState)
async def invalid_receipt_state_handler(request: Request, exc: InvalidReceiptState):
    logger.warning(f"Rejected bill update: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# CORS
origins = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in origins],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["Content-Type"],
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SessionCookieMiddleware)

# Routes
app.include_router(bill.router, prefix="/api")
app.include_router(receipts.router, prefix="/api")
app.include_router(people.router, prefix="/api")
app.include_router(assignments.router, prefix="/api")
app.include_router(voice.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "sessions": len(app.state.sessions)}

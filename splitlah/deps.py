import logging

from fastapi import HTTPException, Request

from splitlah.sessions import SessionStore
from splitlah.state import BillSession

logger = logging.getLogger("splitlah")


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_bill_session(request: Request) -> BillSession:
    """Resolve the bill session for the request's session cookie."""
    session_id = getattr(request.state, "session_id", None)
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing session")

    try:
        return get_session_store(request).get_or_create(session_id)
    except ValueError as e:
        logger.error(f"Bill session config error: {e}")
        raise HTTPException(status_code=503, detail="Bill splitting is not available")

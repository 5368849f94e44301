import logging

from fastapi import APIRouter, Depends

from splitlah.deps import get_bill_session
from splitlah.serializers import serialize_bill, serialize_summary
from splitlah.state import BillSession

logger = logging.getLogger("splitlah")
router = APIRouter()


@router.get("/bill")
def get_bill(session: BillSession = Depends(get_bill_session)):
    return serialize_bill(session)


@router.post("/bill/finalize")
def finalize_bill(session: BillSession = Depends(get_bill_session)):
    allocation = session.finalize()
    return {"bill": serialize_bill(session), "summary": serialize_summary(session, allocation)}


@router.get("/bill/summary")
def get_summary(session: BillSession = Depends(get_bill_session)):
    return serialize_summary(session, session.summarize())


@router.post("/bill/reset")
def reset_bill(session: BillSession = Depends(get_bill_session)):
    session.reset()
    logger.info("Bill reset")
    return serialize_bill(session)

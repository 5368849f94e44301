import logging

from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, File

from splitlah import config
from splitlah.constants import MAX_UPLOAD_SIZE
from splitlah.deps import get_bill_session
from splitlah.errors import IngestionFailed
from splitlah.ratelimit import limiter
from splitlah.serializers import serialize_bill
from splitlah.state import BillSession

logger = logging.getLogger("splitlah")
router = APIRouter()

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/heic", "image/heif"}


@router.post("/bill/receipt")
@limiter.limit(config.SCAN_RATE_LIMIT)
async def scan_receipt(
    request: Request,
    file: UploadFile = File(...),
    session: BillSession = Depends(get_bill_session),
):
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported image format. Use JPEG, PNG, or WebP.")

    image_bytes = await file.read()
    if len(image_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(image_bytes) > MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="Image too large. Maximum size is 10 MB.")

    try:
        receipt = await session.submit_image(image_bytes, file.content_type)
    except IngestionFailed as e:
        logger.warning(f"Receipt ingestion failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to analyze receipt. Please try a clearer photo.")

    if receipt is None:
        raise HTTPException(status_code=409, detail="The bill was reset while the receipt was being read")

    return serialize_bill(session)

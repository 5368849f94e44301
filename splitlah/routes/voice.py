import logging

from fastapi import APIRouter, Depends, HTTPException, Request, UploadFile, File

from splitlah import config
from splitlah.constants import MAX_UPLOAD_SIZE
from splitlah.deps import get_bill_session
from splitlah.errors import VoiceProcessingFailed
from splitlah.ratelimit import limiter
from splitlah.serializers import serialize_bill
from splitlah.state import BillSession

logger = logging.getLogger("splitlah")
router = APIRouter()


@router.post("/bill/voice")
@limiter.limit(config.VOICE_RATE_LIMIT)
async def voice_command(
    request: Request,
    file: UploadFile = File(...),
    session: BillSession = Depends(get_bill_session),
):
    content_type = file.content_type or "audio/wav"
    if not content_type.startswith("audio/"):
        raise HTTPException(status_code=400, detail="Unsupported recording format")

    audio_bytes = await file.read()
    if len(audio_bytes) == 0:
        raise HTTPException(status_code=400, detail="Empty recording")
    if len(audio_bytes) > MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="Recording too large. Maximum size is 10 MB.")

    try:
        applied = await session.apply_voice_command(audio_bytes, content_type)
    except VoiceProcessingFailed as e:
        logger.warning(f"Voice command failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to process voice command. Please try again.")

    return {"updatedItemIds": applied, "bill": serialize_bill(session)}

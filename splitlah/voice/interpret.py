import logging

from pydantic import ValidationError

from splitlah.errors import VoiceProcessingFailed
from splitlah.models import Person, ReceiptItem
from splitlah.payloads import decode_payload
from splitlah.voice.base import (
    AssignmentUpdate,
    ContextItem,
    ContextPerson,
    VoiceContext,
    VoiceInterpreter,
    VoiceUpdateResult,
)

logger = logging.getLogger("splitlah")


def build_context(items: list[ReceiptItem], people: list[Person]) -> VoiceContext:
    return VoiceContext(
        people=[ContextPerson(id=p.id, name=p.name) for p in people],
        items=[
            ContextItem(
                id=item.id,
                name=item.name,
                price=float(item.price),
                currently_assigned_to=list(item.assigned_to),
            )
            for item in items
        ],
    )


def parse_updates(raw) -> VoiceUpdateResult:
    """Validate an interpreter response given as a model, a dict or a JSON document."""
    if isinstance(raw, VoiceUpdateResult):
        return raw
    if raw is None:
        raise VoiceProcessingFailed("No response from voice interpreter")
    try:
        if isinstance(raw, (str, bytes)):
            return VoiceUpdateResult.model_validate_json(raw)
        return VoiceUpdateResult.model_validate(raw)
    except ValidationError as e:
        raise VoiceProcessingFailed(f"Voice response did not match the expected schema: {e.error_count()} error(s)") from e


def check_people(
    updates: list[AssignmentUpdate], items: list[ReceiptItem], people: list[Person]
) -> list[AssignmentUpdate]:
    """Drop updates for items not on the receipt, then reject unknown person ids."""
    item_ids = {item.id for item in items}
    known = {p.id for p in people}
    kept = []
    for update in updates:
        if update.item_id not in item_ids:
            logger.warning("Voice response referenced unknown item", extra={"extra_data": {"item_id": update.item_id}})
            continue
        unknown = [pid for pid in update.assigned_to if pid not in known]
        if unknown:
            raise VoiceProcessingFailed(
                f"Voice response assigned item {update.item_id} to unknown people: {', '.join(unknown)}"
            )
        kept.append(update)
    return kept


async def interpret_voice_command(
    interpreter: VoiceInterpreter,
    items: list[ReceiptItem],
    people: list[Person],
    audio: bytes | str,
    content_type: str | None = None,
) -> list[AssignmentUpdate]:
    """Ask the interpreter how a spoken command changes the assignments.

    Returns the validated update list without applying it. Every failure
    surfaces as VoiceProcessingFailed.
    """
    try:
        audio_bytes, media_type = decode_payload(audio, content_type, "audio/wav")
    except ValueError as e:
        raise VoiceProcessingFailed("Voice recording could not be decoded") from e
    if not audio_bytes:
        raise VoiceProcessingFailed("Voice recording is empty")

    context = build_context(items, people)
    try:
        raw = await interpreter.interpret(context, audio_bytes, media_type)
    except VoiceProcessingFailed:
        raise
    except Exception as e:
        logger.error(f"Voice interpretation failed: {e}", exc_info=True)
        raise VoiceProcessingFailed("Failed to process voice command") from e

    result = parse_updates(raw)
    updates = check_people(result.updates, items, people)
    logger.info("Voice command interpreted", extra={"extra_data": {"updates_count": len(updates)}})
    return updates

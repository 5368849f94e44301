import logging
from decimal import Decimal

from pydantic import ValidationError

from splitlah.errors import IngestionFailed
from splitlah.models import ReceiptData, ReceiptItem
from splitlah.payloads import decode_payload
from splitlah.receipt.base import ReceiptExtractionResult, ReceiptExtractor

logger = logging.getLogger("splitlah")


def parse_extraction(raw) -> ReceiptExtractionResult:
    """Validate an extractor response given as a model, a dict or a JSON document."""
    if isinstance(raw, ReceiptExtractionResult):
        return raw
    if raw is None:
        raise IngestionFailed("No response from receipt extractor")
    try:
        if isinstance(raw, (str, bytes)):
            return ReceiptExtractionResult.model_validate_json(raw)
        return ReceiptExtractionResult.model_validate(raw)
    except ValidationError as e:
        raise IngestionFailed(f"Receipt extraction did not match the expected schema: {e.error_count()} error(s)") from e


def _money(value: float) -> Decimal:
    # str() first so 0.1 stays 0.1 rather than its binary expansion
    return Decimal(str(value))


def to_receipt_data(result: ReceiptExtractionResult) -> ReceiptData:
    """Build the internal receipt with fresh item ids and nobody assigned."""
    try:
        return ReceiptData(
            merchant_name=result.merchant_name,
            date=result.date or "",
            items=[
                ReceiptItem(id=f"item-{idx}", name=line.name, price=_money(line.price), assigned_to=[])
                for idx, line in enumerate(result.items)
            ],
            subtotal=_money(result.subtotal),
            service_charge=_money(result.service_charge or 0),
            gst=_money(result.gst or 0),
            total=_money(result.total),
        )
    except ValidationError as e:
        raise IngestionFailed(f"Receipt extraction returned invalid values: {e.error_count()} error(s)") from e


async def ingest_receipt(
    extractor: ReceiptExtractor,
    image: bytes | str,
    content_type: str | None = None,
) -> ReceiptData:
    """Send a receipt image to the extractor and return the validated receipt.

    Every failure, whether a bad payload, a transport error or a malformed
    response, surfaces as IngestionFailed.
    """
    try:
        image_bytes, media_type = decode_payload(image, content_type, "image/jpeg")
    except ValueError as e:
        raise IngestionFailed("Receipt image could not be decoded") from e
    if not image_bytes:
        raise IngestionFailed("Receipt image is empty")

    try:
        raw = await extractor.extract(image_bytes, media_type)
    except Exception as e:
        logger.error(f"Receipt extraction failed: {e}", exc_info=True)
        raise IngestionFailed("Failed to extract receipt data") from e

    receipt = to_receipt_data(parse_extraction(raw))
    logger.info(
        "Receipt extracted",
        extra={"extra_data": {"merchant": receipt.merchant_name, "items_count": len(receipt.items)}},
    )
    return receipt

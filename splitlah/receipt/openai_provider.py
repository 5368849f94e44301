import base64

from agents import Agent, Runner

from splitlah import config
from splitlah.constants import SG_GST_RATE, SG_SERVICE_CHARGE_RATE
from splitlah.receipt.base import ReceiptExtractionResult

INSTRUCTIONS = f"""\
You are a receipt parser for Singapore restaurant bills. Given a receipt image, extract the merchant, date, line items and charges.

Rules:
- merchantName: the restaurant or establishment name as printed.
- date: the transaction date in YYYY-MM-DD format, null if not visible.
- items: only dishes and drinks with their price before tax and service charge.
- Ignore lines that are not purchases, such as "Pax: 4", table numbers or cashier names.
- subtotal: the sum of items before tax and service charge, as printed.
- serviceCharge: the service charge amount as printed (usually {SG_SERVICE_CHARGE_RATE:.0%} of subtotal). null if not listed.
- gst: the GST amount as printed (usually {SG_GST_RATE:.0%}). null if not listed.
- total: the grand total.
- All amounts are numbers, not strings. Copy values as printed; do not correct them."""

agent = Agent(
    name="Receipt Scanner",
    instructions=INSTRUCTIONS,
    model=config.RECEIPT_MODEL,
    output_type=ReceiptExtractionResult,
)


class OpenAIReceiptExtractor:
    """Receipt extraction using OpenAI Agents SDK with a vision model."""

    async def extract(self, image_bytes: bytes, content_type: str) -> ReceiptExtractionResult:
        b64_image = base64.b64encode(image_bytes).decode("utf-8")
        media_type = content_type or "image/jpeg"

        result = await Runner.run(
            agent,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": "Extract the items and charges from this receipt."},
                        {"type": "input_image", "image_url": f"data:{media_type};base64,{b64_image}"},
                    ],
                }
            ],
        )

        return result.final_output

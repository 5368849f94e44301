from splitlah import config
from splitlah.receipt.base import ReceiptExtractor
from splitlah.receipt.openai_provider import OpenAIReceiptExtractor


def get_receipt_extractor() -> ReceiptExtractor:
    """Return the configured receipt extraction provider."""
    provider = config.AI_PROVIDER
    if provider == "openai":
        return OpenAIReceiptExtractor()
    raise ValueError(f"Unknown receipt provider: {provider}")

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class ReceiptLineItem(BaseModel):
    model_config = ConfigDict(strict=True)

    name: str
    price: float  # display units (e.g. 12.50 for $12.50), before tax/service


class ReceiptExtractionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True)

    merchant_name: str = Field(alias="merchantName")
    date: str | None = None  # YYYY-MM-DD when printed on the receipt
    items: list[ReceiptLineItem]
    subtotal: float
    service_charge: float | None = Field(default=None, alias="serviceCharge")  # null when not listed
    gst: float | None = None
    total: float


class ReceiptExtractor(Protocol):
    async def extract(self, image_bytes: bytes, content_type: str) -> ReceiptExtractionResult: ...

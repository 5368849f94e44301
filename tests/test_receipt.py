import asyncio
import base64
import json
from decimal import Decimal
from types import SimpleNamespace

import pytest

from splitlah import config
from splitlah.errors import IngestionFailed
from splitlah.payloads import decode_payload
from splitlah.receipt import openai_provider
from splitlah.receipt.base import ReceiptExtractionResult
from splitlah.receipt.factory import get_receipt_extractor
from splitlah.receipt.ingest import ingest_receipt, parse_extraction, to_receipt_data
from tests.fakes import FakeExtractor, cafe_extraction


def test_decode_payload_strips_data_uri():
    encoded = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()
    assert decode_payload(encoded, None, "image/jpeg") == (b"png-bytes", "image/png")


def test_decode_payload_passes_bytes_through():
    assert decode_payload(b"raw", None, "image/jpeg") == (b"raw", "image/jpeg")
    assert decode_payload(b"raw", "image/webp", "image/jpeg") == (b"raw", "image/webp")


def test_decode_payload_rejects_garbage():
    with pytest.raises(ValueError):
        decode_payload("data:image/png;base64,not base64!!", None, "image/jpeg")


def test_ingest_sends_stripped_image_to_extractor():
    extractor = FakeExtractor()
    encoded = "data:image/webp;base64," + base64.b64encode(b"webp-bytes").decode()

    receipt = asyncio.run(ingest_receipt(extractor, encoded))

    assert extractor.calls == [(b"webp-bytes", "image/webp")]
    assert receipt.merchant_name == "Kopi Corner"


def test_ingest_keeps_extracted_values_verbatim():
    # total does not match subtotal + charges; it is not corrected
    extractor = FakeExtractor(result=cafe_extraction(total=20.00))
    receipt = asyncio.run(ingest_receipt(extractor, b"jpeg"))

    assert receipt.total == Decimal("20.0")
    assert receipt.subtotal == Decimal("16.0")
    assert receipt.gst == Decimal("1.44")
    assert receipt.service_charge == Decimal("1.6")
    assert [(i.id, i.name, i.assigned_to) for i in receipt.items] == [
        ("item-0", "Coffee", []),
        ("item-1", "Cake", []),
    ]


def test_ingest_accepts_json_document():
    document = json.dumps({
        "merchantName": "Hawker Stall 12",
        "date": "2025-01-02",
        "items": [{"name": "Char kway teow", "price": 0.1}],
        "subtotal": 0.1,
        "total": 0.1,
    })
    receipt = asyncio.run(ingest_receipt(FakeExtractor(result=document), b"jpeg"))

    assert receipt.items[0].price == Decimal("0.1")
    assert receipt.service_charge == Decimal("0")
    assert receipt.gst == Decimal("0")


def test_ingest_wraps_transport_errors():
    extractor = FakeExtractor(error=TimeoutError("took too long"))
    with pytest.raises(IngestionFailed) as exc_info:
        asyncio.run(ingest_receipt(extractor, b"jpeg"))
    assert isinstance(exc_info.value.__cause__, TimeoutError)


def test_ingest_rejects_empty_image():
    extractor = FakeExtractor()
    with pytest.raises(IngestionFailed):
        asyncio.run(ingest_receipt(extractor, b""))
    assert extractor.calls == []


def test_ingest_rejects_undecodable_image():
    with pytest.raises(IngestionFailed):
        asyncio.run(ingest_receipt(FakeExtractor(), "%%%"))


@pytest.mark.parametrize("raw", [
    None,
    "not json at all",
    {"merchantName": "X", "items": [{"name": "Tea"}], "subtotal": 1, "total": 1},
    {"merchantName": "X", "items": "Tea", "subtotal": 1, "total": 1},
    {"items": [], "subtotal": 1, "total": 1},
    {"merchantName": "X", "items": [{"name": "Coffee", "price": "10.00"}], "subtotal": 10, "total": 10},
    {"merchantName": "X", "items": [], "subtotal": 0, "total": True},
    {"merchantName": 7, "items": [], "subtotal": 0, "total": 0},
    '{"merchantName": "X", "items": [], "subtotal": "0", "total": 0}',
])
def test_parse_extraction_fails_closed(raw):
    with pytest.raises(IngestionFailed):
        parse_extraction(raw)


def test_negative_amounts_are_rejected():
    with pytest.raises(IngestionFailed):
        to_receipt_data(cafe_extraction(gst=-1.0))


def test_extraction_schema_uses_wire_names():
    result = ReceiptExtractionResult.model_validate({
        "merchantName": "Kopi Corner",
        "items": [],
        "subtotal": 0,
        "serviceCharge": 1.5,
        "total": 1.5,
    })
    assert result.merchant_name == "Kopi Corner"
    assert result.service_charge == 1.5
    assert result.date is None
    assert result.gst is None


def test_openai_extractor_sends_image_as_data_url(monkeypatch):
    captured = {}

    class FakeRunner:
        @staticmethod
        async def run(agent, input):
            captured["agent"] = agent
            captured["input"] = input
            return SimpleNamespace(final_output=cafe_extraction())

    monkeypatch.setattr(openai_provider, "Runner", FakeRunner)

    result = asyncio.run(openai_provider.OpenAIReceiptExtractor().extract(b"png-bytes", "image/png"))

    assert result.merchant_name == "Kopi Corner"
    assert captured["agent"] is openai_provider.agent
    content = captured["input"][0]["content"]
    image_part = next(part for part in content if part["type"] == "input_image")
    assert image_part["image_url"] == "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()


def test_extraction_instructions_mention_singapore_rates():
    assert "10%" in openai_provider.INSTRUCTIONS
    assert "9%" in openai_provider.INSTRUCTIONS


def test_unknown_provider_is_a_config_error(monkeypatch):
    monkeypatch.setattr(config, "AI_PROVIDER", "carrier-pigeon")
    with pytest.raises(ValueError):
        get_receipt_extractor()

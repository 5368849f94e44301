import asyncio
from decimal import Decimal

import pytest

from splitlah.models import ReceiptData, ReceiptItem
from splitlah.state import BillSession, default_roster
from tests.fakes import FakeExtractor, FakeInterpreter


@pytest.fixture
def people():
    # p1 = Me (Host), p2 = Alice, p3 = Bob
    return default_roster(["Me (Host)", "Alice", "Bob"])


@pytest.fixture
def cafe_receipt():
    return ReceiptData(
        merchant_name="Kopi Corner",
        date="2025-03-14",
        items=[
            ReceiptItem(id="item-0", name="Coffee", price=Decimal("10.00"), assigned_to=["p2", "p3"]),
            ReceiptItem(id="item-1", name="Cake", price=Decimal("6.00"), assigned_to=["p2"]),
        ],
        subtotal=Decimal("16.00"),
        service_charge=Decimal("1.60"),
        gst=Decimal("1.44"),
        total=Decimal("19.04"),
    )


@pytest.fixture
def make_session(people):
    def _make(extractor=None, interpreter=None):
        return BillSession(extractor or FakeExtractor(), interpreter or FakeInterpreter(), people=list(people))
    return _make


@pytest.fixture
def session(make_session):
    return make_session()


@pytest.fixture
def assign_session(session):
    """Session with the cafe receipt loaded and nobody assigned yet."""
    asyncio.run(session.submit_image(b"receipt-jpeg", "image/jpeg"))
    return session

from urllib.parse import unquote

from splitlah.allocation import allocate
from splitlah.models import Person
from splitlah.summary import build_share_message, unassigned_caveat, whatsapp_link


def test_share_message_lists_what_each_guest_owes(cafe_receipt, people):
    host = people[0].model_copy(update={"mobile_number": "91234567"})
    allocation = allocate(cafe_receipt, people)

    message = build_share_message(cafe_receipt, people, host, allocation)

    assert message.splitlines()[0] == "Bill split for Kopi Corner (2025-03-14)"
    assert "Receipt total: $19.04" in message
    assert "Alice: $13.09" in message
    assert "Bob: $5.95" in message
    assert "Me (Host):" not in message
    assert "Please PayNow Me (Host) at 91234567." in message
    assert "Note:" not in message


def test_share_message_without_paynow_number(cafe_receipt, people):
    allocation = allocate(cafe_receipt, people)
    message = build_share_message(cafe_receipt, people, people[0], allocation)
    assert message.endswith("Please pay Me (Host).")


def test_share_message_flags_unassigned_items(cafe_receipt, people):
    cafe_receipt.items[1].assigned_to = []
    allocation = allocate(cafe_receipt, people)

    caveat = unassigned_caveat(cafe_receipt, allocation)
    assert caveat.startswith("1 item is unassigned ($6.00")

    message = build_share_message(cafe_receipt, people, people[0], allocation)
    assert f"Note: {caveat}" in message


def test_guest_owing_nothing_is_left_out(cafe_receipt, people):
    extra = Person(id="p4", name="Dana", color="#8b5cf6")
    roster = [*people, extra]
    allocation = allocate(cafe_receipt, roster)

    message = build_share_message(cafe_receipt, roster, roster[0], allocation)
    assert "Dana" not in message


def test_whatsapp_link_round_trips_text():
    link = whatsapp_link("Alice: $13.09\nPlease pay Me")
    assert link.startswith("https://wa.me/?text=")
    assert unquote(link.split("text=", 1)[1]) == "Alice: $13.09\nPlease pay Me"

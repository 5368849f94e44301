from urllib.parse import quote

from splitlah.allocation import Allocation, round_money
from splitlah.models import Person, ReceiptData

WHATSAPP_SHARE_URL = "https://wa.me/?text="


def unassigned_caveat(receipt: ReceiptData, allocation: Allocation) -> str | None:
    """Warning shown when part of the bill is charged to nobody."""
    count = len(allocation.unassigned_item_ids)
    if not count:
        return None
    noun = "item is" if count == 1 else "items are"
    return (
        f"{count} {noun} unassigned (${round_money(allocation.unassigned_subtotal):.2f} before GST and "
        f"service charge) and not included in anyone's total."
    )


def build_share_message(
    receipt: ReceiptData,
    people: list[Person],
    host: Person | None,
    allocation: Allocation,
) -> str:
    """Plain-text breakdown for pasting into a group chat."""
    title = receipt.merchant_name + (f" ({receipt.date})" if receipt.date else "")
    lines = [f"Bill split for {title}", f"Receipt total: ${round_money(receipt.total):.2f}", ""]

    for person in people:
        if host and person.id == host.id:
            continue
        owed = round_money(allocation.total_owed(person.id))
        if owed == 0:
            continue
        lines.append(f"{person.name}: ${owed:.2f}")

    if host:
        lines.append("")
        if host.mobile_number:
            lines.append(f"Please PayNow {host.name} at {host.mobile_number}.")
        else:
            lines.append(f"Please pay {host.name}.")

    caveat = unassigned_caveat(receipt, allocation)
    if caveat:
        lines.extend(["", f"Note: {caveat}"])

    return "\n".join(lines)


def whatsapp_link(message: str) -> str:
    return WHATSAPP_SHARE_URL + quote(message)

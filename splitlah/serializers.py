from splitlah.allocation import Allocation, round_money
from splitlah.models import Person, ReceiptData, ReceiptItem
from splitlah.state import BillSession
from splitlah.summary import build_share_message, unassigned_caveat, whatsapp_link


def money(amount) -> float:
    return float(round_money(amount))


def serialize_person(person: Person) -> dict:
    return {
        "id": person.id,
        "name": person.name,
        "color": person.color,
        "mobileNumber": person.mobile_number,
    }


def serialize_item(item: ReceiptItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "price": money(item.price),
        "assignedTo": list(item.assigned_to),
    }


def serialize_receipt(receipt: ReceiptData) -> dict:
    return {
        "merchantName": receipt.merchant_name,
        "date": receipt.date,
        "items": [serialize_item(i) for i in receipt.items],
        "subtotal": money(receipt.subtotal),
        "serviceCharge": money(receipt.service_charge),
        "gst": money(receipt.gst),
        "total": money(receipt.total),
        "unassignedCount": len(receipt.unassigned_items()),
    }


def serialize_bill(session: BillSession) -> dict:
    state = session.state
    return {
        "step": state.step.value,
        "busy": session.busy,
        "hasReceiptImage": state.receipt_image is not None,
        "receipt": serialize_receipt(state.raw_receipt_data) if state.raw_receipt_data else None,
        "people": [serialize_person(p) for p in state.people],
        "hostPersonId": state.host_person_id,
    }


def serialize_allocation(allocation: Allocation, people: list[Person]) -> list[dict]:
    result = []
    for person in people:
        share = allocation.shares[person.id]
        result.append({
            "personId": person.id,
            "name": person.name,
            "subtotalShare": money(share.subtotal_share),
            "serviceChargeShare": money(share.service_charge_share),
            "gstShare": money(share.gst_share),
            "totalOwed": money(share.total_owed),
        })
    return result


def serialize_summary(session: BillSession, allocation: Allocation) -> dict:
    state = session.state
    receipt = state.raw_receipt_data
    message = build_share_message(receipt, state.people, state.host, allocation)
    return {
        "merchantName": receipt.merchant_name,
        "date": receipt.date,
        "hostPersonId": state.host_person_id,
        "breakdown": serialize_allocation(allocation, state.people),
        "coveredSubtotal": money(allocation.covered_subtotal),
        "unassignedItemIds": list(allocation.unassigned_item_ids),
        "unassignedSubtotal": money(allocation.unassigned_subtotal),
        "totalAllocated": money(allocation.total_allocated),
        "receiptTotal": money(receipt.total),
        "caveat": unassigned_caveat(receipt, allocation),
        "shareMessage": message,
        "whatsappUrl": whatsapp_link(message),
    }

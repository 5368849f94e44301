"""Bill allocation: who owes what, with GST and service charge apportioned."""

from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, ConfigDict

from splitlah.constants import CENT
from splitlah.errors import InvalidReceiptState
from splitlah.models import Person, ReceiptData

ZERO = Decimal("0")


class PersonShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    person_id: str
    subtotal_share: Decimal = ZERO
    service_charge_share: Decimal = ZERO
    gst_share: Decimal = ZERO

    @property
    def total_owed(self) -> Decimal:
        return self.subtotal_share + self.service_charge_share + self.gst_share


class Allocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    shares: dict[str, PersonShare]  # roster order
    covered_subtotal: Decimal
    unassigned_item_ids: list[str]
    unassigned_subtotal: Decimal

    def total_owed(self, person_id: str) -> Decimal:
        share = self.shares.get(person_id)
        return share.total_owed if share else ZERO

    @property
    def total_allocated(self) -> Decimal:
        return sum((s.total_owed for s in self.shares.values()), ZERO)


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, half up. Display only; never feed the result back into allocation."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _proportional(part: Decimal, whole: Decimal, amount: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return part / whole * amount


def allocate(receipt: ReceiptData, people: list[Person]) -> Allocation:
    """Split a receipt across the roster.

    Each item's price is divided evenly among its assignees. Service charge and
    GST follow each person's share of the covered subtotal, i.e. the part of the
    bill that is actually assigned to someone. Unassigned items are reported but
    charged to nobody.

    Amounts are kept at full Decimal precision; use round_money for display.
    Raises InvalidReceiptState on a negative price or an assignee outside the
    roster.
    """
    roster = [p.id for p in people]
    known = set(roster)
    subtotals: dict[str, Decimal] = {pid: ZERO for pid in roster}
    unassigned_ids: list[str] = []
    unassigned_subtotal = ZERO

    for item in receipt.items:
        if item.price < 0:
            raise InvalidReceiptState(f"Item {item.id} has a negative price")

        assignees = list(dict.fromkeys(item.assigned_to))
        unknown = [pid for pid in assignees if pid not in known]
        if unknown:
            raise InvalidReceiptState(
                f"Item {item.id} is assigned to unknown people: {', '.join(unknown)}"
            )

        if not assignees:
            unassigned_ids.append(item.id)
            unassigned_subtotal += item.price
            continue

        portion = item.price / len(assignees)
        for pid in assignees:
            subtotals[pid] += portion

    covered = sum(subtotals.values(), ZERO)

    shares = {
        pid: PersonShare(
            person_id=pid,
            subtotal_share=subtotal,
            service_charge_share=_proportional(subtotal, covered, receipt.service_charge),
            gst_share=_proportional(subtotal, covered, receipt.gst),
        )
        for pid, subtotal in subtotals.items()
    }

    return Allocation(
        shares=shares,
        covered_subtotal=covered,
        unassigned_item_ids=unassigned_ids,
        unassigned_subtotal=unassigned_subtotal,
    )

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Step(str, Enum):
    UPLOAD = "upload"
    ANALYZING = "analyzing"
    ASSIGN = "assign"
    SUMMARY = "summary"


class Person(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color: str
    mobile_number: str | None = None  # PayNow handle


class ReceiptItem(BaseModel):
    id: str
    name: str
    price: Decimal = Field(ge=0)
    assigned_to: list[str] = Field(default_factory=list)  # person ids, no duplicates


class ReceiptData(BaseModel):
    merchant_name: str
    date: str = ""
    items: list[ReceiptItem]
    subtotal: Decimal = Field(ge=0)
    service_charge: Decimal = Field(default=Decimal("0"), ge=0)
    gst: Decimal = Field(default=Decimal("0"), ge=0)
    total: Decimal = Field(ge=0)

    def get_item(self, item_id: str) -> ReceiptItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def unassigned_items(self) -> list[ReceiptItem]:
        return [item for item in self.items if not item.assigned_to]


class BillState(BaseModel):
    """Everything one diner group's session knows. Lives only in memory."""

    step: Step = Step.UPLOAD
    receipt_image: bytes | str | None = None
    receipt_content_type: str | None = None
    raw_receipt_data: ReceiptData | None = None
    people: list[Person]
    host_person_id: str

    def get_person(self, person_id: str) -> Person | None:
        for person in self.people:
            if person.id == person_id:
                return person
        return None

    @property
    def host(self) -> Person | None:
        return self.get_person(self.host_person_id)

"""Bill session: the upload -> analyzing -> assign -> summary flow for one diner group."""

import logging

from splitlah import config
from splitlah.allocation import Allocation, allocate
from splitlah.constants import PALETTE
from splitlah.errors import (
    IngestionFailed,
    InvalidReceiptState,
    InvalidTransition,
    RequestInFlight,
    VoiceProcessingFailed,
)
from splitlah.models import BillState, Person, ReceiptData, ReceiptItem, Step
from splitlah.receipt.base import ReceiptExtractor
from splitlah.receipt.ingest import ingest_receipt
from splitlah.voice.base import AssignmentUpdate, VoiceInterpreter
from splitlah.voice.interpret import interpret_voice_command

logger = logging.getLogger("splitlah")


def default_roster(names: list[str] | None = None) -> list[Person]:
    names = names if names is not None else config.DEFAULT_PEOPLE
    return [
        Person(id=f"p{idx + 1}", name=name, color=PALETTE[idx % len(PALETTE)])
        for idx, name in enumerate(names)
    ]


class BillSession:
    """Owns one BillState and is the only way to change it.

    Synchronous operations run to completion on the event loop, so they never
    interleave. Receipt and voice requests suspend on the network; `busy`
    allows one of them at a time. A reset while one is in flight makes its
    result stale, and stale results are dropped.
    """

    def __init__(
        self,
        extractor: ReceiptExtractor,
        interpreter: VoiceInterpreter,
        people: list[Person] | None = None,
        host_person_id: str | None = None,
    ):
        roster = list(people) if people is not None else default_roster()
        if not roster:
            raise InvalidReceiptState("A bill needs at least one person")
        if host_person_id is not None and host_person_id not in {p.id for p in roster}:
            raise InvalidReceiptState(f"Unknown host: {host_person_id}")

        self.extractor = extractor
        self.interpreter = interpreter
        self.state = BillState(people=roster, host_person_id=host_person_id or roster[0].id)
        self.busy = False
        self._epoch = 0

    @property
    def step(self) -> Step:
        return self.state.step

    @property
    def receipt(self) -> ReceiptData | None:
        return self.state.raw_receipt_data

    def _require(self, operation: str, *steps: Step) -> None:
        if self.state.step not in steps:
            raise InvalidTransition(operation, self.state.step.value)

    def _claim(self, operation: str) -> None:
        if self.busy:
            raise RequestInFlight(operation)
        self.busy = True

    def _require_person(self, person_id: str) -> Person:
        person = self.state.get_person(person_id)
        if person is None:
            raise InvalidReceiptState(f"Unknown person: {person_id}")
        return person

    def _next_person_id(self) -> str:
        taken = {p.id for p in self.state.people}
        n = len(self.state.people) + 1
        while f"p{n}" in taken:
            n += 1
        return f"p{n}"

    # --- Receipt ---

    async def submit_image(self, image: bytes | str, content_type: str | None = None) -> ReceiptData | None:
        """Extract a receipt and move to `assign`.

        Returns None if the session was reset while the request was running,
        whether it succeeded or failed. Otherwise raises IngestionFailed after
        moving back to `upload`.
        """
        self._require("submit_image", Step.UPLOAD)
        self._claim("submit_image")
        epoch = self._epoch
        self.state.step = Step.ANALYZING
        self.state.receipt_image = image
        self.state.receipt_content_type = content_type

        try:
            receipt = await ingest_receipt(self.extractor, image, content_type)
        except IngestionFailed:
            if epoch != self._epoch:
                logger.info("Discarding receipt failure for a reset session")
                return None
            self._clear_receipt()
            raise
        finally:
            self.busy = False

        if epoch != self._epoch:
            logger.info("Discarding receipt for a reset session", extra={"extra_data": {"merchant": receipt.merchant_name}})
            return None

        self.state.raw_receipt_data = receipt
        self.state.step = Step.ASSIGN
        return receipt

    # --- Roster ---

    def add_person(self, name: str, mobile_number: str | None = None) -> Person:
        self._require("add_person", Step.UPLOAD, Step.ASSIGN)
        name = name.strip()
        if not name:
            raise InvalidReceiptState("Person name must not be empty")

        person = Person(
            id=self._next_person_id(),
            name=name,
            color=PALETTE[len(self.state.people) % len(PALETTE)],
            mobile_number=mobile_number or None,
        )
        self.state.people.append(person)
        logger.info("Person added", extra={"extra_data": {"person_id": person.id}})
        return person

    def set_host(self, person_id: str) -> Person:
        person = self._require_person(person_id)
        self.state.host_person_id = person.id
        return person

    # --- Assignment ---

    def toggle_assignment(self, item_id: str, person_id: str) -> ReceiptItem | None:
        """Add or remove one person on one item. Returns None for an unknown item."""
        self._require("toggle_assignment", Step.ASSIGN)
        item = self.receipt.get_item(item_id)
        if item is None:
            logger.warning("Toggle for unknown item", extra={"extra_data": {"item_id": item_id}})
            return None
        self._require_person(person_id)

        if person_id in item.assigned_to:
            item.assigned_to = [pid for pid in item.assigned_to if pid != person_id]
        else:
            item.assigned_to = [*item.assigned_to, person_id]
        return item

    def apply_voice_updates(self, updates: list[AssignmentUpdate]) -> list[str]:
        """Replace the assignees of each referenced item. Unknown items are skipped.

        Person ids are checked across the batch before any item changes.
        Returns the ids of the items that were updated.
        """
        self._require("apply_voice_updates", Step.ASSIGN)
        known = [(self.receipt.get_item(u.item_id), u) for u in updates]
        known = [(item, u) for item, u in known if item is not None]
        for _, update in known:
            for pid in update.assigned_to:
                self._require_person(pid)

        applied = []
        for item, update in known:
            item.assigned_to = list(dict.fromkeys(update.assigned_to))
            applied.append(item.id)
        return applied

    async def apply_voice_command(self, audio: bytes | str, content_type: str | None = None) -> list[str]:
        """Interpret a recorded command and apply it. Returns the updated item ids.

        Raises VoiceProcessingFailed with assignments left as they were. A result
        that arrives after a reset or finalize is dropped and [] returned.
        """
        self._require("apply_voice_command", Step.ASSIGN)
        self._claim("apply_voice_command")
        epoch = self._epoch

        try:
            updates = await interpret_voice_command(
                self.interpreter, self.receipt.items, self.state.people, audio, content_type
            )
        finally:
            self.busy = False

        if epoch != self._epoch or self.state.step is not Step.ASSIGN:
            logger.info("Discarding voice updates for a session that moved on")
            return []

        try:
            applied = self.apply_voice_updates(updates)
        except InvalidReceiptState as e:
            raise VoiceProcessingFailed(str(e)) from e

        logger.info("Voice updates applied", extra={"extra_data": {"items": applied}})
        return applied

    # --- Summary ---

    def finalize(self) -> Allocation:
        self._require("finalize", Step.ASSIGN)
        allocation = allocate(self.receipt, self.state.people)
        self.state.step = Step.SUMMARY
        if allocation.unassigned_item_ids:
            logger.warning(
                "Bill finalized with unassigned items",
                extra={"extra_data": {
                    "items": allocation.unassigned_item_ids,
                    "unassigned_subtotal": str(allocation.unassigned_subtotal),
                }},
            )
        return allocation

    def summarize(self) -> Allocation:
        self._require("summarize", Step.SUMMARY)
        return allocate(self.receipt, self.state.people)

    def reset(self) -> None:
        self._epoch += 1
        self._clear_receipt()

    def _clear_receipt(self) -> None:
        self.state.step = Step.UPLOAD
        self.state.receipt_image = None
        self.state.receipt_content_type = None
        self.state.raw_receipt_data = None

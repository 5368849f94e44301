from fastapi import APIRouter, Depends, HTTPException

from splitlah.deps import get_bill_session
from splitlah.schemas import AssignmentUpdatesIn, ToggleAssignmentIn
from splitlah.serializers import serialize_bill, serialize_item
from splitlah.state import BillSession

router = APIRouter()


@router.post("/bill/items/{item_id}/toggle")
def toggle_assignment(
    item_id: str,
    data: ToggleAssignmentIn,
    session: BillSession = Depends(get_bill_session),
):
    item = session.toggle_assignment(item_id, data.person_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return serialize_item(item)


@router.post("/bill/assignments")
def apply_assignments(data: AssignmentUpdatesIn, session: BillSession = Depends(get_bill_session)):
    applied = session.apply_voice_updates(data.updates)
    return {"updatedItemIds": applied, "bill": serialize_bill(session)}

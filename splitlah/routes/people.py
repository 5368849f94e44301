from fastapi import APIRouter, Depends

from splitlah.deps import get_bill_session
from splitlah.schemas import AddPersonIn, SetHostIn
from splitlah.serializers import serialize_person
from splitlah.state import BillSession

router = APIRouter()


@router.post("/bill/people", status_code=201)
def add_person(data: AddPersonIn, session: BillSession = Depends(get_bill_session)):
    person = session.add_person(data.name, data.mobile_number)
    return serialize_person(person)


@router.put("/bill/host")
def set_host(data: SetHostIn, session: BillSession = Depends(get_bill_session)):
    host = session.set_host(data.person_id)
    return {"hostPersonId": host.id}

from pydantic import BaseModel, Field

from splitlah.voice.base import AssignmentUpdate


# --- People ---

class AddPersonIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    mobile_number: str | None = Field(default=None, alias="mobileNumber", max_length=32)

    model_config = {"populate_by_name": True}


class SetHostIn(BaseModel):
    person_id: str = Field(alias="personId")

    model_config = {"populate_by_name": True}


# --- Assignments ---

class ToggleAssignmentIn(BaseModel):
    person_id: str = Field(alias="personId")

    model_config = {"populate_by_name": True}


class AssignmentUpdatesIn(BaseModel):
    updates: list[AssignmentUpdate]

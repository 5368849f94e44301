from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class AssignmentUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True)

    item_id: str = Field(alias="itemId")
    assigned_to: list[str] = Field(alias="assignedTo")  # new complete list of person ids


class VoiceUpdateResult(BaseModel):
    model_config = ConfigDict(strict=True)

    updates: list[AssignmentUpdate]


class ContextPerson(BaseModel):
    id: str
    name: str


class ContextItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: float
    currently_assigned_to: list[str] = Field(alias="currentlyAssignedTo")


class VoiceContext(BaseModel):
    """What the interpreter sees of the bill when resolving a command."""

    people: list[ContextPerson]
    items: list[ContextItem]


class VoiceInterpreter(Protocol):
    async def interpret(self, context: VoiceContext, audio_bytes: bytes, content_type: str) -> VoiceUpdateResult: ...

# backend/campusnav/schemas/assistant.py
from pydantic import BaseModel, Field
from typing import Literal, Optional

AssistantStateName = Literal[
    "IDLE",
    "GREETING",
    "LISTENING_NAME",
    "CONFIRMING_NAME",
    "LISTENING_DESTINATION",
    "REDIRECTING",
]
AssistantEventType = Literal["start", "speech_end", "transcript", "recognition_error", "unsupported"]
ExtractContext = Literal["NAME", "DESTINATION", "GENERAL"]


class AssistantTurn(BaseModel):
    state: AssistantStateName = "IDLE"
    user_name: Optional[str] = None
    destination: Optional[str] = None
    transcript: Optional[str] = None
    retries: int = 0
    # what the client should do next
    speak: Optional[str] = None
    listen: bool = False
    typed_input: bool = False
    message: Optional[str] = None
    redirect_to: Optional[str] = None


class AssistantEvent(BaseModel):
    type: AssistantEventType
    text: Optional[str] = None


class StepIn(BaseModel):
    turn: AssistantTurn = Field(default_factory=AssistantTurn)
    event: AssistantEvent


class ExtractIn(BaseModel):
    text: str
    context: ExtractContext = "GENERAL"


class ExtractOut(BaseModel):
    context: ExtractContext
    value: Optional[str] = None
    intent: Optional[str] = None
    source: Literal["model", "rules"]

# backend/campusnav/services/assistant/dialogue.py
"""
Voice assistant conversation.

IDLE -> GREETING -> LISTENING_NAME -> CONFIRMING_NAME
     -> LISTENING_DESTINATION -> REDIRECTING

The browser owns the speech engines; every call here takes the last turn plus
one client event and returns the next turn describing what to say, whether to
listen, and where to redirect.
"""
import logging
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from campusnav.schemas.assistant import AssistantTurn, AssistantEvent
from .intent import IntentExtractor

logger = logging.getLogger(__name__)

MAX_RETRIES = 1


class AssistantState(str, Enum):
    IDLE = "IDLE"
    GREETING = "GREETING"
    LISTENING_NAME = "LISTENING_NAME"
    CONFIRMING_NAME = "CONFIRMING_NAME"
    LISTENING_DESTINATION = "LISTENING_DESTINATION"
    REDIRECTING = "REDIRECTING"


LISTENING_STATES = {AssistantState.LISTENING_NAME, AssistantState.LISTENING_DESTINATION}

TYPED_FALLBACK_MESSAGE = "I'm having trouble hearing you. Please type your answer instead."
UNSUPPORTED_MESSAGE = "Voice input is not available in this browser. Please type your answer instead."
TYPED_PROMPT_MESSAGE = "Please type your answer below."


class VoiceAssistantFlow:
    def __init__(self, extractor: IntentExtractor, campus_name: str = "Central Innovation Campus"):
        self.extractor = extractor
        self.campus_name = campus_name

    # ---------- prompts ----------
    def greeting(self) -> str:
        return (
            f"Hi there! Welcome to {self.campus_name}. "
            "I'm your navigation assistant. What's your name?"
        )

    @staticmethod
    def confirm_name(user_name: str) -> str:
        return f"Nice to meet you, {user_name}. Where would you like to go?"

    @staticmethod
    def redirecting(destination: str) -> str:
        return f"Okay, taking you to {destination}."

    @staticmethod
    def retry_prompt(state: AssistantState) -> str:
        if state == AssistantState.LISTENING_NAME:
            return "Sorry, I didn't catch your name. Could you say it again?"
        return "Sorry, I didn't catch that. Where would you like to go?"

    @staticmethod
    def navigate_url(destination: str, user_name: Optional[str]) -> str:
        params = {"destination": destination}
        if user_name:
            params["user"] = user_name
        return f"/navigate?{urlencode(params)}"

    # ---------- transitions ----------
    def handle(self, turn: AssistantTurn, event: AssistantEvent) -> AssistantTurn:
        state = AssistantState(turn.state)
        base = turn.model_copy(
            update={"speak": None, "listen": False, "message": None, "redirect_to": None}
        )
        logger.debug("assistant event %s in state %s", event.type, state.value)

        if event.type == "start":
            if state != AssistantState.IDLE:
                # only the first start begins the conversation
                return turn
            return base.model_copy(update={"state": AssistantState.GREETING.value, "speak": self.greeting()})

        if event.type == "speech_end":
            return self._after_speech(state, base)

        if event.type == "transcript":
            return self._on_transcript(state, base, event.text or "")

        if event.type == "recognition_error":
            return self._on_recognition_error(state, base)

        if event.type == "unsupported":
            return base.model_copy(update={"typed_input": True, "message": UNSUPPORTED_MESSAGE})

        return turn

    def _listen(self, base: AssistantTurn, **update) -> AssistantTurn:
        # typed mode keeps a visible prompt on every question
        if base.typed_input:
            return base.model_copy(update={**update, "listen": False, "message": TYPED_PROMPT_MESSAGE})
        return base.model_copy(update={**update, "listen": True})

    def _after_speech(self, state: AssistantState, base: AssistantTurn) -> AssistantTurn:
        if state == AssistantState.GREETING:
            return self._listen(base, state=AssistantState.LISTENING_NAME.value, retries=0)
        if state == AssistantState.CONFIRMING_NAME:
            return self._listen(
                base, state=AssistantState.LISTENING_DESTINATION.value, retries=0, transcript=None
            )
        if state == AssistantState.REDIRECTING and base.destination:
            return base.model_copy(update={"redirect_to": self.navigate_url(base.destination, base.user_name)})
        if state in LISTENING_STATES:
            # a re-prompt finished; listen again
            return self._listen(base)
        return base

    def _on_transcript(self, state: AssistantState, base: AssistantTurn, text: str) -> AssistantTurn:
        if state not in LISTENING_STATES:
            return base
        base = base.model_copy(update={"transcript": text})

        if state == AssistantState.LISTENING_NAME:
            name = self.extractor.extract(text, "NAME").value
            if not name:
                return self._on_recognition_error(state, base)
            return base.model_copy(
                update={
                    "state": AssistantState.CONFIRMING_NAME.value,
                    "user_name": name,
                    "speak": self.confirm_name(name),
                }
            )

        destination = self.extractor.extract(text, "DESTINATION").value
        if not destination:
            return self._on_recognition_error(state, base)
        return base.model_copy(
            update={
                "state": AssistantState.REDIRECTING.value,
                "destination": destination,
                "transcript": destination,
                "speak": self.redirecting(destination),
            }
        )

    def _on_recognition_error(self, state: AssistantState, base: AssistantTurn) -> AssistantTurn:
        if state not in LISTENING_STATES:
            return base
        if base.retries < MAX_RETRIES and not base.typed_input:
            return base.model_copy(update={"retries": base.retries + 1, "speak": self.retry_prompt(state)})
        return base.model_copy(update={"typed_input": True, "message": TYPED_FALLBACK_MESSAGE})

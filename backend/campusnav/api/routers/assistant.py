from fastapi import APIRouter, Depends, HTTPException
import logging

from campusnav.api.deps import get_assistant_flow, get_intent_extractor
from campusnav.schemas.assistant import AssistantTurn, ExtractIn, ExtractOut, StepIn
from campusnav.services.assistant import IntentExtractor, VoiceAssistantFlow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/step")
def step(payload: StepIn, flow: VoiceAssistantFlow = Depends(get_assistant_flow)) -> AssistantTurn:
    nxt = flow.handle(payload.turn, payload.event)
    if nxt.state != payload.turn.state:
        logger.info("assistant %s -> %s", payload.turn.state, nxt.state)
    return nxt


@router.post("/extract")
def extract(payload: ExtractIn, extractor: IntentExtractor = Depends(get_intent_extractor)) -> ExtractOut:
    if not payload.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    result = extractor.extract(payload.text, payload.context)
    return ExtractOut(context=payload.context, value=result.value, intent=result.intent, source=result.source)

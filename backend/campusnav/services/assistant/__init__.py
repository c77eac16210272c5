from .intent import IntentExtractor, RuleExtractor, Extraction
from .dialogue import VoiceAssistantFlow, AssistantState

__all__ = ["IntentExtractor", "RuleExtractor", "Extraction", "VoiceAssistantFlow", "AssistantState"]

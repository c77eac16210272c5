# backend/campusnav/services/assistant/intent.py
import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from google import genai

logger = logging.getLogger(__name__)

UNKNOWN = "UNKNOWN"
INTENTS = ("navigate", "identify", "unknown")

PROMPTS = {
    "NAME": (
        'Extract the person\'s name from this text: "{text}". Return ONLY the name as a single string. '
        'Do not include punctuation, "The name is", or any other text. If no name is found, return "UNKNOWN". '
        'Example: "My name is Likith" -> "Likith".'
    ),
    "DESTINATION": (
        'Extract the destination from this text: "{text}". Return ONLY the destination name. '
        'If no destination is found, return "UNKNOWN". Example: "Take me to the cafeteria" -> "Cafeteria".'
    ),
    "GENERAL": (
        'Analyze this text: "{text}". Return a JSON object with '
        '{{ intent: "navigate" | "identify" | "unknown", entity: string | null }}.'
    ),
}


@dataclass
class Extraction:
    context: str
    value: Optional[str]
    intent: Optional[str] = None
    source: str = "rules"


class RuleExtractor:
    """
    Deterministic fallback used when the model is unavailable.
    """

    def __init__(self):
        self.patterns = {
            'name': [
                r"(?:my name is|my name's|name is|call me|this is|i am|i'm|it's|it is)\s+([a-z][a-z'\-]*(?:\s+[a-z][a-z'\-]*)?)\s*$",
                r"(?:my name is|my name's|name is|call me)\s+([a-z][a-z'\-]*)",
            ],
            'destination': [
                r"(?:take|bring|guide|walk|lead) me (?:to|towards)\s+(.+)",
                r"(?:navigate|directions|the way|route) to\s+(.+)",
                r"(?:how do i|how can i|how to) (?:get|go) to\s+(.+)",
                r"(?:i want|i'd like|i would like|i need) to (?:go|get) to\s+(.+)",
                r"(?:where is|where's|find|looking for)\s+(.+)",
                r"^(?:go|get|head) to\s+(.+)",
            ],
        }

        # Polite fillers stripped from the front of a phrase
        self.stopwords = {
            "please", "kindly", "could you", "can you", "would you",
            "hey", "hi", "hello", "assistant", "okay", "ok", "um", "uh",
        }

        # Common misrecognitions from browser speech engines
        self.misrecognitions = {
            "take me too": "take me to",
            "take me two": "take me to",
            "my name his": "my name is",
            "libary": "library",
            "cafeteria's": "cafeteria",
        }

        self.trailing = re.compile(r"\s*(?:please|thanks|thank you|now|right now)\s*$")
        self.articles = re.compile(r"^(?:the|a|an)\s+")

    def normalize(self, text: str) -> str:
        text = text.lower().strip()
        text = re.sub(r"[^\w\s'\-]", " ", text)
        text = re.sub(r"\s+", " ", text).strip()

        changed = True
        while changed:
            changed = False
            for sw in self.stopwords:
                if text == sw:
                    text = ""
                elif text.startswith(sw + " "):
                    text = text[len(sw) + 1:]
                    changed = True

        for wrong, right in self.misrecognitions.items():
            if wrong in text:
                text = text.replace(wrong, right)
        return text.strip()

    def _clean_entity(self, entity: str) -> str:
        entity = entity.strip()
        prev = None
        while prev != entity:
            prev = entity
            entity = self.trailing.sub("", entity).strip()
            entity = self.articles.sub("", entity).strip()
        return entity

    def name(self, text: str) -> Optional[str]:
        normalized = self.normalize(text)
        if not normalized:
            return None
        for pattern in self.patterns['name']:
            match = re.search(pattern, normalized)
            if match:
                return self._clean_entity(match.group(1)).title() or None
        # a bare one or two word answer is taken as the name
        words = normalized.split()
        if 1 <= len(words) <= 2:
            return normalized.title()
        return None

    def destination(self, text: str) -> Optional[str]:
        normalized = self.normalize(text)
        if not normalized:
            return None
        for pattern in self.patterns['destination']:
            match = re.search(pattern, normalized)
            if match:
                entity = self._clean_entity(match.group(1))
                return entity.title() or None
        entity = self._clean_entity(normalized)
        return entity.title() or None

    def general(self, text: str) -> Extraction:
        normalized = self.normalize(text)
        for pattern in self.patterns['destination']:
            if re.search(pattern, normalized):
                return Extraction("GENERAL", self.destination(text), intent="navigate")
        if re.search(r"\btour\b", normalized):
            return Extraction("GENERAL", "Campus Tour", intent="navigate")
        for pattern in self.patterns['name']:
            if re.search(pattern, normalized):
                return Extraction("GENERAL", self.name(text), intent="identify")
        return Extraction("GENERAL", None, intent="unknown")

    def extract(self, text: str, context: str) -> Extraction:
        if context == "NAME":
            return Extraction(context, self.name(text))
        if context == "DESTINATION":
            return Extraction(context, self.destination(text))
        return self.general(text)


def clean_model_output(output: str, context: str) -> str:
    output = output.strip()
    output = re.sub(r"^```(?:json)?\s*", "", output)
    output = re.sub(r"\s*```$", "", output)
    if context in ("NAME", "DESTINATION"):
        output = re.sub(r"[\"'.]", "", output).strip()
    return output


class IntentExtractor:
    """
    Resolves free text into a name, a destination or a general intent.

    The generative-language model is used when an API key is configured;
    otherwise, and whenever the call fails, the rule-based extractor answers.
    """

    def __init__(self, api_key: Optional[str] = None, model: str = "gemini-2.0-flash", client=None):
        self.model = model
        self.rules = RuleExtractor()
        self.client = client
        if self.client is None and api_key:
            self.client = genai.Client(api_key=api_key)

    @property
    def uses_model(self) -> bool:
        return self.client is not None

    def extract(self, text: str, context: str = "GENERAL") -> Extraction:
        if not text or not text.strip():
            return Extraction(context, None, intent="unknown" if context == "GENERAL" else None)
        if context not in PROMPTS:
            raise ValueError(f"unknown extraction context: {context}")

        if self.client is None:
            logger.debug("no model configured, using rule extraction for %s", context)
            return self.rules.extract(text, context)

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=PROMPTS[context].format(text=text),
            )
            output = clean_model_output(response.text or "", context)
        except Exception as e:
            # the remote API is best effort
            logger.error("intent model call failed (%s), using rule extraction", type(e).__name__)
            return self.rules.extract(text, context)

        if context == "GENERAL":
            try:
                data = json.loads(output)
            except ValueError:
                logger.warning("model returned non-JSON intent, using rule extraction")
                return self.rules.extract(text, context)
            intent = data.get("intent") if isinstance(data, dict) else None
            if intent not in INTENTS:
                logger.warning("model returned an unexpected intent shape, using rule extraction")
                return self.rules.extract(text, context)
            entity = data.get("entity")
            if not isinstance(entity, str) or not entity:
                entity = None
            return Extraction(context, entity, intent=intent, source="model")

        if not output or output.upper() == UNKNOWN:
            return Extraction(context, None, source="model")
        return Extraction(context, output, source="model")

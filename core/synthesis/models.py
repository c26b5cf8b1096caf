from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ScriptPreference(str, Enum):
    NATIVE = "native"
    TRANSLITERATION = "transliteration"


class AccessibilityMode(str, Enum):
    NORMAL = "normal"
    EASY = "easy"      # simpler words
    LONG = "long"      # extra spacing
    AUDIO = "audio"    # speech-friendly phrasing


class ConversationMode(str, Enum):
    """Feature-specific instruction block selected by the calling handler."""

    GENERAL = "general"
    SYMPTOM_CHECK = "symptom_check"
    DISEASE_AWARENESS = "disease_awareness"
    PREVENTIVE_TIPS = "preventive_tips"


class Origin(str, Enum):
    FRESH = "fresh"
    FALLBACK = "fallback"


class ContextEntry(BaseModel):
    """One line of the context window as the prompt renders it."""

    role: str      # "user" or "assistant"
    content: str


class GenerationRequest(BaseModel):
    """
    Everything the synthesis engine needs for one oracle call.

    Never persisted; built by a handler and consumed within one turn.
    """

    instructions: str
    user_message: str = ""
    context_window: List[ContextEntry] = Field(default_factory=list)
    accessibility_modifier: AccessibilityMode = AccessibilityMode.NORMAL
    emergency_flag: bool = False
    language: str = "en"
    script_preference: ScriptPreference = ScriptPreference.NATIVE
    mode: ConversationMode = ConversationMode.GENERAL


class GenerationResult(BaseModel):
    text: str
    origin: Origin
    attempts: int = 0
    failure: Optional[str] = None  # error class name when origin is fallback

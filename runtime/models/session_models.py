"""
Session-related models for the dialogue runtime.

These describe:
- Session: the per-user dialogue state with its sliding expiry
- Message: one inbound message from the transport
- Turn: one entry of the append-only context log (user or assistant)
- UserProfile: preferences that outlive a session (language, script, accessibility)
- OutboundMessage / TurnOutcome: what a turn produces for the transport
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from core.interpreter.models import DialogueState, Intent
from core.localization.templates import MenuOption
from core.synthesis.models import AccessibilityMode, Origin, ScriptPreference


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageKind(str, Enum):
    TEXT = "text"
    INTERACTIVE = "interactive"  # button / list reply carrying an option id
    MEDIA = "media"              # image / audio; content holds the caption


class TurnRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    content: str = ""
    kind: MessageKind = MessageKind.TEXT
    language: Optional[str] = None  # transport-detected language, if any
    timestamp: datetime = Field(default_factory=utcnow)


class Turn(BaseModel):
    user_id: str
    role: TurnRole
    content: str
    intent: Optional[Intent] = None
    state_before: Optional[DialogueState] = None
    state_after: Optional[DialogueState] = None
    language: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)


class Session(BaseModel):
    user_id: str
    state: DialogueState = DialogueState.UNINITIALIZED
    context: Dict[str, Any] = Field(default_factory=dict)  # awaiting, tips_category, ...
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class UserProfile(BaseModel):
    user_id: str
    language: Optional[str] = None
    script_preference: ScriptPreference = ScriptPreference.NATIVE
    accessibility_mode: AccessibilityMode = AccessibilityMode.NORMAL
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class OutboundMessage(BaseModel):
    """
    One message for the transport: plain text, a structured option list, or
    both (the text is then the list's body).
    """

    text: Optional[str] = None
    title: Optional[str] = None
    options: List[MenuOption] = Field(default_factory=list)

    @model_validator(mode="after")
    def _not_empty(self) -> "OutboundMessage":
        if not self.text and not self.options:
            raise ValueError("OutboundMessage needs text or options")
        return self

    @property
    def has_options(self) -> bool:
        return bool(self.options)


class TurnOutcome(BaseModel):
    """Result of one `DialogueController.handle_turn` call."""

    user_id: str
    intent: Intent
    previous_state: DialogueState
    state: DialogueState
    replies: List[OutboundMessage] = Field(default_factory=list)
    generation: Optional[Origin] = None  # set when the oracle was consulted
    persisted: bool = True               # False if the session write failed

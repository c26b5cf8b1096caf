"""
HTTP request/response models for the dialogue runtime API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.interpreter.models import DialogueState, Intent
from .session_models import MessageKind


class InboundMessageRequest(BaseModel):
    user_id: str = Field(min_length=1)
    content: str = ""
    kind: MessageKind = MessageKind.TEXT
    language: Optional[str] = None
    timestamp: Optional[datetime] = None


class RenderedReply(BaseModel):
    """
    One outbound message after transport formatting.

    type:
      - "text":    `text` only (including degraded option lists)
      - "options": `text` as body plus `options`
    """
    type: str
    text: Optional[str] = None
    title: Optional[str] = None
    options: List[Dict[str, Any]] = Field(default_factory=list)


class TurnResponse(BaseModel):
    user_id: str
    intent: Intent
    state: DialogueState
    replies: List[RenderedReply]


class SessionSnapshot(BaseModel):
    user_id: str
    state: DialogueState
    context: Dict[str, Any]
    updated_at: datetime
    expires_at: Optional[datetime] = None
    language: Optional[str] = None


class ResetResponse(BaseModel):
    user_id: str
    cleared: bool


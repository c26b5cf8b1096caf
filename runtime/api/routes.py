"""HTTP routes for the dialogue runtime.

Exposes endpoints like:

- POST   /webhook/message      -> one inbound message in, rendered replies out
- GET    /sessions/{user_id}   -> current session snapshot (404 if none)
- DELETE /sessions/{user_id}   -> reset the user's session
- GET    /healthz              -> liveness check
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from core.interpreter.models import DialogueState, Intent
from core.localization.templates import TemplateStore
from exceptions.exceptions import PersistenceError
from ..agents.dialogue_controller import DialogueController
from ..models.api_models import (
    InboundMessageRequest,
    RenderedReply,
    ResetResponse,
    SessionSnapshot,
    TurnResponse,
)
from ..models.session_models import Message
from ..transport.formatter import render_all


logger = logging.getLogger(__name__)

# Router for all dialogue endpoints
router = APIRouter()


# Module-level references, to be initialized by the server.
_CONTROLLER: Optional[DialogueController] = None


def init_routes(controller: DialogueController) -> None:
    """Initialize module-level references used by the route handlers."""
    global _CONTROLLER
    _CONTROLLER = controller


def _require_controller() -> DialogueController:
    if _CONTROLLER is None:
        raise HTTPException(
            status_code=500,
            detail="DialogueController is not configured on the server.",
        )
    return _CONTROLLER


def _error_reply(templates: TemplateStore, language: Optional[str]) -> RenderedReply:
    text = templates.get_template("error", language or "en")
    return RenderedReply(type="text", text=text)


@router.post("/webhook/message", response_model=TurnResponse)
async def receive_message(request: InboundMessageRequest) -> TurnResponse:
    """Handle a single inbound message for a user.

    Delegates to DialogueController, which never raises for storage or
    oracle failures. Anything else is logged with a traceback and answered
    with a generic localized error message so the user is never left
    without a reply.
    """
    controller = _require_controller()

    message = Message(
        content=request.content,
        kind=request.kind,
        language=request.language,
    )
    if request.timestamp is not None:
        message.timestamp = request.timestamp

    try:
        outcome = await controller.handle_turn(request.user_id, message)
    except Exception:
        logger.exception(
            "[WEBHOOK] Unexpected error for user_id=%s kind=%s",
            request.user_id,
            request.kind.value,
        )
        return TurnResponse(
            user_id=request.user_id,
            intent=Intent.GENERAL_MESSAGE,
            state=DialogueState.UNINITIALIZED,
            replies=[_error_reply(controller.templates, request.language)],
        )

    rendered = render_all(outcome.replies)
    return TurnResponse(
        user_id=outcome.user_id,
        intent=outcome.intent,
        state=outcome.state,
        replies=[RenderedReply(**reply) for reply in rendered],
    )


@router.get("/sessions/{user_id}", response_model=SessionSnapshot)
async def get_session(user_id: str) -> SessionSnapshot:
    controller = _require_controller()
    try:
        session = await controller.session_store.get_session(user_id)
        profile = await controller.profile_store.get_profile(user_id)
    except PersistenceError as e:
        logger.warning("[SESSIONS] Read failed for user_id=%s: %s", user_id, e)
        raise HTTPException(status_code=503, detail="Session storage unavailable")

    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionSnapshot(
        user_id=session.user_id,
        state=session.state,
        context=session.context,
        updated_at=session.updated_at,
        expires_at=session.expires_at,
        language=profile.language if profile is not None else None,
    )


@router.delete("/sessions/{user_id}", response_model=ResetResponse)
async def reset_session(user_id: str) -> ResetResponse:
    """Clear the user's session; their language preferences are kept."""
    controller = _require_controller()
    try:
        async with controller.session_store.lock_for(user_id):
            cleared = await controller.session_store.delete_session(user_id)
    except PersistenceError as e:
        logger.warning("[SESSIONS] Delete failed for user_id=%s: %s", user_id, e)
        raise HTTPException(status_code=503, detail="Session storage unavailable")
    return ResetResponse(user_id=user_id, cleared=cleared)


# --------------------------------------------------------
# Endpoint: GET /healthz
# --------------------------------------------------------
@router.get("/healthz")
def health_check():
    """
    Simple health check endpoint for uptime monitoring.
    """
    return {"status": "ok"}

"""DialogueController implementation.

Responsible for one turn of one user:

- reading the session (fail-open: unreadable or expired = no session)
- classifying the inbound message against the current state
- asking the pure state machine for the next state and handler
- running the handler (canned template, synthesis, or both)
- writing the session back and appending the turn to the context log
  (fail-soft: write failures are logged, the reply is still returned)

Turns of the same user are serialized with the session store's per-user
lock; turns of different users run concurrently.

Every `Handler` must have an implementation here. The mapping is checked at
construction and a missing entry raises TransitionError.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from configs.settings import settings
from core.interpreter import intent_classifier as classifier
from core.interpreter.models import DialogueState, Intent
from core.interpreter.phrase_tables import (
    ACCESSIBILITY_COMMANDS,
    PREVENTIVE_TIPS_CATEGORY_IDS,
)
from core.localization.templates import TemplateStore
from core.synthesis.models import (
    AccessibilityMode,
    ContextEntry,
    ConversationMode,
    GenerationRequest,
    Origin,
    ScriptPreference,
)
from core.synthesis.response_engine import ResponseSynthesisEngine
from exceptions.exceptions import PersistenceError, TransitionError
from .transitions import Handler, TurnFacts, transition, validate_rules
from ..models.session_models import (
    Message,
    MessageKind,
    OutboundMessage,
    Session,
    Turn,
    TurnOutcome,
    TurnRole,
    UserProfile,
)
from ..store.log_store import ContextLog
from ..store.profile_store import ProfileStore
from ..store.session_store import SessionStore


logger = logging.getLogger(__name__)

AWAITING_DISEASE_NAME = "disease_name"
AWAITING_FEEDBACK = "feedback"

_TIP_TOPICS: Dict[str, str] = {
    "nutrition_hygiene": "Nutrition and hygiene: balanced diet, safe water, hand washing.",
    "exercise_lifestyle": "Exercise and lifestyle: physical activity, sleep, stress, tobacco and alcohol.",
}


@dataclass
class TurnContext:
    """Mutable working state of one turn, shared by the handlers."""

    user_id: str
    message: Message
    session: Session
    profile: UserProfile
    intent: Intent
    previous_state: DialogueState
    next_state: DialogueState
    language: str
    history: List[Turn] = field(default_factory=list)
    replies: List[OutboundMessage] = field(default_factory=list)
    generation: Optional[Origin] = None
    profile_changed: bool = False

    @property
    def script(self) -> ScriptPreference:
        return self.profile.script_preference

    @property
    def emergency_flag(self) -> bool:
        """True when the user's previous turn was an emergency."""
        for turn in reversed(self.history):
            if turn.role is TurnRole.USER:
                return turn.intent is Intent.EMERGENCY
        return False


HandlerFn = Callable[[TurnContext], Awaitable[None]]


class DialogueController:
    """Turn orchestration for the health assistant.

    Parameters
    ----------
    session_store:
        Store used to load and persist Session objects; also provides the
        per-user lock.
    profile_store:
        Store for language / script / accessibility preferences.
    context_log:
        Append-only turn log; the last `context_window` entries are passed
        to the synthesis engine.
    engine:
        Response synthesis engine wrapping the generation oracle.
    templates:
        Localized canned texts and menus.
    """

    def __init__(
        self,
        session_store: SessionStore,
        profile_store: ProfileStore,
        context_log: ContextLog,
        engine: ResponseSynthesisEngine,
        templates: Optional[TemplateStore] = None,
        *,
        context_window: Optional[int] = None,
        default_language: Optional[str] = None,
        emergency_number: Optional[str] = None,
    ) -> None:
        self.session_store = session_store
        self.profile_store = profile_store
        self.context_log = context_log
        self.engine = engine
        self.templates = templates or TemplateStore()
        self.context_window = (
            context_window if context_window is not None else settings.context_window
        )
        self.default_language = default_language or settings.default_language
        self.emergency_number = emergency_number or settings.emergency_number

        self._handlers: Dict[Handler, HandlerFn] = {
            Handler.ONBOARDING: self._onboarding,
            Handler.LANGUAGE_MENU: self._language_menu,
            Handler.LANGUAGE_SELECT: self._language_select,
            Handler.LANGUAGE_INVALID: self._language_invalid,
            Handler.SCRIPT_SELECT: self._script_select,
            Handler.SCRIPT_INVALID: self._script_invalid,
            Handler.MAIN_MENU: self._main_menu,
            Handler.MORE_OPTIONS: self._more_options,
            Handler.AI_CHAT_START: self._ai_chat_start,
            Handler.AI_CHAT_MESSAGE: self._ai_chat_message,
            Handler.SYMPTOM_CHECK_START: self._symptom_check_start,
            Handler.SYMPTOM_INPUT: self._symptom_input,
            Handler.PREVENTIVE_TIPS_START: self._preventive_tips_start,
            Handler.PREVENTIVE_TIPS_REQUEST: self._preventive_tips_request,
            Handler.DISEASE_INFO: self._disease_info,
            Handler.FEEDBACK_START: self._feedback_start,
            Handler.FEEDBACK_INPUT: self._feedback_input,
            Handler.COMING_SOON: self._coming_soon,
            Handler.EMERGENCY: self._emergency,
            Handler.ACCESSIBILITY: self._accessibility,
            Handler.GENERAL_QUERY: self._general_query,
            Handler.MEDIA: self._media,
        }
        self._check_dispatch()

    def _check_dispatch(self) -> None:
        validate_rules()
        missing = [handler.value for handler in Handler if handler not in self._handlers]
        if missing:
            raise TransitionError(f"No implementation for handlers: {', '.join(missing)}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def handle_turn(self, user_id: str, message: Message) -> TurnOutcome:
        """Process one inbound message and return the replies for it.

        Never raises for storage or oracle failures; the outcome always
        carries at least one reply.
        """
        async with self.session_store.lock_for(user_id):
            return await self._handle_turn(user_id, message)

    # ------------------------------------------------------------------
    # Turn pipeline
    # ------------------------------------------------------------------

    async def _handle_turn(self, user_id: str, message: Message) -> TurnOutcome:
        # (1) Read: session, profile, recent turns. All fail open.
        session = await self._read_session(user_id)
        profile = await self._read_profile(user_id)
        history = await self._read_history(user_id)

        language = self._language_for(profile, message)

        # (2) Decide: pure classification and transition.
        intent = classifier.classify(
            message.content,
            session.state,
            language,
            media=message.kind is MessageKind.MEDIA,
        )
        facts = self._facts(intent, message.content, profile)
        move = transition(session.state, intent, facts)

        turn = TurnContext(
            user_id=user_id,
            message=message,
            session=session,
            profile=profile,
            intent=intent,
            previous_state=session.state,
            next_state=move.next_state,
            language=language,
            history=history,
        )

        # (3) Execute the handler. A failing handler leaves the session and
        # profile exactly as they were read.
        session_before = session.model_copy(deep=True)
        profile_before = profile.model_copy(deep=True)
        try:
            await self._handlers[move.handler](turn)
        except Exception:
            logger.exception(
                "Handler %s failed for user=%s; keeping state %s",
                move.handler.value,
                user_id,
                turn.previous_state.value,
            )
            session = turn.session = session_before
            turn.profile = profile_before
            turn.profile_changed = False
            turn.language = language
            turn.generation = None
            turn.next_state = turn.previous_state
            turn.replies = [self._text(turn, "error")]

        session.state = turn.next_state

        # (4) Write: session, profile, context log. All fail soft.
        persisted = await self._write_session(session)
        if turn.profile_changed:
            await self._write_profile(turn.profile)
        await self._append_turns(turn)

        logger.info(
            "[TURN] user=%s state=%s intent=%s next=%s handler=%s",
            user_id,
            turn.previous_state.value,
            intent.value,
            turn.next_state.value,
            move.handler.value,
        )

        return TurnOutcome(
            user_id=user_id,
            intent=intent,
            previous_state=turn.previous_state,
            state=turn.next_state,
            replies=turn.replies,
            generation=turn.generation,
            persisted=persisted,
        )

    def _language_for(self, profile: UserProfile, message: Message) -> str:
        if profile.language:
            return profile.language
        if classifier.is_supported_language(message.language):
            return message.language
        return self.default_language

    @staticmethod
    def _facts(intent: Intent, content: str, profile: UserProfile) -> TurnFacts:
        chosen_language = None
        if intent is Intent.LANGUAGE_SELECT:
            chosen_language = classifier.parse_language_choice(content)
        return TurnFacts(
            has_language=profile.language is not None,
            chosen_language=chosen_language,
            offers_script_choice=(
                chosen_language is not None
                and classifier.offers_script_choice(chosen_language)
            ),
            script_choice_valid=(
                intent is Intent.SCRIPT_SELECT
                and classifier.parse_script_choice(content) is not None
            ),
        )

    # ------------------------------------------------------------------
    # Fail-soft persistence
    # ------------------------------------------------------------------

    async def _read_session(self, user_id: str) -> Session:
        try:
            session = await self.session_store.get_session(user_id)
        except PersistenceError:
            logger.warning("Session read failed for user=%s; starting fresh.", user_id, exc_info=True)
            session = None
        return session if session is not None else Session(user_id=user_id)

    async def _read_profile(self, user_id: str) -> UserProfile:
        try:
            profile = await self.profile_store.get_profile(user_id)
        except PersistenceError:
            logger.warning("Profile read failed for user=%s; using defaults.", user_id, exc_info=True)
            profile = None
        return profile if profile is not None else UserProfile(user_id=user_id)

    async def _read_history(self, user_id: str) -> List[Turn]:
        if self.context_window <= 0:
            return []
        try:
            return await self.context_log.get_recent_turns(user_id, self.context_window)
        except PersistenceError:
            logger.warning("Context log read failed for user=%s.", user_id, exc_info=True)
            return []

    async def _write_session(self, session: Session) -> bool:
        try:
            await self.session_store.put_session(session)
        except PersistenceError:
            logger.warning(
                "Session write failed for user=%s; reply is still delivered.",
                session.user_id,
                exc_info=True,
            )
            return False
        return True

    async def _write_profile(self, profile: UserProfile) -> None:
        try:
            await self.profile_store.save_profile(profile)
        except PersistenceError:
            logger.warning("Profile write failed for user=%s.", profile.user_id, exc_info=True)

    async def _append_turns(self, turn: TurnContext) -> None:
        entries = [
            Turn(
                user_id=turn.user_id,
                role=TurnRole.USER,
                content=turn.message.content,
                intent=turn.intent,
                state_before=turn.previous_state,
                state_after=turn.next_state,
                language=turn.language,
                timestamp=turn.message.timestamp,
            ),
            Turn(
                user_id=turn.user_id,
                role=TurnRole.ASSISTANT,
                content=_reply_text(turn.replies),
                intent=turn.intent,
                state_before=turn.previous_state,
                state_after=turn.next_state,
                language=turn.language,
            ),
        ]
        for entry in entries:
            try:
                await self.context_log.append_turn(entry)
            except PersistenceError:
                logger.warning("Context log append failed for user=%s.", turn.user_id, exc_info=True)
                return

    # ------------------------------------------------------------------
    # Reply helpers
    # ------------------------------------------------------------------

    def _text(self, turn: TurnContext, key: str, **values: object) -> OutboundMessage:
        return OutboundMessage(
            text=self.templates.get_template(key, turn.language, turn.script, **values)
        )

    def _menu(
        self,
        turn: TurnContext,
        menu_key: str,
        text_key: str,
        title_key: Optional[str] = None,
    ) -> OutboundMessage:
        title = None
        if title_key is not None:
            title = self.templates.get_template(title_key, turn.language, turn.script)
        return OutboundMessage(
            text=self.templates.get_template(text_key, turn.language, turn.script),
            title=title,
            options=self.templates.get_menu(menu_key, turn.language, turn.script),
        )

    async def _synthesize(
        self,
        turn: TurnContext,
        mode: ConversationMode,
        user_message: str,
        instructions: str = "",
    ) -> OutboundMessage:
        request = GenerationRequest(
            instructions=instructions,
            user_message=user_message,
            context_window=[
                ContextEntry(role=entry.role.value, content=entry.content)
                for entry in turn.history
                if entry.content
            ],
            accessibility_modifier=turn.profile.accessibility_mode,
            emergency_flag=turn.emergency_flag,
            language=turn.language,
            script_preference=turn.script,
            mode=mode,
        )
        result = await self.engine.synthesize(request)
        turn.generation = result.origin
        return OutboundMessage(text=result.text)

    # ------------------------------------------------------------------
    # Handlers: onboarding
    # ------------------------------------------------------------------

    async def _onboarding(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(
            self._menu(turn, "language_menu", "welcome", "language_menu_title")
        )

    async def _language_menu(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(
            self._menu(turn, "language_menu", "language_menu_title", "language_menu_title")
        )

    async def _language_select(self, turn: TurnContext) -> None:
        language = classifier.parse_language_choice(turn.message.content)
        if language is None:
            # transition() only routes here with a valid choice.
            raise TransitionError("language_select handler without a language choice")

        turn.profile.language = language
        if not classifier.offers_script_choice(language):
            turn.profile.script_preference = ScriptPreference.NATIVE
        turn.profile_changed = True
        turn.language = language

        turn.replies.append(
            self._text(
                turn,
                "language_success",
                language_name=self.templates.language_name(language, turn.script),
            )
        )
        if turn.next_state is DialogueState.SCRIPT_SELECTION:
            turn.replies.append(self._menu(turn, "script_menu", "script_prompt"))
        else:
            turn.session.context.clear()
            turn.replies.append(self._menu(turn, "main_menu", "main_menu"))

    async def _language_invalid(self, turn: TurnContext) -> None:
        turn.replies.append(
            self._menu(turn, "language_menu", "invalid_language", "language_menu_title")
        )

    async def _script_select(self, turn: TurnContext) -> None:
        preference = classifier.parse_script_choice(turn.message.content)
        if preference is None:
            raise TransitionError("script_select handler without a script choice")

        turn.profile.script_preference = preference
        turn.profile_changed = True
        turn.session.context.clear()
        turn.replies.append(self._menu(turn, "main_menu", "main_menu"))

    async def _script_invalid(self, turn: TurnContext) -> None:
        turn.replies.append(self._menu(turn, "script_menu", "invalid_script"))

    # ------------------------------------------------------------------
    # Handlers: menus
    # ------------------------------------------------------------------

    async def _main_menu(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(self._menu(turn, "main_menu", "main_menu"))

    async def _more_options(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(self._menu(turn, "more_options", "more_options"))

    async def _coming_soon(self, turn: TurnContext) -> None:
        turn.replies.append(self._text(turn, "coming_soon"))

    # ------------------------------------------------------------------
    # Handlers: conversational features
    # ------------------------------------------------------------------

    async def _ai_chat_start(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(self._text(turn, "ai_chat_instructions"))

    async def _ai_chat_message(self, turn: TurnContext) -> None:
        turn.replies.append(
            await self._synthesize(turn, ConversationMode.GENERAL, turn.message.content)
        )

    async def _symptom_check_start(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(self._text(turn, "symptom_prompt"))

    async def _symptom_input(self, turn: TurnContext) -> None:
        turn.replies.append(
            await self._synthesize(turn, ConversationMode.SYMPTOM_CHECK, turn.message.content)
        )

    async def _preventive_tips_start(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.replies.append(self._menu(turn, "tips_categories", "tips_categories"))

    async def _preventive_tips_request(self, turn: TurnContext) -> None:
        content = turn.message.content
        normalized = classifier.normalize_input(content)
        category = (
            normalized
            if normalized in PREVENTIVE_TIPS_CATEGORY_IDS
            else classifier.option_by_number(normalized, PREVENTIVE_TIPS_CATEGORY_IDS)
        )

        if category == "learn_diseases":
            await self._disease_info(turn)
            return

        context = turn.session.context
        if category is not None:
            context.pop("awaiting", None)
            context["tips_category"] = category
            turn.replies.append(
                await self._synthesize(
                    turn,
                    ConversationMode.PREVENTIVE_TIPS,
                    user_message="",
                    instructions=f"Topic: {_TIP_TOPICS[category]}",
                )
            )
            return

        if context.get("awaiting") == AWAITING_DISEASE_NAME:
            context.pop("awaiting", None)
            turn.replies.append(
                await self._synthesize(turn, ConversationMode.DISEASE_AWARENESS, content)
            )
            return

        topic = _TIP_TOPICS.get(context.get("tips_category", ""), "")
        turn.replies.append(
            await self._synthesize(
                turn,
                ConversationMode.PREVENTIVE_TIPS,
                content,
                instructions=f"Topic: {topic}" if topic else "",
            )
        )

    async def _disease_info(self, turn: TurnContext) -> None:
        turn.session.context["awaiting"] = AWAITING_DISEASE_NAME
        turn.session.context.pop("tips_category", None)
        turn.replies.append(self._text(turn, "disease_name_prompt"))

    async def _feedback_start(self, turn: TurnContext) -> None:
        turn.session.context.clear()
        turn.session.context["awaiting"] = AWAITING_FEEDBACK
        turn.replies.append(self._text(turn, "feedback_prompt"))

    async def _feedback_input(self, turn: TurnContext) -> None:
        # The feedback text itself is kept in the context log as the user turn.
        logger.info("Feedback received from user=%s (%d chars)", turn.user_id, len(turn.message.content))
        turn.session.context.clear()
        turn.replies.append(self._text(turn, "feedback_thanks"))
        turn.replies.append(self._menu(turn, "main_menu", "main_menu"))

    # ------------------------------------------------------------------
    # Handlers: sentinels and free text
    # ------------------------------------------------------------------

    async def _emergency(self, turn: TurnContext) -> None:
        turn.replies.append(self._text(turn, "emergency_detected", number=self.emergency_number))

    async def _accessibility(self, turn: TurnContext) -> None:
        command, mode = classifier.parse_accessibility_command(turn.message.content)

        if mode is not None:
            turn.profile.accessibility_mode = mode
            turn.profile_changed = True
            turn.replies.append(
                self._text(turn, "accessibility_updated", mode=_mode_label(mode))
            )
            return

        if command in ACCESSIBILITY_COMMANDS:
            # Known command without a mode of its own (visual posters).
            turn.replies.append(self._text(turn, "coming_soon"))
            return

        commands = "\n".join(
            f"{name} - {description}" for name, description in ACCESSIBILITY_COMMANDS.items()
        )
        turn.replies.append(self._text(turn, "accessibility_help", commands=commands))

    async def _general_query(self, turn: TurnContext) -> None:
        turn.replies.append(
            await self._synthesize(turn, ConversationMode.GENERAL, turn.message.content)
        )
        turn.replies.append(self._menu(turn, "quick_actions", "quick_actions"))

    async def _media(self, turn: TurnContext) -> None:
        caption = turn.message.content or ""
        turn.replies.append(
            await self._synthesize(
                turn,
                ConversationMode.GENERAL,
                caption,
                instructions=(
                    "The user sent an image or voice note that you cannot see or "
                    "hear. Respond to the caption if there is one, and ask them to "
                    "describe their concern in words."
                ),
            )
        )


def _mode_label(mode: AccessibilityMode) -> str:
    return mode.value.capitalize()


def _reply_text(replies: List[OutboundMessage]) -> str:
    parts: List[str] = []
    for reply in replies:
        if reply.text:
            parts.append(reply.text)
        if reply.options:
            parts.append(" | ".join(option.label for option in reply.options))
    return "\n".join(parts)

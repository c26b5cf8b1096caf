"""
Pure dialogue state machine.

`transition(state, intent, facts) -> Transition(next_state, handler)` decides
where a turn goes without touching storage or the network. The controller
computes `TurnFacts` with the pure selection parsers before calling it and
executes the returned handler afterwards.

Rules (highest first):

- Emergency and accessibility commands never change the state.
- An uninitialized session routes to onboarding: the language menu, or the
  main menu when a language is already on record. A valid language choice
  is applied directly.
- MenuRequest / HelpRequest go to MainMenu and ChangeLanguage goes to
  LanguageSelection from every state.
- Onboarding states re-prompt for anything that is not a valid choice.
- Feature intents enter their state; continuation intents stay in it.
- Greetings, inquiries and general messages land in MainMenu, whose options
  they show. Inside Feedback they are the feedback.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from core.interpreter.models import DialogueState, Intent
from exceptions.exceptions import TransitionError


class Handler(str, Enum):
    ONBOARDING = "onboarding"
    LANGUAGE_MENU = "language_menu"
    LANGUAGE_SELECT = "language_select"
    LANGUAGE_INVALID = "language_invalid"
    SCRIPT_SELECT = "script_select"
    SCRIPT_INVALID = "script_invalid"
    MAIN_MENU = "main_menu"
    MORE_OPTIONS = "more_options"
    AI_CHAT_START = "ai_chat_start"
    AI_CHAT_MESSAGE = "ai_chat_message"
    SYMPTOM_CHECK_START = "symptom_check_start"
    SYMPTOM_INPUT = "symptom_input"
    PREVENTIVE_TIPS_START = "preventive_tips_start"
    PREVENTIVE_TIPS_REQUEST = "preventive_tips_request"
    DISEASE_INFO = "disease_info"
    FEEDBACK_START = "feedback_start"
    FEEDBACK_INPUT = "feedback_input"
    COMING_SOON = "coming_soon"
    EMERGENCY = "emergency"
    ACCESSIBILITY = "accessibility"
    GENERAL_QUERY = "general_query"
    MEDIA = "media"


@dataclass(frozen=True)
class TurnFacts:
    """Pure facts about the turn the state machine may branch on."""

    has_language: bool = False                 # a language is on record
    chosen_language: Optional[str] = None      # valid language parsed from this input
    offers_script_choice: bool = False         # chosen_language has a script menu
    script_choice_valid: bool = False          # input names a script option


@dataclass(frozen=True)
class Transition:
    next_state: DialogueState
    handler: Handler


_ONBOARDING = frozenset({DialogueState.LANGUAGE_SELECTION, DialogueState.SCRIPT_SELECTION})

# Intents an onboarding state accepts without re-prompting.
_ONBOARDING_ACCEPTED = frozenset(
    {
        Intent.EMERGENCY,
        Intent.ACCESSIBILITY_COMMAND,
        Intent.MENU_REQUEST,
        Intent.HELP_REQUEST,
        Intent.CHANGE_LANGUAGE,
        Intent.LANGUAGE_SELECT,
        Intent.SCRIPT_SELECT,
    }
)

Rule = Callable[[DialogueState, TurnFacts], Transition]


def _stay(handler: Handler) -> Rule:
    return lambda state, facts: Transition(state, handler)


def _enter(next_state: DialogueState, handler: Handler) -> Rule:
    return lambda state, facts: Transition(next_state, handler)


def _language_select(state: DialogueState, facts: TurnFacts) -> Transition:
    if facts.chosen_language is None:
        return Transition(state, Handler.LANGUAGE_INVALID)
    if facts.offers_script_choice:
        return Transition(DialogueState.SCRIPT_SELECTION, Handler.LANGUAGE_SELECT)
    return Transition(DialogueState.MAIN_MENU, Handler.LANGUAGE_SELECT)


def _script_select(state: DialogueState, facts: TurnFacts) -> Transition:
    if not facts.script_choice_valid:
        return Transition(state, Handler.SCRIPT_INVALID)
    return Transition(DialogueState.MAIN_MENU, Handler.SCRIPT_SELECT)


def _main_menu_reply(default: Handler) -> Rule:
    """
    Replies that show main-menu options land in MainMenu, so a typed number
    afterwards resolves against the options just shown. Free text inside
    Feedback is the feedback itself.
    """

    def rule(state: DialogueState, facts: TurnFacts) -> Transition:
        if state is DialogueState.FEEDBACK:
            return Transition(DialogueState.MAIN_MENU, Handler.FEEDBACK_INPUT)
        return Transition(DialogueState.MAIN_MENU, default)

    return rule


RULES: Dict[Intent, Rule] = {
    Intent.EMERGENCY: _stay(Handler.EMERGENCY),
    Intent.ACCESSIBILITY_COMMAND: _stay(Handler.ACCESSIBILITY),
    Intent.MENU_REQUEST: _enter(DialogueState.MAIN_MENU, Handler.MAIN_MENU),
    Intent.HELP_REQUEST: _enter(DialogueState.MAIN_MENU, Handler.MAIN_MENU),
    Intent.CHANGE_LANGUAGE: _enter(DialogueState.LANGUAGE_SELECTION, Handler.LANGUAGE_MENU),
    Intent.GREETING: _main_menu_reply(Handler.MAIN_MENU),
    Intent.LANGUAGE_SELECT: _language_select,
    Intent.SCRIPT_SELECT: _script_select,
    Intent.MORE_OPTIONS: _enter(DialogueState.MORE_OPTIONS, Handler.MORE_OPTIONS),
    Intent.AI_CHAT: _enter(DialogueState.AI_CHAT, Handler.AI_CHAT_START),
    Intent.AI_CHAT_MESSAGE: _enter(DialogueState.AI_CHAT, Handler.AI_CHAT_MESSAGE),
    Intent.SYMPTOM_CHECK: _enter(DialogueState.SYMPTOM_CHECK, Handler.SYMPTOM_CHECK_START),
    Intent.SYMPTOM_INPUT: _enter(DialogueState.SYMPTOM_CHECK, Handler.SYMPTOM_INPUT),
    Intent.PREVENTIVE_TIPS: _enter(DialogueState.PREVENTIVE_TIPS, Handler.PREVENTIVE_TIPS_START),
    Intent.PREVENTIVE_TIPS_REQUEST: _enter(
        DialogueState.PREVENTIVE_TIPS, Handler.PREVENTIVE_TIPS_REQUEST
    ),
    Intent.DISEASE_INFO_REQUEST: _enter(DialogueState.PREVENTIVE_TIPS, Handler.DISEASE_INFO),
    Intent.FEEDBACK: _enter(DialogueState.FEEDBACK, Handler.FEEDBACK_START),
    Intent.FEEDBACK_INPUT: _enter(DialogueState.MAIN_MENU, Handler.FEEDBACK_INPUT),
    Intent.APPOINTMENTS: _stay(Handler.COMING_SOON),
    Intent.OUTBREAK_ALERTS: _stay(Handler.COMING_SOON),
    Intent.SYMPTOM_INQUIRY: _main_menu_reply(Handler.GENERAL_QUERY),
    Intent.VACCINATION_INQUIRY: _main_menu_reply(Handler.GENERAL_QUERY),
    Intent.NUTRITION_INQUIRY: _main_menu_reply(Handler.GENERAL_QUERY),
    Intent.GENERAL_MESSAGE: _main_menu_reply(Handler.GENERAL_QUERY),
    Intent.MEDIA_MESSAGE: _stay(Handler.MEDIA),
}


def validate_rules(rules: Dict[Intent, Rule] = RULES) -> None:
    """Raise TransitionError unless every Intent has a rule."""
    missing = [intent.value for intent in Intent if intent not in rules]
    if missing:
        raise TransitionError(f"No transition rule for intents: {', '.join(missing)}")


def transition(
    state: DialogueState,
    intent: Intent,
    facts: TurnFacts = TurnFacts(),
) -> Transition:
    """Return the next state and the handler to run for (state, intent)."""
    rule = RULES.get(intent)
    if rule is None:
        raise TransitionError(f"No transition rule for intent {intent.value!r}")

    if intent in (Intent.EMERGENCY, Intent.ACCESSIBILITY_COMMAND):
        return rule(state, facts)

    if state is DialogueState.UNINITIALIZED:
        if intent is Intent.LANGUAGE_SELECT and facts.chosen_language is not None:
            return _language_select(state, facts)
        if facts.has_language:
            return Transition(DialogueState.MAIN_MENU, Handler.MAIN_MENU)
        return Transition(DialogueState.LANGUAGE_SELECTION, Handler.ONBOARDING)

    if state in _ONBOARDING and intent not in _ONBOARDING_ACCEPTED:
        if state is DialogueState.LANGUAGE_SELECTION:
            return Transition(state, Handler.LANGUAGE_INVALID)
        return Transition(state, Handler.SCRIPT_INVALID)

    return rule(state, facts)


validate_rules()

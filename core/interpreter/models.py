"""
Closed enumerations and rule types shared by the classifier and the
dialogue controller.

The enums are `str` enums so they serialize as plain strings in sessions,
context log records and HTTP responses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class DialogueState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LANGUAGE_SELECTION = "language_selection"
    SCRIPT_SELECTION = "script_selection"
    MAIN_MENU = "main_menu"
    AI_CHAT = "ai_chat"
    SYMPTOM_CHECK = "symptom_check"
    PREVENTIVE_TIPS = "preventive_tips"
    FEEDBACK = "feedback"
    MORE_OPTIONS = "more_options"


class Intent(str, Enum):
    # Onboarding / navigation
    GREETING = "greeting"
    MENU_REQUEST = "menu_request"
    HELP_REQUEST = "help_request"
    CHANGE_LANGUAGE = "change_language"
    LANGUAGE_SELECT = "language_select"
    SCRIPT_SELECT = "script_select"
    MORE_OPTIONS = "more_options"

    # Feature entry points and their continuation intents
    AI_CHAT = "ai_chat"
    AI_CHAT_MESSAGE = "ai_chat_message"
    SYMPTOM_CHECK = "symptom_check"
    SYMPTOM_INPUT = "symptom_input"
    PREVENTIVE_TIPS = "preventive_tips"
    PREVENTIVE_TIPS_REQUEST = "preventive_tips_request"
    DISEASE_INFO_REQUEST = "disease_info_request"
    FEEDBACK = "feedback"
    FEEDBACK_INPUT = "feedback_input"
    APPOINTMENTS = "appointments"
    OUTBREAK_ALERTS = "outbreak_alerts"

    # Sentinels
    EMERGENCY = "emergency"
    ACCESSIBILITY_COMMAND = "accessibility_command"

    # Health-topic inquiries outside a feature state
    SYMPTOM_INQUIRY = "symptom_inquiry"
    VACCINATION_INQUIRY = "vaccination_inquiry"
    NUTRITION_INQUIRY = "nutrition_inquiry"

    MEDIA_MESSAGE = "media_message"
    GENERAL_MESSAGE = "general_message"



class MatchMode(str, Enum):
    """How a phrase is compared against normalized input."""

    EXACT = "exact"        # whole input equals the phrase
    WORD = "word"          # phrase occurs delimited by non-word characters
    CONTAINS = "contains"  # plain substring


@dataclass(frozen=True)
class PhraseRule:
    """One row of a declarative phrase table: any phrase matches -> intent."""

    intent: Intent
    phrases: Tuple[str, ...]
    mode: MatchMode = MatchMode.CONTAINS

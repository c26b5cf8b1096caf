"""
interpreter/intent_classifier.py

Context-dependent intent classification for inbound turns.

`classify(text, state, language)` is a pure function: no network, no storage,
no module state beyond immutable tables. Precedence (highest first), each
tier short-circuiting the rest:

1. Emergency sentinel       - per-language keyword set, regardless of state
2. Accessibility sentinel   - input starts with "/"
3. State-scoped exits       - inside AI chat / symptom check / preventive tips
                              and feedback only exit phrases and feature
                              switches are recognized; anything else continues
                              the feature or is the feedback
4. Structured selectors     - button / list ids and numbered menu replies
5. Free-text pattern table  - menu item names, navigation words, health topics
6. Greetings
7. Default by state

The literal phrases live in `phrase_tables`; this module only holds the
matching logic, so the tables can grow without touching control flow.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Optional, Sequence, Tuple

from core.interpreter import phrase_tables as tables
from core.interpreter.models import (
    DialogueState,
    Intent,
    MatchMode,
    PhraseRule,
)
from core.synthesis.models import AccessibilityMode, ScriptPreference


_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"^(\d{1,2})(?:\ufe0f?\u20e3)?$")
_EDGE_PUNCTUATION = " .!?,;:।"

_ONBOARDING_STATES = frozenset(
    {
        DialogueState.UNINITIALIZED,
        DialogueState.LANGUAGE_SELECTION,
        DialogueState.SCRIPT_SELECTION,
    }
)


# ---------------------------------------------------------------------------
# Generic matcher
# ---------------------------------------------------------------------------


def normalize_input(text: Optional[str]) -> str:
    """Lower-case, collapse whitespace and trim edge punctuation."""
    collapsed = _WHITESPACE_RE.sub(" ", (text or "").strip().lower())
    return collapsed.strip(_EDGE_PUNCTUATION)


@lru_cache(maxsize=2048)
def _word_pattern(phrase: str) -> "re.Pattern[str]":
    return re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)")


def phrase_matches(phrase: str, mode: MatchMode, text: str) -> bool:
    if mode is MatchMode.EXACT:
        return text == phrase
    if mode is MatchMode.WORD:
        return _word_pattern(phrase).search(text) is not None
    return phrase in text


class PhraseMatcher:
    """
    Ordered (phrases -> intent) table lookup.

    The first rule with any matching phrase wins. Inputs are expected to be
    normalized with `normalize_input`.
    """

    def __init__(self, rules: Sequence[PhraseRule]) -> None:
        self._rules: Tuple[PhraseRule, ...] = tuple(rules)

    @property
    def rules(self) -> Tuple[PhraseRule, ...]:
        return self._rules

    def match(self, text: str) -> Optional[Intent]:
        for rule in self._rules:
            for phrase in rule.phrases:
                if phrase_matches(phrase, rule.mode, text):
                    return rule.intent
        return None


_EXIT_MATCHER = PhraseMatcher(tables.STATE_EXIT_RULES + tables.FEATURE_SWITCH_RULES)
_FREE_TEXT_MATCHER = PhraseMatcher(tables.FREE_TEXT_RULES)
_GREETING_MATCHER = PhraseMatcher((tables.GREETING_RULE,))


# ---------------------------------------------------------------------------
# Sentinels and selectors
# ---------------------------------------------------------------------------


def is_emergency(text: str, language: str = "en") -> bool:
    """
    True when normalized `text` contains an emergency keyword of `language`
    or English. General help requests ("how can you help me") never count.
    """
    if any(phrase in text for phrase in tables.GENERAL_HELP_PHRASES):
        return False
    keywords = tables.EMERGENCY_KEYWORDS.get(language, ())
    if language != "en":
        keywords = keywords + tables.EMERGENCY_KEYWORDS["en"]
    return any(keyword in text for keyword in keywords)


def parse_number(text: str) -> Optional[int]:
    """Return the number of a numbered reply ("2", "2️⃣"), else None."""
    match = _NUMBER_RE.match(text)
    if match is None:
        return None
    return int(match.group(1))


def option_by_number(text: str, option_ids: Sequence[str]) -> Optional[str]:
    number = parse_number(normalize_input(text))
    if number is None or not 1 <= number <= len(option_ids):
        return None
    return option_ids[number - 1]


def match_selector(text: str, state: DialogueState) -> Optional[Intent]:
    intent = tables.SELECTORS.get(text)
    if intent is not None:
        return intent

    for prefix, prefixed_intent in tables.SELECTOR_PREFIXES:
        if text.startswith(prefix):
            return prefixed_intent

    numbered = tables.NUMBERED_MENUS.get(state)
    if numbered:
        option_id = option_by_number(text, numbered)
        if option_id is not None:
            return tables.SELECTORS[option_id]
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify(
    text: Optional[str],
    state: DialogueState,
    language: str = "en",
    *,
    media: bool = False,
) -> Intent:
    """
    Map one inbound message to an Intent given the user's current state.

    `media` marks an inbound image/audio attachment; outside conversational,
    feedback and onboarding states it classifies as MEDIA_MESSAGE.

    Total: every input resolves to some Intent.
    """
    normalized = normalize_input(text)

    if is_emergency(normalized, language):
        return Intent.EMERGENCY

    if normalized.startswith(tables.ACCESSIBILITY_PREFIX):
        return Intent.ACCESSIBILITY_COMMAND

    continuation = tables.STATE_CONTINUATION.get(state)
    if continuation is not None:
        exit_intent = _EXIT_MATCHER.match(normalized)
        if exit_intent is not None:
            return exit_intent
        return continuation

    if media and state not in _ONBOARDING_STATES:
        return Intent.MEDIA_MESSAGE

    selected = match_selector(normalized, state)
    if selected is not None:
        return selected

    matched = _FREE_TEXT_MATCHER.match(normalized)
    if matched is not None:
        return matched

    if _GREETING_MATCHER.match(normalized) is not None:
        return Intent.GREETING

    return tables.STATE_DEFAULTS[state]


# ---------------------------------------------------------------------------
# Selection parsing (pure helpers used by the controller)
# ---------------------------------------------------------------------------


def parse_language_choice(text: Optional[str]) -> Optional[str]:
    """Resolve a language menu reply to a language code, or None."""
    normalized = normalize_input(text)
    if normalized.startswith("lang_"):
        code = normalized[len("lang_"):]
        return code if code in tables.SUPPORTED_LANGUAGES else None

    chosen = option_by_number(normalized, tables.LANGUAGE_MENU_ORDER)
    if chosen is not None:
        return chosen

    for name, code in tables.LANGUAGE_NAMES.items():
        if phrase_matches(name, MatchMode.WORD, normalized):
            return code
    return None


def parse_script_choice(text: Optional[str]) -> Optional[ScriptPreference]:
    """Resolve a script menu reply. Roman letters are checked first."""
    normalized = normalize_input(text)
    if normalized in ("script_trans", "script_transliteration"):
        return ScriptPreference.TRANSLITERATION
    if normalized == "script_native":
        return ScriptPreference.NATIVE

    number = parse_number(normalized)
    if number == 1:
        return ScriptPreference.NATIVE
    if number == 2:
        return ScriptPreference.TRANSLITERATION

    if any(word in normalized for word in tables.ROMAN_SCRIPT_WORDS):
        return ScriptPreference.TRANSLITERATION
    if any(word in normalized for word in tables.NATIVE_SCRIPT_WORDS):
        return ScriptPreference.NATIVE
    return None


_ACCESSIBILITY_MODES: Dict[str, AccessibilityMode] = {
    "/easy": AccessibilityMode.EASY,
    "/long": AccessibilityMode.LONG,
    "/audio": AccessibilityMode.AUDIO,
    "/reset": AccessibilityMode.NORMAL,
}


def parse_accessibility_command(
    text: Optional[str],
) -> Tuple[str, Optional[AccessibilityMode]]:
    """
    Split an accessibility command into (command, mode).

    mode is None for commands that do not change the accessibility mode
    ("/poster", unknown commands).
    """
    normalized = normalize_input(text)
    command = normalized.split(" ", 1)[0] if normalized else ""
    return command, _ACCESSIBILITY_MODES.get(command)


def offers_script_choice(language: str) -> bool:
    return language in tables.SCRIPT_CHOICE_LANGUAGES


def is_supported_language(language: Optional[str]) -> bool:
    return language in tables.SUPPORTED_LANGUAGES

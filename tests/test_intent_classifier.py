import pytest

from core.interpreter.intent_classifier import (
    classify,
    is_emergency,
    normalize_input,
    option_by_number,
    parse_accessibility_command,
    parse_language_choice,
    parse_number,
    parse_script_choice,
)
from core.interpreter.models import DialogueState as S, Intent
from core.interpreter.phrase_tables import MAIN_MENU_OPTION_IDS
from core.synthesis.models import AccessibilityMode, ScriptPreference


def test_normalize_input_collapses_whitespace_and_edge_punctuation():
    assert normalize_input("  Main   MENU!! ") == "main menu"
    assert normalize_input(None) == ""


def test_classify_is_deterministic():
    results = {classify("I have a fever", S.MAIN_MENU, "en") for _ in range(5)}
    assert results == {Intent.SYMPTOM_INQUIRY}


# ---------------------------------------------------------------------------
# Emergency and accessibility sentinels
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("state", list(S))
def test_emergency_wins_in_every_state(state):
    assert classify("I have severe chest pain", state, "en") is Intent.EMERGENCY


def test_emergency_wins_over_accessibility_prefix():
    assert classify("/easy emergency", S.MAIN_MENU) is Intent.EMERGENCY


def test_emergency_uses_native_and_english_keywords():
    assert classify("मुझे सीने में दर्द है", S.MAIN_MENU, "hi") is Intent.EMERGENCY
    assert classify("heart attack", S.MAIN_MENU, "hi") is Intent.EMERGENCY


def test_general_help_phrases_do_not_trip_emergency():
    assert not is_emergency("how can you help me in an emergency", "en")
    assert classify("how can you help me", S.MAIN_MENU) is not Intent.EMERGENCY


@pytest.mark.parametrize("text", ["/easy", "/long please", "/unknown"])
def test_slash_prefix_is_accessibility(text):
    assert classify(text, S.AI_CHAT) is Intent.ACCESSIBILITY_COMMAND


# ---------------------------------------------------------------------------
# Conversational states
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "state, expected",
    [
        (S.AI_CHAT, Intent.AI_CHAT_MESSAGE),
        (S.SYMPTOM_CHECK, Intent.SYMPTOM_INPUT),
        (S.PREVENTIVE_TIPS, Intent.PREVENTIVE_TIPS_REQUEST),
        (S.FEEDBACK, Intent.FEEDBACK_INPUT),
    ],
)
def test_free_text_continues_the_feature(state, expected):
    assert classify("what food is good for my menu planning", state) is expected
    assert classify("hello there", state) is expected


@pytest.mark.parametrize("state", [S.AI_CHAT, S.SYMPTOM_CHECK, S.PREVENTIVE_TIPS, S.FEEDBACK])
def test_exit_phrases_leave_conversational_states(state):
    assert classify("menu", state) is Intent.MENU_REQUEST
    assert classify("Back", state) is Intent.MENU_REQUEST
    assert classify("change language", state) is Intent.CHANGE_LANGUAGE


def test_feature_switch_from_inside_a_feature():
    assert classify("check symptoms", S.AI_CHAT) is Intent.SYMPTOM_CHECK
    assert classify("chat_ai", S.SYMPTOM_CHECK) is Intent.AI_CHAT
    assert classify("health tips", S.AI_CHAT) is Intent.PREVENTIVE_TIPS


def test_numbers_inside_a_feature_are_free_text():
    assert classify("2", S.AI_CHAT) is Intent.AI_CHAT_MESSAGE


@pytest.mark.parametrize(
    "text",
    [
        "My feedback: great bot",
        "The AI chat was really helpful",
        "I liked the health tips",
        "the fever advice was good",
        "1",
    ],
)
def test_text_mentioning_menu_items_is_feedback(text):
    assert classify(text, S.FEEDBACK) is Intent.FEEDBACK_INPUT


def test_feature_switch_from_feedback():
    assert classify("chat_ai", S.FEEDBACK) is Intent.AI_CHAT
    assert classify("health tips", S.FEEDBACK) is Intent.PREVENTIVE_TIPS


# ---------------------------------------------------------------------------
# Selectors, free text, greetings and defaults
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text, expected",
    [
        ("chat_ai", Intent.AI_CHAT),
        ("symptom_check", Intent.SYMPTOM_CHECK),
        ("learn_diseases", Intent.DISEASE_INFO_REQUEST),
        ("feedback", Intent.FEEDBACK),
        ("lang_hi", Intent.LANGUAGE_SELECT),
        ("script_native", Intent.SCRIPT_SELECT),
    ],
)
def test_structured_selectors(text, expected):
    assert classify(text, S.MAIN_MENU) is expected


def test_numbered_main_menu_reply():
    assert classify("1", S.MAIN_MENU) is Intent.AI_CHAT
    assert classify("2️⃣", S.MAIN_MENU) is Intent.SYMPTOM_CHECK
    assert classify("6", S.MAIN_MENU) is Intent.MORE_OPTIONS


def test_numbered_more_options_reply():
    assert classify("1", S.MORE_OPTIONS) is Intent.FEEDBACK
    assert classify("3", S.MORE_OPTIONS) is Intent.MENU_REQUEST


def test_out_of_range_number_falls_through_to_default():
    assert classify("9", S.MAIN_MENU) is Intent.GENERAL_MESSAGE


@pytest.mark.parametrize(
    "text, expected",
    [
        ("I want to chat with AI", Intent.AI_CHAT),
        ("please check symptoms", Intent.SYMPTOM_CHECK),
        ("any outbreak near me?", Intent.OUTBREAK_ALERTS),
        ("book an appointment", Intent.APPOINTMENTS),
        ("I have a fever", Intent.SYMPTOM_INQUIRY),
        ("mujhe bukhar hai", Intent.SYMPTOM_INQUIRY),
        ("when is the next vaccine due", Intent.VACCINATION_INQUIRY),
        ("what diet should I follow", Intent.NUTRITION_INQUIRY),
        ("help", Intent.HELP_REQUEST),
        ("hindi", Intent.LANGUAGE_SELECT),
    ],
)
def test_free_text_patterns(text, expected):
    assert classify(text, S.MAIN_MENU) is expected


@pytest.mark.parametrize("text", ["Hi", "hello!", "Namaste", "नमस्ते"])
def test_greetings(text):
    assert classify(text, S.MAIN_MENU) is Intent.GREETING


def test_greeting_is_word_bounded():
    # "hi" inside "this" is not a greeting.
    assert classify("this is odd", S.MAIN_MENU) is Intent.GENERAL_MESSAGE


@pytest.mark.parametrize(
    "text, expected",
    [
        ("can I preview the page", Intent.GENERAL_MESSAGE),
        ("painting classes in spain", Intent.GENERAL_MESSAGE),
        ("seafood dieting", Intent.GENERAL_MESSAGE),
        ("please leave a review", Intent.FEEDBACK),
        ("stomach pains", Intent.SYMPTOM_INQUIRY),
        ("knee pain", Intent.SYMPTOM_INQUIRY),
        ("healthy food", Intent.NUTRITION_INQUIRY),
    ],
)
def test_single_word_phrases_match_whole_words(text, expected):
    assert classify(text, S.MAIN_MENU) is expected


@pytest.mark.parametrize(
    "state, expected",
    [
        (S.UNINITIALIZED, Intent.GENERAL_MESSAGE),
        (S.LANGUAGE_SELECTION, Intent.LANGUAGE_SELECT),
        (S.SCRIPT_SELECTION, Intent.SCRIPT_SELECT),
        (S.MAIN_MENU, Intent.GENERAL_MESSAGE),
        (S.FEEDBACK, Intent.FEEDBACK_INPUT),
        (S.MORE_OPTIONS, Intent.GENERAL_MESSAGE),
    ],
)
def test_default_by_state(state, expected):
    assert classify("qwerty zxcv", state) is expected


def test_empty_input_resolves_to_an_intent():
    assert classify("", S.MAIN_MENU) is Intent.GENERAL_MESSAGE
    assert classify(None, S.AI_CHAT) is Intent.AI_CHAT_MESSAGE


def test_media_outside_conversational_states():
    assert classify("", S.MAIN_MENU, media=True) is Intent.MEDIA_MESSAGE
    assert classify("photo of rash", S.AI_CHAT, media=True) is Intent.AI_CHAT_MESSAGE
    assert classify("", S.UNINITIALIZED, media=True) is Intent.GENERAL_MESSAGE
    assert classify("screenshot of the app", S.FEEDBACK, media=True) is Intent.FEEDBACK_INPUT


# ---------------------------------------------------------------------------
# Selection parsers
# ---------------------------------------------------------------------------


def test_parse_number():
    assert parse_number("3") == 3
    assert parse_number("3️⃣") == 3
    assert parse_number("three") is None


def test_option_by_number():
    assert option_by_number("1", MAIN_MENU_OPTION_IDS) == "chat_ai"
    assert option_by_number("0", MAIN_MENU_OPTION_IDS) is None
    assert option_by_number("7", MAIN_MENU_OPTION_IDS) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("lang_te", "te"),
        ("lang_xx", None),
        ("2", "hi"),
        ("5", "or"),
        ("Tamil", "ta"),
        ("हिंदी", "hi"),
        ("klingon", None),
    ],
)
def test_parse_language_choice(text, expected):
    assert parse_language_choice(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("script_native", ScriptPreference.NATIVE),
        ("script_trans", ScriptPreference.TRANSLITERATION),
        ("1", ScriptPreference.NATIVE),
        ("2", ScriptPreference.TRANSLITERATION),
        ("English letters please", ScriptPreference.TRANSLITERATION),
        ("native script", ScriptPreference.NATIVE),
        ("banana", None),
    ],
)
def test_parse_script_choice(text, expected):
    assert parse_script_choice(text) is expected


def test_parse_accessibility_command():
    assert parse_accessibility_command("/easy") == ("/easy", AccessibilityMode.EASY)
    assert parse_accessibility_command("/RESET now") == ("/reset", AccessibilityMode.NORMAL)
    assert parse_accessibility_command("/poster") == ("/poster", None)
    assert parse_accessibility_command("/what") == ("/what", None)

import pytest

from core.interpreter.models import DialogueState as S, Intent
from exceptions.exceptions import TransitionError
from runtime.agents.transitions import (
    RULES,
    Handler,
    Transition,
    TurnFacts,
    transition,
    validate_rules,
)


def test_every_intent_has_a_rule():
    assert set(RULES) == set(Intent)
    validate_rules()


def test_missing_rule_is_rejected():
    partial = dict(RULES)
    partial.pop(Intent.GREETING)
    with pytest.raises(TransitionError):
        validate_rules(partial)


@pytest.mark.parametrize("state", list(S))
def test_emergency_never_changes_state(state):
    assert transition(state, Intent.EMERGENCY) == Transition(state, Handler.EMERGENCY)


@pytest.mark.parametrize("state", list(S))
def test_accessibility_never_changes_state(state):
    assert transition(state, Intent.ACCESSIBILITY_COMMAND).next_state is state


def test_uninitialized_without_language_goes_to_onboarding():
    result = transition(S.UNINITIALIZED, Intent.GREETING)
    assert result == Transition(S.LANGUAGE_SELECTION, Handler.ONBOARDING)


def test_uninitialized_with_language_on_record_goes_to_main_menu():
    result = transition(S.UNINITIALIZED, Intent.SYMPTOM_INQUIRY, TurnFacts(has_language=True))
    assert result == Transition(S.MAIN_MENU, Handler.MAIN_MENU)


def test_uninitialized_language_choice_is_applied():
    facts = TurnFacts(chosen_language="hi", offers_script_choice=True)
    result = transition(S.UNINITIALIZED, Intent.LANGUAGE_SELECT, facts)
    assert result == Transition(S.SCRIPT_SELECTION, Handler.LANGUAGE_SELECT)


def test_language_selection_paths():
    english = TurnFacts(chosen_language="en")
    hindi = TurnFacts(chosen_language="hi", offers_script_choice=True)

    assert transition(S.LANGUAGE_SELECTION, Intent.LANGUAGE_SELECT, english) == Transition(
        S.MAIN_MENU, Handler.LANGUAGE_SELECT
    )
    assert transition(S.LANGUAGE_SELECTION, Intent.LANGUAGE_SELECT, hindi) == Transition(
        S.SCRIPT_SELECTION, Handler.LANGUAGE_SELECT
    )
    assert transition(S.LANGUAGE_SELECTION, Intent.LANGUAGE_SELECT) == Transition(
        S.LANGUAGE_SELECTION, Handler.LANGUAGE_INVALID
    )


def test_script_selection_paths():
    assert transition(
        S.SCRIPT_SELECTION, Intent.SCRIPT_SELECT, TurnFacts(script_choice_valid=True)
    ) == Transition(S.MAIN_MENU, Handler.SCRIPT_SELECT)
    assert transition(S.SCRIPT_SELECTION, Intent.SCRIPT_SELECT) == Transition(
        S.SCRIPT_SELECTION, Handler.SCRIPT_INVALID
    )


@pytest.mark.parametrize(
    "state, handler",
    [(S.LANGUAGE_SELECTION, Handler.LANGUAGE_INVALID), (S.SCRIPT_SELECTION, Handler.SCRIPT_INVALID)],
)
def test_onboarding_reprompts_on_unrelated_input(state, handler):
    assert transition(state, Intent.SYMPTOM_INQUIRY) == Transition(state, handler)
    assert transition(state, Intent.AI_CHAT) == Transition(state, handler)


@pytest.mark.parametrize("state", [s for s in S if s is not S.UNINITIALIZED])
def test_navigation_from_anywhere(state):
    assert transition(state, Intent.MENU_REQUEST).next_state is S.MAIN_MENU
    assert transition(state, Intent.HELP_REQUEST).next_state is S.MAIN_MENU
    assert transition(state, Intent.CHANGE_LANGUAGE) == Transition(
        S.LANGUAGE_SELECTION, Handler.LANGUAGE_MENU
    )


@pytest.mark.parametrize(
    "intent, expected",
    [
        (Intent.AI_CHAT, Transition(S.AI_CHAT, Handler.AI_CHAT_START)),
        (Intent.SYMPTOM_CHECK, Transition(S.SYMPTOM_CHECK, Handler.SYMPTOM_CHECK_START)),
        (Intent.PREVENTIVE_TIPS, Transition(S.PREVENTIVE_TIPS, Handler.PREVENTIVE_TIPS_START)),
        (Intent.DISEASE_INFO_REQUEST, Transition(S.PREVENTIVE_TIPS, Handler.DISEASE_INFO)),
        (Intent.FEEDBACK, Transition(S.FEEDBACK, Handler.FEEDBACK_START)),
        (Intent.MORE_OPTIONS, Transition(S.MORE_OPTIONS, Handler.MORE_OPTIONS)),
        (Intent.GREETING, Transition(S.MAIN_MENU, Handler.MAIN_MENU)),
        (Intent.SYMPTOM_INQUIRY, Transition(S.MAIN_MENU, Handler.GENERAL_QUERY)),
        (Intent.GENERAL_MESSAGE, Transition(S.MAIN_MENU, Handler.GENERAL_QUERY)),
        (Intent.APPOINTMENTS, Transition(S.MAIN_MENU, Handler.COMING_SOON)),
        (Intent.OUTBREAK_ALERTS, Transition(S.MAIN_MENU, Handler.COMING_SOON)),
        (Intent.MEDIA_MESSAGE, Transition(S.MAIN_MENU, Handler.MEDIA)),
    ],
)
def test_main_menu_transitions(intent, expected):
    assert transition(S.MAIN_MENU, intent) == expected


@pytest.mark.parametrize(
    "state, intent, handler",
    [
        (S.AI_CHAT, Intent.AI_CHAT_MESSAGE, Handler.AI_CHAT_MESSAGE),
        (S.SYMPTOM_CHECK, Intent.SYMPTOM_INPUT, Handler.SYMPTOM_INPUT),
        (S.PREVENTIVE_TIPS, Intent.PREVENTIVE_TIPS_REQUEST, Handler.PREVENTIVE_TIPS_REQUEST),
    ],
)
def test_continuation_stays_in_feature(state, intent, handler):
    assert transition(state, intent) == Transition(state, handler)


@pytest.mark.parametrize(
    "intent",
    [Intent.FEEDBACK_INPUT, Intent.GREETING, Intent.NUTRITION_INQUIRY, Intent.GENERAL_MESSAGE],
)
def test_text_in_feedback_is_the_feedback(intent):
    assert transition(S.FEEDBACK, intent) == Transition(S.MAIN_MENU, Handler.FEEDBACK_INPUT)


@pytest.mark.parametrize(
    "intent, handler",
    [
        (Intent.GREETING, Handler.MAIN_MENU),
        (Intent.GENERAL_MESSAGE, Handler.GENERAL_QUERY),
        (Intent.VACCINATION_INQUIRY, Handler.GENERAL_QUERY),
    ],
)
def test_main_menu_replies_leave_more_options(intent, handler):
    assert transition(S.MORE_OPTIONS, intent) == Transition(S.MAIN_MENU, handler)

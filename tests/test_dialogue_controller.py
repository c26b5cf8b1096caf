import asyncio
from datetime import timedelta

import pytest

from conftest import (
    FailingContextLog,
    FailingProfileStore,
    FailingSessionStore,
    ScriptedOracle,
    text_message,
)
from core.interpreter.models import DialogueState as S, Intent
from core.localization.templates import TEMPLATES, TemplateStore
from core.synthesis.models import AccessibilityMode, ConversationMode, Origin, ScriptPreference
from core.synthesis.prompts import ACCESSIBILITY_INSTRUCTIONS, FALLBACK_MESSAGES, MODE_INSTRUCTIONS
from exceptions.exceptions import TransientUpstreamError
from runtime.models.session_models import Message, MessageKind, Session, TurnRole, UserProfile
from runtime.store.log_store import ContextLog
from runtime.store.profile_store import ProfileStore
from runtime.store.session_store import SessionStore


@pytest.fixture
def sessions(cache):
    return SessionStore(cache=cache, ttl=timedelta(hours=24))


@pytest.fixture
def profiles():
    return ProfileStore()


@pytest.fixture
def log():
    return ContextLog()


@pytest.fixture
def bot(make_controller, sessions, profiles, log):
    return make_controller(session_store=sessions, profile_store=profiles, context_log=log)


async def seed(sessions, profiles, user_id, state, language="en", **profile_fields):
    await sessions.put_session(Session(user_id=user_id, state=state))
    if language is not None:
        await profiles.save_profile(UserProfile(user_id=user_id, language=language, **profile_fields))


def option_ids(reply):
    return [option.id for option in reply.options]


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------


async def test_new_user_greeting_starts_onboarding(bot, sessions, oracle):
    outcome = await bot.handle_turn("u1", text_message("Hi"))

    assert outcome.intent is Intent.GREETING
    assert outcome.previous_state is S.UNINITIALIZED
    assert outcome.state is S.LANGUAGE_SELECTION
    assert option_ids(outcome.replies[0]) == ["lang_en", "lang_hi", "lang_te", "lang_ta", "lang_or"]
    assert (await sessions.get_session("u1")).state is S.LANGUAGE_SELECTION
    assert oracle.calls == 0


async def test_full_onboarding_to_transliterated_answer(bot, profiles, oracle):
    oracle.outcomes = ["Aapko (बुखार) bukhar hai. Paani piyen."]

    await bot.handle_turn("u1", text_message("Hi"))

    chose_hindi = await bot.handle_turn("u1", text_message("2"))
    assert chose_hindi.intent is Intent.LANGUAGE_SELECT
    assert chose_hindi.state is S.SCRIPT_SELECTION
    assert option_ids(chose_hindi.replies[-1]) == ["script_native", "script_trans"]

    chose_roman = await bot.handle_turn("u1", text_message("2"))
    assert chose_roman.intent is Intent.SCRIPT_SELECT
    assert chose_roman.state is S.MAIN_MENU
    profile = await profiles.get_profile("u1")
    assert profile.language == "hi"
    assert profile.script_preference is ScriptPreference.TRANSLITERATION

    answer = await bot.handle_turn("u1", text_message("mujhe bukhar hai"))
    assert answer.intent is Intent.SYMPTOM_INQUIRY
    assert answer.state is S.MAIN_MENU
    assert answer.generation is Origin.FRESH
    assert answer.replies[0].text == "Aapko bukhar hai. Paani piyen."
    assert option_ids(answer.replies[1]) == ["chat_ai", "symptom_check", "preventive_tips"]


async def test_english_skips_script_menu(bot, profiles):
    await bot.handle_turn("u1", text_message("Hi"))
    outcome = await bot.handle_turn("u1", text_message("english"))

    assert outcome.state is S.MAIN_MENU
    assert (await profiles.get_profile("u1")).language == "en"
    assert option_ids(outcome.replies[-1])[0] == "chat_ai"


async def test_invalid_language_reprompts(bot):
    await bot.handle_turn("u1", text_message("Hi"))
    outcome = await bot.handle_turn("u1", text_message("klingon"))

    assert outcome.state is S.LANGUAGE_SELECTION
    assert outcome.replies[0].text == TEMPLATES["invalid_language"]["en"]


async def test_invalid_script_choice_reprompts(bot, sessions, profiles):
    await seed(sessions, profiles, "u1", S.SCRIPT_SELECTION, language="te")

    outcome = await bot.handle_turn("u1", text_message("banana"))

    assert outcome.state is S.SCRIPT_SELECTION
    assert option_ids(outcome.replies[0]) == ["script_native", "script_trans"]


async def test_language_selector_on_fresh_session_is_applied(bot, profiles):
    outcome = await bot.handle_turn("u1", Message(content="lang_ta", kind=MessageKind.INTERACTIVE))

    assert outcome.state is S.SCRIPT_SELECTION
    assert (await profiles.get_profile("u1")).language == "ta"


async def test_returning_user_with_expired_session_goes_to_main_menu(bot, sessions, profiles, clock):
    await seed(sessions, profiles, "u1", S.AI_CHAT, language="hi")
    clock.advance(hours=25)

    outcome = await bot.handle_turn("u1", text_message("hello"))

    assert outcome.previous_state is S.UNINITIALIZED
    assert outcome.state is S.MAIN_MENU
    assert outcome.replies[0].options[0].label == "🤖 AI से बात करें"


async def test_expired_session_without_profile_restarts_onboarding(bot, sessions, clock):
    await sessions.put_session(Session(user_id="u1", state=S.SYMPTOM_CHECK))
    clock.advance(hours=24)

    outcome = await bot.handle_turn("u1", text_message("my head hurts"))

    assert outcome.state is S.LANGUAGE_SELECTION


# ---------------------------------------------------------------------------
# Emergencies and navigation
# ---------------------------------------------------------------------------


async def test_emergency_keeps_state_and_flags_the_next_prompt(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.SYMPTOM_CHECK)

    alarm = await bot.handle_turn("u1", text_message("I have severe chest pain"))

    assert alarm.intent is Intent.EMERGENCY
    assert alarm.state is S.SYMPTOM_CHECK
    assert "108" in alarm.replies[0].text
    assert oracle.calls == 0

    follow_up = await bot.handle_turn("u1", text_message("it started an hour ago"))

    assert follow_up.intent is Intent.SYMPTOM_INPUT
    assert follow_up.state is S.SYMPTOM_CHECK
    assert "EMERGENCY RESPONSE:" in oracle.prompts[-1]
    assert MODE_INSTRUCTIONS[ConversationMode.SYMPTOM_CHECK].strip() in oracle.prompts[-1]


async def test_emergency_flag_clears_after_a_normal_turn(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.AI_CHAT)

    await bot.handle_turn("u1", text_message("heart attack"))
    await bot.handle_turn("u1", text_message("what should I do"))
    await bot.handle_turn("u1", text_message("and after that?"))

    assert "EMERGENCY RESPONSE:" in oracle.prompts[0]
    assert "EMERGENCY RESPONSE:" not in oracle.prompts[1]


async def test_menu_exits_ai_chat_without_calling_the_oracle(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.AI_CHAT)

    outcome = await bot.handle_turn("u1", text_message("menu"))

    assert outcome.intent is Intent.MENU_REQUEST
    assert outcome.state is S.MAIN_MENU
    assert option_ids(outcome.replies[0])[:3] == ["chat_ai", "symptom_check", "preventive_tips"]
    assert oracle.calls == 0


async def test_ai_chat_message_uses_history(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.MAIN_MENU)

    await bot.handle_turn("u1", text_message("1"))
    await bot.handle_turn("u1", text_message("is turmeric milk good for a cold?"))
    outcome = await bot.handle_turn("u1", text_message("and for kids?"))

    assert outcome.state is S.AI_CHAT
    prompt = oracle.prompts[-1]
    assert "user: is turmeric milk good for a cold?" in prompt
    assert prompt.endswith("and for kids?")


async def test_change_language_from_a_feature(bot, sessions, profiles):
    await seed(sessions, profiles, "u1", S.PREVENTIVE_TIPS)

    outcome = await bot.handle_turn("u1", text_message("change language"))

    assert outcome.state is S.LANGUAGE_SELECTION
    assert option_ids(outcome.replies[0])[0] == "lang_en"


async def test_coming_soon_keeps_state(bot, sessions, profiles):
    await seed(sessions, profiles, "u1", S.MORE_OPTIONS)

    outcome = await bot.handle_turn("u1", text_message("2"))

    assert outcome.intent is Intent.APPOINTMENTS
    assert outcome.state is S.MORE_OPTIONS
    assert outcome.replies[0].text == TEMPLATES["coming_soon"]["en"]


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------


async def test_feedback_flow(bot, sessions, profiles, log):
    await seed(sessions, profiles, "u1", S.MAIN_MENU)

    more = await bot.handle_turn("u1", text_message("6"))
    assert more.state is S.MORE_OPTIONS

    asked = await bot.handle_turn("u1", text_message("1"))
    assert asked.state is S.FEEDBACK
    assert (await sessions.get_session("u1")).context == {"awaiting": "feedback"}

    done = await bot.handle_turn("u1", text_message("The app is great, thanks"))
    assert done.intent is Intent.FEEDBACK_INPUT
    assert done.state is S.MAIN_MENU
    assert done.replies[0].text == TEMPLATES["feedback_thanks"]["en"]
    assert (await sessions.get_session("u1")).context == {}

    recent = await log.get_recent_turns("u1", 2)
    assert recent[0].content == "The app is great, thanks"


@pytest.mark.parametrize(
    "text",
    ["My feedback: great bot", "The AI chat was really helpful", "I liked the health tips"],
)
async def test_feedback_mentioning_a_feature_is_recorded(bot, sessions, profiles, log, oracle, text):
    await seed(sessions, profiles, "u1", S.FEEDBACK)

    outcome = await bot.handle_turn("u1", text_message(text))

    assert outcome.intent is Intent.FEEDBACK_INPUT
    assert outcome.state is S.MAIN_MENU
    assert outcome.replies[0].text == TEMPLATES["feedback_thanks"]["en"]
    assert oracle.calls == 0
    assert (await log.get_recent_turns("u1", 2))[0].content == text


async def test_numbers_after_quick_actions_follow_the_quick_actions(bot, sessions, profiles):
    await seed(sessions, profiles, "u1", S.MORE_OPTIONS)

    answer = await bot.handle_turn("u1", text_message("what should I eat for diabetes"))
    assert answer.state is S.MAIN_MENU
    assert option_ids(answer.replies[-1]) == ["chat_ai", "symptom_check", "preventive_tips"]

    picked = await bot.handle_turn("u1", text_message("1"))
    assert picked.intent is Intent.AI_CHAT
    assert picked.state is S.AI_CHAT


async def test_preventive_tips_category_and_disease_lookup(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.MAIN_MENU)

    menu = await bot.handle_turn("u1", text_message("3"))
    assert menu.state is S.PREVENTIVE_TIPS
    assert option_ids(menu.replies[0]) == ["learn_diseases", "nutrition_hygiene", "exercise_lifestyle"]

    tips = await bot.handle_turn("u1", text_message("2"))
    assert tips.generation is Origin.FRESH
    assert "Topic: Nutrition and hygiene" in oracle.prompts[-1]

    ask = await bot.handle_turn("u1", text_message("learn_diseases"))
    assert ask.state is S.PREVENTIVE_TIPS
    assert ask.replies[0].text == TEMPLATES["disease_name_prompt"]["en"]
    assert (await sessions.get_session("u1")).context["awaiting"] == "disease_name"

    answer = await bot.handle_turn("u1", text_message("malaria"))
    assert answer.state is S.PREVENTIVE_TIPS
    assert MODE_INSTRUCTIONS[ConversationMode.DISEASE_AWARENESS].strip() in oracle.prompts[-1]
    assert oracle.prompts[-1].endswith("malaria")
    assert "awaiting" not in (await sessions.get_session("u1")).context


async def test_accessibility_mode_is_applied_to_later_prompts(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.AI_CHAT)

    outcome = await bot.handle_turn("u1", text_message("/easy"))
    assert outcome.intent is Intent.ACCESSIBILITY_COMMAND
    assert outcome.state is S.AI_CHAT
    assert (await profiles.get_profile("u1")).accessibility_mode is AccessibilityMode.EASY

    await bot.handle_turn("u1", text_message("what is anemia"))
    assert ACCESSIBILITY_INSTRUCTIONS[AccessibilityMode.EASY] in oracle.prompts[-1]


async def test_accessibility_help_and_poster(bot, sessions, profiles):
    await seed(sessions, profiles, "u1", S.MAIN_MENU)

    poster = await bot.handle_turn("u1", text_message("/poster"))
    assert poster.replies[0].text == TEMPLATES["coming_soon"]["en"]

    unknown = await bot.handle_turn("u1", text_message("/whatever"))
    assert "/easy" in unknown.replies[0].text
    assert "/reset" in unknown.replies[0].text


async def test_media_message_outside_features(bot, sessions, profiles, oracle):
    await seed(sessions, profiles, "u1", S.MAIN_MENU)

    outcome = await bot.handle_turn(
        "u1", Message(content="rash on my arm", kind=MessageKind.MEDIA)
    )

    assert outcome.intent is Intent.MEDIA_MESSAGE
    assert outcome.state is S.MAIN_MENU
    assert "image or voice note" in oracle.prompts[-1]


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------


async def test_oracle_failure_sends_fallback(make_controller, make_engine, sessions, profiles):
    oracle = ScriptedOracle([TransientUpstreamError("slow down")] * 3)
    bot = make_controller(
        session_store=sessions,
        profile_store=profiles,
        engine=make_engine(oracle, max_retries=3),
    )
    await seed(sessions, profiles, "u1", S.AI_CHAT)

    outcome = await bot.handle_turn("u1", text_message("is fasting safe?"))

    assert oracle.calls == 3
    assert outcome.generation is Origin.FALLBACK
    assert outcome.replies[0].text == FALLBACK_MESSAGES["en"]
    assert outcome.state is S.AI_CHAT


async def test_session_write_failure_still_replies(make_controller, cache):
    bot = make_controller(session_store=FailingSessionStore(cache, fail_reads=False))

    outcome = await bot.handle_turn("u1", text_message("Hi"))

    assert outcome.persisted is False
    assert outcome.state is S.LANGUAGE_SELECTION
    assert outcome.replies


async def test_session_read_failure_starts_fresh(make_controller, cache):
    bot = make_controller(session_store=FailingSessionStore(cache, fail_writes=False))

    outcome = await bot.handle_turn("u1", text_message("menu"))

    assert outcome.previous_state is S.UNINITIALIZED
    assert outcome.state is S.LANGUAGE_SELECTION
    assert outcome.persisted is True


async def test_profile_and_log_failures_are_not_fatal(make_controller, sessions):
    bot = make_controller(
        session_store=sessions,
        profile_store=FailingProfileStore(),
        context_log=FailingContextLog(),
    )

    await bot.handle_turn("u1", text_message("Hi"))
    outcome = await bot.handle_turn("u1", text_message("english"))

    assert outcome.state is S.MAIN_MENU
    assert outcome.replies


async def test_handler_failure_keeps_previous_state(make_controller, sessions, profiles):
    broken = {key: value for key, value in TEMPLATES.items() if key != "ai_chat_instructions"}
    bot = make_controller(
        session_store=sessions,
        profile_store=profiles,
        templates=TemplateStore(templates=broken),
    )
    await seed(sessions, profiles, "u1", S.MAIN_MENU)
    await sessions.put_session(
        Session(user_id="u1", state=S.MAIN_MENU, context={"tips_category": "nutrition_hygiene"})
    )

    outcome = await bot.handle_turn("u1", text_message("1"))

    assert outcome.intent is Intent.AI_CHAT
    assert outcome.state is S.MAIN_MENU
    assert outcome.replies[0].text == TEMPLATES["error"]["en"]
    stored = await sessions.get_session("u1")
    assert stored.state is S.MAIN_MENU
    assert stored.context == {"tips_category": "nutrition_hygiene"}


async def test_handler_failure_discards_profile_changes(make_controller, sessions, profiles):
    broken = {key: value for key, value in TEMPLATES.items() if key != "script_prompt"}
    bot = make_controller(
        session_store=sessions,
        profile_store=profiles,
        templates=TemplateStore(templates=broken),
    )
    await seed(sessions, profiles, "u1", S.LANGUAGE_SELECTION, language=None)

    outcome = await bot.handle_turn("u1", text_message("lang_hi"))

    assert outcome.state is S.LANGUAGE_SELECTION
    assert outcome.replies[0].text == TEMPLATES["error"]["en"]
    assert await profiles.get_profile("u1") is None
    assert (await sessions.get_session("u1")).state is S.LANGUAGE_SELECTION


# ---------------------------------------------------------------------------
# Concurrency and logging of turns
# ---------------------------------------------------------------------------


class SlowOracle:
    def __init__(self):
        self.active = 0
        self.max_active = 0

    async def complete(self, prompt):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.02)
        self.active -= 1
        return "ok"


async def test_turns_of_one_user_are_serialized(make_controller, make_engine, sessions, profiles, log):
    oracle = SlowOracle()
    bot = make_controller(
        session_store=sessions,
        profile_store=profiles,
        context_log=log,
        engine=make_engine(oracle),
    )
    await seed(sessions, profiles, "u1", S.AI_CHAT)

    await asyncio.gather(
        bot.handle_turn("u1", text_message("first question")),
        bot.handle_turn("u1", text_message("second question")),
    )

    assert oracle.max_active == 1
    user_turns = [t for t in await log.get_recent_turns("u1", 10) if t.role is TurnRole.USER]
    assert [t.content for t in user_turns] == ["first question", "second question"]


async def test_turns_of_different_users_run_concurrently(make_controller, make_engine, sessions, profiles):
    oracle = SlowOracle()
    bot = make_controller(session_store=sessions, profile_store=profiles, engine=make_engine(oracle))
    await seed(sessions, profiles, "u1", S.AI_CHAT)
    await seed(sessions, profiles, "u2", S.AI_CHAT)

    await asyncio.gather(
        bot.handle_turn("u1", text_message("question one")),
        bot.handle_turn("u2", text_message("question two")),
    )

    assert oracle.max_active == 2


async def test_each_turn_logs_user_and_assistant_entries(bot, log):
    await bot.handle_turn("u1", text_message("Hi"))

    entries = await log.get_recent_turns("u1", 5)
    assert [e.role for e in entries] == [TurnRole.USER, TurnRole.ASSISTANT]
    assert entries[0].state_before is S.UNINITIALIZED
    assert entries[1].state_after is S.LANGUAGE_SELECTION
    assert "English" in entries[1].content

# Keyword and phrase tables consumed by the intent classifier.
#
# Everything in this module is data. Phrases are stored already normalized
# (lower-case, single spaces) so the matcher never has to touch them.
# Supported languages: en, hi, te, ta, or (native script and Romanized).

from typing import Dict, Tuple

from core.interpreter.models import DialogueState, Intent, MatchMode, PhraseRule


SUPPORTED_LANGUAGES: Tuple[str, ...] = ("en", "hi", "te", "ta", "or")

# Languages that offer a native-script vs. Roman-letters choice.
SCRIPT_CHOICE_LANGUAGES = frozenset({"hi", "te", "ta", "or"})

ACCESSIBILITY_PREFIX = "/"


# ---------------------------------------------------------------------------
# Tier 1: emergency sentinel
# ---------------------------------------------------------------------------

EMERGENCY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "en": (
        "emergency",
        "severe pain",
        "chest pain",
        "can't breathe",
        "cannot breathe",
        "can not breathe",
        "heavy bleeding",
        "unconscious",
        "heart attack",
        "stroke",
        "difficulty breathing",
        "trouble breathing",
        "urgent pain",
        "critical condition",
        "dying",
        "collapse",
        "medical emergency",
    ),
    "hi": (
        "emergency",
        "आपातकाल",
        "गंभीर दर्द",
        "सीने में दर्द",
        "सांस नहीं आ रही",
        "खून बह रहा",
        "बेहोश",
        "दिल का दौरा",
        "तुरंत दर्द",
        "गंभीर स्थिति",
        "मरने वाला हूं",
        "चिकित्सा आपातकाल",
        "seene mein dard",
        "saans nahi aa rahi",
        "behosh",
    ),
    "te": (
        "emergency",
        "అత్యవసర పరిస్థితి",
        "తీవ్రమైన నొప్పి",
        "ఛాతీ నొప్పి",
        "ఊపిరి రాలేదు",
        "రక్తస్రావం",
        "అపస్మారక",
        "గుండెపోటు",
        "తక్షణ నొప్పి",
        "తీవ్రమైన పరిస్థితి",
        "వైద్య అత్యవసర పరిస్థితి",
        "chaathi noppi",
        "gundepotu",
    ),
    "ta": (
        "emergency",
        "அவசரநிலை",
        "கடுமையான வலி",
        "மார்பு வலி",
        "மூச்சு விடமுடியவில்லை",
        "அதிக இரத்தப்போக்கு",
        "மயக்கம",
        "உதவி வேண்டும்",
        "உடனடி உதவி",
        "maarbu vali",
        "mayakkam",
    ),
    "or": (
        "emergency",
        "ଜରୁରୀ ଅବସ୍ଥା",
        "ତୀବ୍ର ଯନ୍ତ୍ରଣା",
        "ଛାତି ଯନ୍ତ୍ରଣା",
        "ନିଶ୍ୱାସ ନେଇପାରୁନାହିଁ",
        "ରକ୍ତସ୍ରାବ",
        "ଚେତନାହୀନ",
        "ସାହାଯ୍ୟ ଦରକାର",
        "chhati jantrana",
    ),
}

# Help requests that mention words like "help" must not trip the sentinel.
GENERAL_HELP_PHRASES: Tuple[str, ...] = (
    "how can you help me",
    "what can you help me with",
    "how do you help",
    "what help can you provide",
    "can you help me with",
    "help me understand",
    "help me learn",
    "आप मेरी कैसे मदद कर सकते हैं",
    "మీరు నాకు ఎలా సహాయం చేయగలరు",
    "நீங்கள் எனக்கு எப்படி உதவ முடியும்",
    "ଆପଣ ମୋତେ କିପରି ସାହାଯ୍ୟ କରିପାରିବେ",
)


# ---------------------------------------------------------------------------
# Tier 3: exit commands inside conversational states (whole-input match)
# ---------------------------------------------------------------------------

STATE_EXIT_RULES: Tuple[PhraseRule, ...] = (
    PhraseRule(
        Intent.MENU_REQUEST,
        (
            "menu",
            "main menu",
            "main_menu",
            "menu_request",
            "back_to_menu",
            "back",
            "home",
            "back to menu",
            "go to menu",
            "exit",
            "📋 main menu",
            "मेनू",
            "मुख्य मेनू",
            "वापस",
            "mukhya menu",
            "wapas",
            "మెనూ",
            "ప్రధాన మెనూ",
            "వెనుకకు",
            "pradhana menu",
            "மெனு",
            "முதன்மை மெனு",
            "முதன்மை பட்டியல்",
            "mudhanmai menu",
            "ମେନୁ",
            "ମୁଖ୍ୟ ମେନୁ",
            "ପଛକୁ",
            "mukhya menu",
        ),
        MatchMode.EXACT,
    ),
    PhraseRule(
        Intent.CHANGE_LANGUAGE,
        (
            "change language",
            "change_language",
            "switch language",
            "language",
            "🌐 change language",
            "भाषा बदलें",
            "bhasha badlen",
            "bhasha badlo",
            "భాష మార్చండి",
            "bhasha marchandi",
            "மொழி மாற்று",
            "mozhi maatru",
            "ଭାଷା ବଦଳାନ୍ତୁ",
            "bhaasha badalanta",
        ),
        MatchMode.EXACT,
    ),
)

# Explicit requests to jump to a different feature from inside a
# conversational state.
FEATURE_SWITCH_RULES: Tuple[PhraseRule, ...] = (
    PhraseRule(
        Intent.AI_CHAT,
        ("chat_ai", "start ai chat", "chat with ai", "ask ai", "🤖 chat with ai"),
        MatchMode.EXACT,
    ),
    PhraseRule(
        Intent.SYMPTOM_CHECK,
        ("symptom_check", "check symptoms", "symptom check", "🩺 check symptoms"),
        MatchMode.EXACT,
    ),
    PhraseRule(
        Intent.PREVENTIVE_TIPS,
        ("preventive_tips", "health tips", "preventive tips", "🌱 health tips"),
        MatchMode.EXACT,
    ),
)

# Continuation intent for free text inside each conversational state. Text
# inside Feedback is the feedback itself, whatever it mentions.
STATE_CONTINUATION: Dict[DialogueState, Intent] = {
    DialogueState.AI_CHAT: Intent.AI_CHAT_MESSAGE,
    DialogueState.SYMPTOM_CHECK: Intent.SYMPTOM_INPUT,
    DialogueState.PREVENTIVE_TIPS: Intent.PREVENTIVE_TIPS_REQUEST,
    DialogueState.FEEDBACK: Intent.FEEDBACK_INPUT,
}


# ---------------------------------------------------------------------------
# Tier 4: structured selectors emitted by buttons / list rows
# ---------------------------------------------------------------------------

SELECTORS: Dict[str, Intent] = {
    "chat_ai": Intent.AI_CHAT,
    "symptom_check": Intent.SYMPTOM_CHECK,
    "preventive_tips": Intent.PREVENTIVE_TIPS,
    "learn_diseases": Intent.DISEASE_INFO_REQUEST,
    "nutrition_hygiene": Intent.PREVENTIVE_TIPS_REQUEST,
    "exercise_lifestyle": Intent.PREVENTIVE_TIPS_REQUEST,
    "appointments": Intent.APPOINTMENTS,
    "outbreak_alerts": Intent.OUTBREAK_ALERTS,
    "disease_alerts": Intent.OUTBREAK_ALERTS,
    "feedback": Intent.FEEDBACK,
    "more_options": Intent.MORE_OPTIONS,
    "change_language": Intent.CHANGE_LANGUAGE,
    "menu": Intent.MENU_REQUEST,
    "main_menu": Intent.MENU_REQUEST,
    "back_to_menu": Intent.MENU_REQUEST,
}

SELECTOR_PREFIXES: Tuple[Tuple[str, Intent], ...] = (
    ("lang_", Intent.LANGUAGE_SELECT),
    ("script_", Intent.SCRIPT_SELECT),
)

# Option order of the numbered menus; also drives the template catalog so a
# numbered-text rendering and a typed number agree.
MAIN_MENU_OPTION_IDS: Tuple[str, ...] = (
    "chat_ai",
    "symptom_check",
    "preventive_tips",
    "outbreak_alerts",
    "change_language",
    "more_options",
)

MORE_OPTIONS_IDS: Tuple[str, ...] = (
    "feedback",
    "appointments",
    "main_menu",
)

PREVENTIVE_TIPS_CATEGORY_IDS: Tuple[str, ...] = (
    "learn_diseases",
    "nutrition_hygiene",
    "exercise_lifestyle",
)

NUMBERED_MENUS: Dict[DialogueState, Tuple[str, ...]] = {
    DialogueState.MAIN_MENU: MAIN_MENU_OPTION_IDS,
    DialogueState.MORE_OPTIONS: MORE_OPTIONS_IDS,
}


# ---------------------------------------------------------------------------
# Tier 5: free-text pattern table (first matching row wins)
# ---------------------------------------------------------------------------

FREE_TEXT_RULES: Tuple[PhraseRule, ...] = (
    # Menu item names
    PhraseRule(
        Intent.AI_CHAT,
        (
            "chat with ai",
            "ask ai",
            "ai chat",
            "एआई से चैट",
            "ai se chat",
            "ai se baat",
            "ai తో చాట్",
            "ai tho chat",
            "ai உடன் அரட்டை",
            "ai udan aratai",
            "ai sahita chat",
        ),
    ),
    PhraseRule(
        Intent.SYMPTOM_CHECK,
        (
            "check symptoms",
            "symptom check",
            "symptom checker",
            "लक्षण जांच",
            "lakshan jaanch",
            "lakshan jancha",
            "లక్షణాల తనిఖీ",
            "lakshanala tanikhi",
            "அறிகுறி சரிபார்",
            "arikuri saripar",
            "ଲକ୍ଷଣ ଯାଞ୍ଚ",
        ),
    ),
    PhraseRule(
        Intent.DISEASE_INFO_REQUEST,
        (
            "learn about diseases",
            "learn about disease",
            "बीमारियों के बारे में जानें",
            "bimariyon ke bare mein",
        ),
    ),
    PhraseRule(
        Intent.PREVENTIVE_TIPS,
        (
            "health tips",
            "preventive tips",
            "preventive healthcare",
            "स्वास्थ्य सुझाव",
            "swasthya sujhav",
            "swasthya tips",
            "ఆరోగ్య చిట్కాలు",
            "arogya chitkalu",
            "ஆரோக்கிய குறிப்புகள்",
            "aarokkiya kuripugal",
            "ସ୍ୱାସ୍ଥ୍ୟ ଟିପ୍ସ",
            "swaasthya tips",
        ),
    ),
    PhraseRule(
        Intent.OUTBREAK_ALERTS,
        (
            "outbreak alerts",
            "disease alerts",
            "रोग प्रकोप",
            "rog prakop",
            "noi virivu",
        ),
    ),
    PhraseRule(Intent.OUTBREAK_ALERTS, ("outbreak", "outbreaks"), MatchMode.WORD),
    PhraseRule(Intent.APPOINTMENTS, ("appointment", "अपॉइंटमेंट")),
    PhraseRule(Intent.MORE_OPTIONS, ("more options", "अधिक विकल्प", "adhik vikalp")),
    PhraseRule(Intent.FEEDBACK, ("प्रतिक्रिया",)),
    PhraseRule(
        Intent.FEEDBACK,
        ("feedback", "rating", "review", "pratikriya"),
        MatchMode.WORD,
    ),
    # Navigation
    PhraseRule(
        Intent.CHANGE_LANGUAGE,
        (
            "change language",
            "switch language",
            "language settings",
            "switch to different language",
            "भाषा बदलें",
            "bhasha badlen",
            "భాష మార్చండి",
            "மொழி மாற்று",
            "ଭାଷା ବଦଳାନ୍ତୁ",
            "🌐",
        ),
    ),
    PhraseRule(
        Intent.LANGUAGE_SELECT,
        (
            "english",
            "hindi",
            "हिंदी",
            "हिन्दी",
            "telugu",
            "తెలుగు",
            "tamil",
            "தமிழ்",
            "odia",
            "oriya",
            "ଓଡ଼ିଆ",
        ),
        MatchMode.EXACT,
    ),
    PhraseRule(
        Intent.HELP_REQUEST,
        ("help", "start", "मदद", "madad", "sahayata"),
        MatchMode.EXACT,
    ),
    PhraseRule(
        Intent.MENU_REQUEST,
        (
            "menu",
            "main menu",
            "back",
            "home",
            "मेनू",
            "वापस",
            "wapas",
            "మెనూ",
            "மெனு",
            "ମେନୁ",
            "📋",
        ),
        MatchMode.WORD,
    ),
    # Health topics
    PhraseRule(
        Intent.SYMPTOM_INQUIRY,
        (
            "symptom",
            "fever",
            "cough",
            "headache",
            "बुखार",
            "दर्द",
            "खांसी",
            "జ్వరం",
            "నొప్పి",
            "దగ్గు",
            "காய்ச்சல்",
            "இருமல்",
            "ଜ୍ୱର",
            "କାଶ",
        ),
    ),
    PhraseRule(
        Intent.SYMPTOM_INQUIRY,
        ("pain", "pains", "bukhar", "dard", "khansi", "jwaram", "noppi", "kaaichal", "jwara"),
        MatchMode.WORD,
    ),
    PhraseRule(
        Intent.VACCINATION_INQUIRY,
        (
            "vaccin",
            "immuniz",
            "immunis",
            "टीका",
            "టీకా",
            "தடுப்பூசி",
            "ଟିକା",
        ),
    ),
    PhraseRule(
        Intent.VACCINATION_INQUIRY,
        ("teeka", "tika", "tikakaran"),
        MatchMode.WORD,
    ),
    PhraseRule(
        Intent.NUTRITION_INQUIRY,
        (
            "nutrition",
            "आहार",
            "भोजन",
            "ఆహారం",
            "உணவு",
            "ଖାଦ୍ୟ",
        ),
    ),
    PhraseRule(
        Intent.NUTRITION_INQUIRY,
        ("diet", "food", "foods", "poshan", "aahar", "ahaar", "unavu"),
        MatchMode.WORD,
    ),
)


# ---------------------------------------------------------------------------
# Tier 6: greetings
# ---------------------------------------------------------------------------

GREETING_RULE = PhraseRule(
    Intent.GREETING,
    (
        "hello",
        "hi",
        "hii",
        "hey",
        "good morning",
        "good evening",
        "namaste",
        "namaskar",
        "namaskaram",
        "vanakkam",
        "नमस्ते",
        "नमस्कार",
        "నమస్కారం",
        "வணக்கம்",
        "ନମସ୍କାର",
    ),
    MatchMode.WORD,
)


# ---------------------------------------------------------------------------
# Tier 7: default intent per state
# ---------------------------------------------------------------------------

STATE_DEFAULTS: Dict[DialogueState, Intent] = {
    DialogueState.UNINITIALIZED: Intent.GENERAL_MESSAGE,
    DialogueState.LANGUAGE_SELECTION: Intent.LANGUAGE_SELECT,
    DialogueState.SCRIPT_SELECTION: Intent.SCRIPT_SELECT,
    DialogueState.MAIN_MENU: Intent.GENERAL_MESSAGE,
    DialogueState.AI_CHAT: Intent.AI_CHAT_MESSAGE,
    DialogueState.SYMPTOM_CHECK: Intent.SYMPTOM_INPUT,
    DialogueState.PREVENTIVE_TIPS: Intent.PREVENTIVE_TIPS_REQUEST,
    DialogueState.FEEDBACK: Intent.FEEDBACK_INPUT,
    DialogueState.MORE_OPTIONS: Intent.GENERAL_MESSAGE,
}


# ---------------------------------------------------------------------------
# Selection vocabularies (language / script / accessibility)
# ---------------------------------------------------------------------------

LANGUAGE_NAMES: Dict[str, str] = {
    "english": "en",
    "hindi": "hi",
    "हिंदी": "hi",
    "हिन्दी": "hi",
    "telugu": "te",
    "తెలుగు": "te",
    "tamil": "ta",
    "தமிழ்": "ta",
    "odia": "or",
    "oriya": "or",
    "ଓଡ଼ିଆ": "or",
}

# Numbered language menu order.
LANGUAGE_MENU_ORDER: Tuple[str, ...] = SUPPORTED_LANGUAGES

NATIVE_SCRIPT_WORDS: Tuple[str, ...] = ("native", "native script", "script")
ROMAN_SCRIPT_WORDS: Tuple[str, ...] = (
    "english letters",
    "letters",
    "roman",
    "roman letters",
    "transliteration",
)

ACCESSIBILITY_COMMANDS: Dict[str, str] = {
    "/easy": "Switch to Easy Mode (simpler words)",
    "/long": "Switch to Long Text Mode (more spacing)",
    "/audio": "Switch to Audio Mode",
    "/poster": "Switch to Visual Mode",
    "/reset": "Reset all preferences",
}

"""
Localization / template store.

Holds every user-facing canned string and the menu catalog. The dialogue
controller only ever refers to template keys and option ids; the literal
texts live here.

Lookup order for a template or menu in `language`:

1. "<language>_trans" when the user chose Roman letters
2. "<language>"
3. "en"

Menu option order comes from the classifier's option-id tuples, so a menu
rendered as numbered text and a typed number always agree.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel

from core.interpreter.phrase_tables import (
    MAIN_MENU_OPTION_IDS,
    MORE_OPTIONS_IDS,
    PREVENTIVE_TIPS_CATEGORY_IDS,
    SUPPORTED_LANGUAGES,
)
from core.synthesis.models import ScriptPreference


class MenuOption(BaseModel):
    """One selectable row of a structured choice list."""

    id: str
    label: str
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Canned texts
# ---------------------------------------------------------------------------

TEMPLATES: Dict[str, Dict[str, str]] = {
    "welcome": {
        "en": (
            "🙏 Welcome to your Health Assistant!\n"
            "स्वास्थ्य सहायक में आपका स्वागत है!\n\n"
            "Please choose your language / अपनी भाषा चुनें:"
        ),
    },
    "language_menu_title": {
        "en": "Choose language",
    },
    "invalid_language": {
        "en": "Please choose one of the languages from the list.",
        "hi": "कृपया सूची में से एक भाषा चुनें।",
        "te": "దయచేసి జాబితా నుండి ఒక భాషను ఎంచుకోండి.",
        "ta": "பட்டியலில் இருந்து ஒரு மொழியைத் தேர்ந்தெடுக்கவும்.",
        "or": "ଦୟାକରି ତାଲିକାରୁ ଗୋଟିଏ ଭାଷା ବାଛନ୍ତୁ।",
    },
    "language_success": {
        "en": "✅ Language set to {language_name}.",
        "hi": "✅ भाषा {language_name} पर सेट की गई।",
        "hi_trans": "✅ Bhasha {language_name} par set ki gayi.",
        "te": "✅ భాష {language_name}కి సెట్ చేయబడింది.",
        "te_trans": "✅ Bhasha {language_name}ki set cheyabadindi.",
        "ta": "✅ மொழி {language_name} ஆக அமைக்கப்பட்டது.",
        "ta_trans": "✅ Mozhi {language_name} aaga amaikkappattadhu.",
        "or": "✅ ଭାଷା {language_name} ରେ ସେଟ୍ ହେଲା।",
        "or_trans": "✅ Bhasha {language_name} re set hela.",
    },
    "script_prompt": {
        "en": "How would you like to read replies?",
        "hi": "आप जवाब किस लिपि में पढ़ना चाहेंगे?",
        "te": "మీరు సమాధానాలను ఏ లిపిలో చదవాలనుకుంటున్నారు?",
        "ta": "பதில்களை எந்த எழுத்தில் படிக்க விரும்புகிறீர்கள்?",
        "or": "ଆପଣ ଉତ୍ତର କେଉଁ ଲିପିରେ ପଢ଼ିବାକୁ ଚାହାଁନ୍ତି?",
    },
    "invalid_script": {
        "en": "Please reply 1 for native script or 2 for English letters.",
        "hi": "कृपया देवनागरी के लिए 1 या अंग्रेज़ी अक्षरों के लिए 2 लिखें।",
        "te": "దయచేసి తెలుగు లిపి కోసం 1 లేదా ఆంగ్ల అక్షరాల కోసం 2 పంపండి.",
        "ta": "தமிழ் எழுத்துக்கு 1 அல்லது ஆங்கில எழுத்துக்கு 2 அனுப்பவும்.",
        "or": "ଓଡ଼ିଆ ଲିପି ପାଇଁ 1 କିମ୍ବା ଇଂରାଜୀ ଅକ୍ଷର ପାଇଁ 2 ପଠାନ୍ତୁ।",
    },
    "main_menu": {
        "en": "🏥 Main Menu\nHow can I help you today?",
        "hi": "🏥 मुख्य मेनू\nआज मैं आपकी कैसे मदद कर सकता हूं?",
        "hi_trans": "🏥 Mukhya Menu\nAaj main aapki kaise madad kar sakta hoon?",
        "te": "🏥 ప్రధాన మెనూ\nఈరోజు నేను మీకు ఎలా సహాయం చేయగలను?",
        "te_trans": "🏥 Pradhana Menu\nEeroju nenu meeku ela sahayam cheyagalanu?",
        "ta": "🏥 முதன்மை மெனு\nஇன்று நான் உங்களுக்கு எப்படி உதவ முடியும்?",
        "ta_trans": "🏥 Mudhanmai Menu\nIndru naan ungalukku eppadi udhava mudiyum?",
        "or": "🏥 ମୁଖ୍ୟ ମେନୁ\nଆଜି ମୁଁ ଆପଣଙ୍କୁ କିପରି ସାହାଯ୍ୟ କରିପାରିବି?",
        "or_trans": "🏥 Mukhya Menu\nAaji mun apananku kipari sahajya karipaaribi?",
    },
    "more_options": {
        "en": "⚙️ More options:",
        "hi": "⚙️ और विकल्प:",
        "hi_trans": "⚙️ Aur vikalp:",
        "te": "⚙️ మరిన్ని ఎంపికలు:",
        "te_trans": "⚙️ Marinni empikalu:",
        "ta": "⚙️ மேலும் விருப்பங்கள்:",
        "ta_trans": "⚙️ Melum viruppangal:",
        "or": "⚙️ ଅଧିକ ବିକଳ୍ପ:",
        "or_trans": "⚙️ Adhika bikalpa:",
    },
    "ai_chat_instructions": {
        "en": (
            "🤖 AI Health Chat\n\nAsk me any health question: diseases, "
            "prevention, healthy habits, myths vs facts.\n\n"
            "Type 'menu' anytime to go back."
        ),
        "hi": (
            "🤖 AI स्वास्थ्य चैट\n\nमुझसे कोई भी स्वास्थ्य प्रश्न पूछें: बीमारियां, "
            "बचाव, स्वस्थ आदतें, मिथक और तथ्य।\n\nवापस जाने के लिए कभी भी 'menu' लिखें।"
        ),
        "hi_trans": (
            "🤖 AI Swasthya Chat\n\nMujhse koi bhi swasthya prashn poochhein: "
            "bimariyan, bachav, swasth aadatein.\n\nWapas jaane ke liye 'menu' likhein."
        ),
        "te": (
            "🤖 AI ఆరోగ్య చాట్\n\nఏదైనా ఆరోగ్య ప్రశ్న అడగండి: వ్యాధులు, నివారణ, "
            "ఆరోగ్యకరమైన అలవాట్లు.\n\nతిరిగి వెళ్ళడానికి 'menu' టైప్ చేయండి."
        ),
        "te_trans": (
            "🤖 AI Arogya Chat\n\nEdaina arogya prashna adagandi: vyadhulu, "
            "nivarana, alavatlu.\n\nTirigi vellataniki 'menu' type cheyandi."
        ),
        "ta": (
            "🤖 AI சுகாதார அரட்டை\n\nஎந்த உடல்நலக் கேள்வியையும் கேளுங்கள்: நோய்கள், "
            "தடுப்பு, ஆரோக்கிய பழக்கங்கள்.\n\nதிரும்ப செல்ல 'menu' என தட்டச்சு செய்யவும்."
        ),
        "ta_trans": (
            "🤖 AI Sugaadhaara Chat\n\nEndha udalnala kelviyaiyum kelungal: "
            "noigal, thaduppu, pazhakkangal.\n\nThirumba sella 'menu' type seiyavum."
        ),
        "or": (
            "🤖 AI ସ୍ୱାସ୍ଥ୍ୟ ଚାଟ୍\n\nଯେକୌଣସି ସ୍ୱାସ୍ଥ୍ୟ ପ୍ରଶ୍ନ ପଚାରନ୍ତୁ: ରୋଗ, ପ୍ରତିରୋଧ, "
            "ସୁସ୍ଥ ଅଭ୍ୟାସ।\n\nଫେରିବା ପାଇଁ 'menu' ଟାଇପ୍ କରନ୍ତୁ।"
        ),
        "or_trans": (
            "🤖 AI Swasthya Chat\n\nJekaunasi swasthya prashna pacharantu: roga, "
            "pratirodha, abhyasa.\n\nPheriba paain 'menu' type karantu."
        ),
    },
    "symptom_prompt": {
        "en": (
            "🩺 Symptom Checker\n\nPlease describe your symptoms: what you "
            "feel, since when, and how severe it is."
        ),
        "hi": (
            "🩺 लक्षण जांच\n\nकृपया अपने लक्षण बताएं: आप क्या महसूस कर रहे हैं, "
            "कब से, और कितना गंभीर है।"
        ),
        "hi_trans": (
            "🩺 Lakshan Jaanch\n\nKripya apne lakshan batayein: kya mehsoos ho "
            "raha hai, kab se, aur kitna gambhir hai."
        ),
        "te": (
            "🩺 లక్షణాల తనిఖీ\n\nదయచేసి మీ లక్షణాలను వివరించండి: ఏమి అనిపిస్తోంది, "
            "ఎప్పటి నుండి, ఎంత తీవ్రంగా ఉంది."
        ),
        "te_trans": (
            "🩺 Lakshanala Tanikhi\n\nDayachesi mee lakshanalanu vivarinchandi: "
            "emi anipistondi, eppati nundi, entha teevranga undi."
        ),
        "ta": (
            "🩺 அறிகுறி சோதனை\n\nஉங்கள் அறிகுறிகளை விவரிக்கவும்: என்ன உணர்கிறீர்கள், "
            "எப்போதிலிருந்து, எவ்வளவு கடுமையாக."
        ),
        "ta_trans": (
            "🩺 Arigurigal Sodhanai\n\nUngal arigurigalai vivarikkavum: enna "
            "unargireergal, eppodhilirundhu, evvalavu kadumaiyaaga."
        ),
        "or": (
            "🩺 ଲକ୍ଷଣ ଯାଞ୍ଚ\n\nଦୟାକରି ଆପଣଙ୍କ ଲକ୍ଷଣ ବର୍ଣ୍ଣନା କରନ୍ତୁ: କଣ ଅନୁଭବ କରୁଛନ୍ତି, "
            "କେବେଠାରୁ, କେତେ ଗମ୍ଭୀର।"
        ),
        "or_trans": (
            "🩺 Lakshana Jaancha\n\nDayakari apananka lakshana barnana karantu: "
            "kana anubhaba karuchhanti, kebethaaru, kete gambhira."
        ),
    },
    "tips_categories": {
        "en": "🌱 Preventive Healthcare\nChoose a topic:",
        "hi": "🌱 निवारक स्वास्थ्य\nएक विषय चुनें:",
        "hi_trans": "🌱 Nivarak Swasthya\nEk vishay chunein:",
        "te": "🌱 నివారణ ఆరోగ్యం\nఒక అంశాన్ని ఎంచుకోండి:",
        "te_trans": "🌱 Nivarana Arogyam\nOka amshanni enchukondi:",
        "ta": "🌱 தடுப்பு சுகாதாரம்\nஒரு தலைப்பைத் தேர்ந்தெடுக்கவும்:",
        "ta_trans": "🌱 Thaduppu Sugaadhaaram\nOru thalaippai therndhedukkavum:",
        "or": "🌱 ପ୍ରତିଷେଧକ ସ୍ୱାସ୍ଥ୍ୟ\nଗୋଟିଏ ବିଷୟ ବାଛନ୍ତୁ:",
        "or_trans": "🌱 Pratishedhaka Swasthya\nGotiye bishaya bachhantu:",
    },
    "disease_name_prompt": {
        "en": "🦠 Type the name of a disease you want to learn about (e.g. dengue, diabetes).",
        "hi": "🦠 उस बीमारी का नाम लिखें जिसके बारे में आप जानना चाहते हैं (जैसे डेंगू, मधुमेह)।",
        "hi_trans": "🦠 Us bimari ka naam likhein jiske baare mein jaanna chahte hain (jaise dengue, diabetes).",
        "te": "🦠 మీరు తెలుసుకోవాలనుకునే వ్యాధి పేరు టైప్ చేయండి (ఉదా. డెంగ్యూ, మధుమేహం).",
        "te_trans": "🦠 Meeru telusukovalanukune vyadhi peru type cheyandi (udaa. dengue, diabetes).",
        "ta": "🦠 நீங்கள் அறிய விரும்பும் நோயின் பெயரை தட்டச்சு செய்யவும் (எ.கா. டெங்கு, நீரிழிவு).",
        "ta_trans": "🦠 Neengal ariya virumbum noyin peyarai type seiyavum (e.g. dengue, diabetes).",
        "or": "🦠 ଆପଣ ଜାଣିବାକୁ ଚାହୁଁଥିବା ରୋଗର ନାମ ଟାଇପ୍ କରନ୍ତୁ (ଯେପରି ଡେଙ୍ଗୁ, ମଧୁମେହ)।",
        "or_trans": "🦠 Apana janibaku chahunthiba rogara nama type karantu (jepari dengue, diabetes).",
    },
    "feedback_prompt": {
        "en": "📝 Please type your feedback about this service.",
        "hi": "📝 कृपया इस सेवा के बारे में अपनी प्रतिक्रिया लिखें।",
        "hi_trans": "📝 Kripya is seva ke baare mein apni pratikriya likhein.",
        "te": "📝 దయచేసి ఈ సేవ గురించి మీ అభిప్రాయాన్ని టైప్ చేయండి.",
        "te_trans": "📝 Dayachesi ee seva gurinchi mee abhiprayanni type cheyandi.",
        "ta": "📝 இந்த சேவை பற்றிய உங்கள் கருத்தை தட்டச்சு செய்யவும்.",
        "ta_trans": "📝 Indha sevai patriya ungal karuththai type seiyavum.",
        "or": "📝 ଦୟାକରି ଏହି ସେବା ବିଷୟରେ ଆପଣଙ୍କ ମତାମତ ଲେଖନ୍ତୁ।",
        "or_trans": "📝 Dayakari ehi seba bishayare apananka matamata lekhantu.",
    },
    "feedback_thanks": {
        "en": "🙏 Thank you for your feedback!",
        "hi": "🙏 आपकी प्रतिक्रिया के लिए धन्यवाद!",
        "hi_trans": "🙏 Aapki pratikriya ke liye dhanyavaad!",
        "te": "🙏 మీ అభిప్రాయానికి ధన్యవాదాలు!",
        "te_trans": "🙏 Mee abhiprayaniki dhanyavadalu!",
        "ta": "🙏 உங்கள் கருத்துக்கு நன்றி!",
        "ta_trans": "🙏 Ungal karuththukku nandri!",
        "or": "🙏 ଆପଣଙ୍କ ମତାମତ ପାଇଁ ଧନ୍ୟବାଦ!",
        "or_trans": "🙏 Apananka matamata paain dhanyabad!",
    },
    "emergency_detected": {
        "en": (
            "🚨 This sounds like a medical emergency.\n\n"
            "📞 Call {number} (ambulance) immediately or go to the nearest "
            "hospital.\n\nDo not wait for an online reply."
        ),
        "hi": (
            "🚨 यह एक चिकित्सा आपातकाल लगता है।\n\n"
            "📞 तुरंत {number} (एम्बुलेंस) पर कॉल करें या नज़दीकी अस्पताल जाएं।\n\n"
            "ऑनलाइन जवाब का इंतज़ार न करें।"
        ),
        "hi_trans": (
            "🚨 Yeh ek chikitsa aapatkaal lagta hai.\n\n"
            "📞 Turant {number} (ambulance) par call karein ya nazdeeki "
            "aspatal jayein.\n\nOnline jawab ka intezaar na karein."
        ),
        "te": (
            "🚨 ఇది వైద్య అత్యవసర పరిస్థితిలా ఉంది.\n\n"
            "📞 వెంటనే {number} (అంబులెన్స్)కి కాల్ చేయండి లేదా దగ్గరలోని "
            "ఆసుపత్రికి వెళ్ళండి."
        ),
        "te_trans": (
            "🚨 Idi vaidya atyavasara paristhitila undi.\n\n"
            "📞 Ventane {number} (ambulance)ki call cheyandi leda daggaraloni "
            "aasupatriki vellandi."
        ),
        "ta": (
            "🚨 இது ஒரு மருத்துவ அவசரநிலை போல் தெரிகிறது.\n\n"
            "📞 உடனடியாக {number} (ஆம்புலன்ஸ்) அழைக்கவும் அல்லது அருகிலுள்ள "
            "மருத்துவமனைக்குச் செல்லவும்."
        ),
        "ta_trans": (
            "🚨 Idhu oru maruththuva avasaranilai pol therigiradhu.\n\n"
            "📞 Udanadiyaaga {number} (ambulance) azhaikkavum allathu "
            "arugilulla maruththuvamanaikku sellavum."
        ),
        "or": (
            "🚨 ଏହା ଏକ ଚିକିତ୍ସା ଜରୁରୀକାଳୀନ ପରିସ୍ଥିତି ପରି ଲାଗୁଛି।\n\n"
            "📞 ତୁରନ୍ତ {number} (ଆମ୍ବୁଲାନ୍ସ) କୁ କଲ୍ କରନ୍ତୁ କିମ୍ବା ନିକଟସ୍ଥ "
            "ଡାକ୍ତରଖାନାକୁ ଯାଆନ୍ତୁ।"
        ),
        "or_trans": (
            "🚨 Eha eka chikitsa jaruri paristhiti pari laaguchhi.\n\n"
            "📞 Turanta {number} (ambulance) ku call karantu kimba nikatastha "
            "daktarakhanaku jaantu."
        ),
    },
    "coming_soon": {
        "en": "🚧 This feature is coming soon. Please check back later.",
        "hi": "🚧 यह सुविधा जल्द आ रही है। कृपया बाद में देखें।",
        "hi_trans": "🚧 Yeh suvidha jald aa rahi hai. Kripya baad mein dekhein.",
        "te": "🚧 ఈ ఫీచర్ త్వరలో వస్తుంది. దయచేసి తర్వాత చూడండి.",
        "te_trans": "🚧 Ee feature tvaralo vastundi. Dayachesi tarvata chudandi.",
        "ta": "🚧 இந்த வசதி விரைவில் வரும். பின்னர் பார்க்கவும்.",
        "ta_trans": "🚧 Indha vasadhi viraivil varum. Pinnar paarkkavum.",
        "or": "🚧 ଏହି ସୁବିଧା ଶୀଘ୍ର ଆସୁଛି। ଦୟାକରି ପରେ ଦେଖନ୍ତୁ।",
        "or_trans": "🚧 Ehi subidha sheeghra aasuchhi. Dayakari pare dekhantu.",
    },
    "accessibility_updated": {
        "en": "✅ Accessibility mode set to: {mode}.",
        "hi": "✅ सुलभता मोड सेट किया गया: {mode}।",
        "hi_trans": "✅ Accessibility mode set kiya gaya: {mode}.",
        "te": "✅ యాక్సెసిబిలిటీ మోడ్ సెట్ చేయబడింది: {mode}.",
        "ta": "✅ அணுகல் முறை அமைக்கப்பட்டது: {mode}.",
        "or": "✅ ଆକ୍ସେସିବିଲିଟି ମୋଡ୍ ସେଟ୍ ହେଲା: {mode}।",
    },
    "accessibility_help": {
        "en": "♿ Accessibility commands:\n{commands}",
        "hi": "♿ सुलभता कमांड:\n{commands}",
        "hi_trans": "♿ Accessibility commands:\n{commands}",
        "te": "♿ యాక్సెసిబిలిటీ ఆదేశాలు:\n{commands}",
        "ta": "♿ அணுகல் கட்டளைகள்:\n{commands}",
        "or": "♿ ଆକ୍ସେସିବିଲିଟି କମାଣ୍ଡ:\n{commands}",
    },
    "quick_actions": {
        "en": "Anything else I can help with?",
        "hi": "क्या मैं और कुछ मदद कर सकता हूं?",
        "hi_trans": "Kya main aur kuch madad kar sakta hoon?",
        "te": "నేను ఇంకా ఏమైనా సహాయం చేయగలనా?",
        "te_trans": "Nenu inka emaina sahayam cheyagalana?",
        "ta": "வேறு ஏதாவது உதவி வேண்டுமா?",
        "ta_trans": "Veru edhaavadhu udhavi vendumaa?",
        "or": "ଆଉ କିଛି ସାହାଯ୍ୟ କରିପାରିବି କି?",
        "or_trans": "Au kichhi sahajya karipaaribi ki?",
    },
    "error": {
        "en": "⚠️ Sorry, something went wrong. Please type 'menu' to continue.",
        "hi": "⚠️ क्षमा करें, कुछ गलत हो गया। जारी रखने के लिए 'menu' लिखें।",
        "hi_trans": "⚠️ Kshama karein, kuch galat ho gaya. Jaari rakhne ke liye 'menu' likhein.",
        "te": "⚠️ క్షమించండి, ఏదో తప్పు జరిగింది. కొనసాగించడానికి 'menu' టైప్ చేయండి.",
        "te_trans": "⚠️ Kshaminchandi, edo tappu jarigindi. Konasaginchadaniki 'menu' type cheyandi.",
        "ta": "⚠️ மன்னிக்கவும், ஏதோ தவறு நடந்தது. தொடர 'menu' என தட்டச்சு செய்யவும்.",
        "ta_trans": "⚠️ Mannikkavum, edho thavaru nadandhadhu. Thodara 'menu' type seiyavum.",
        "or": "⚠️ କ୍ଷମା କରନ୍ତୁ, କିଛି ଭୁଲ ହେଲା। ଜାରି ରଖିବାକୁ 'menu' ଟାଇପ୍ କରନ୍ତୁ।",
        "or_trans": "⚠️ Kshama karantu, kichhi bhula hela. Jaari rakhibaku 'menu' type karantu.",
    },
}

# Names shown in confirmations; always in the language's own script.
LANGUAGE_DISPLAY_NAMES: Dict[str, str] = {
    "en": "English",
    "hi": "हिंदी",
    "te": "తెలుగు",
    "ta": "தமிழ்",
    "or": "ଓଡ଼ିଆ",
}

LANGUAGE_ROMAN_NAMES: Dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "te": "Telugu",
    "ta": "Tamil",
    "or": "Odia",
}


# ---------------------------------------------------------------------------
# Menu catalog: option id -> (label, description), per language variant
# ---------------------------------------------------------------------------

Labels = Dict[str, Tuple[str, Optional[str]]]

MENU_LABELS: Dict[str, Dict[str, Labels]] = {
    "main_menu": {
        "en": {
            "chat_ai": ("🤖 Chat with AI", "Ask any health question"),
            "symptom_check": ("🩺 Check Symptoms", "Describe how you feel"),
            "preventive_tips": ("🌱 Preventive Tips", "Stay healthy"),
            "outbreak_alerts": ("🚨 Outbreak Alerts", "Disease alerts near you"),
            "change_language": ("🌐 Change Language", None),
            "more_options": ("⚙️ More Options", None),
        },
        "hi": {
            "chat_ai": ("🤖 AI से बात करें", "कोई भी स्वास्थ्य प्रश्न"),
            "symptom_check": ("🩺 लक्षण जांचें", "अपने लक्षण बताएं"),
            "preventive_tips": ("🌱 बचाव के सुझाव", "स्वस्थ रहें"),
            "outbreak_alerts": ("🚨 प्रकोप अलर्ट", "आसपास की बीमारियां"),
            "change_language": ("🌐 भाषा बदलें", None),
            "more_options": ("⚙️ और विकल्प", None),
        },
        "hi_trans": {
            "chat_ai": ("🤖 AI se baat karein", "Koi bhi swasthya prashn"),
            "symptom_check": ("🩺 Lakshan jaanchein", "Apne lakshan batayein"),
            "preventive_tips": ("🌱 Bachav ke sujhav", "Swasth rahein"),
            "outbreak_alerts": ("🚨 Prakop alert", None),
            "change_language": ("🌐 Bhasha badlein", None),
            "more_options": ("⚙️ Aur vikalp", None),
        },
        "te": {
            "chat_ai": ("🤖 AIతో చాట్", "ఏదైనా ఆరోగ్య ప్రశ్న"),
            "symptom_check": ("🩺 లక్షణాల తనిఖీ", "మీ లక్షణాలు చెప్పండి"),
            "preventive_tips": ("🌱 నివారణ చిట్కాలు", "ఆరోగ్యంగా ఉండండి"),
            "outbreak_alerts": ("🚨 వ్యాధి హెచ్చరికలు", None),
            "change_language": ("🌐 భాష మార్చండి", None),
            "more_options": ("⚙️ మరిన్ని ఎంపికలు", None),
        },
        "ta": {
            "chat_ai": ("🤖 AI உடன் அரட்டை", "உடல்நலக் கேள்விகள்"),
            "symptom_check": ("🩺 அறிகுறி சோதனை", "அறிகுறிகளைச் சொல்லுங்கள்"),
            "preventive_tips": ("🌱 தடுப்பு குறிப்புகள்", "ஆரோக்கியமாக இருங்கள்"),
            "outbreak_alerts": ("🚨 நோய் எச்சரிக்கைகள்", None),
            "change_language": ("🌐 மொழியை மாற்று", None),
            "more_options": ("⚙️ மேலும் விருப்பங்கள்", None),
        },
        "or": {
            "chat_ai": ("🤖 AI ସହ ଚାଟ୍", "ଯେକୌଣସି ସ୍ୱାସ୍ଥ୍ୟ ପ୍ରଶ୍ନ"),
            "symptom_check": ("🩺 ଲକ୍ଷଣ ଯାଞ୍ଚ", "ଆପଣଙ୍କ ଲକ୍ଷଣ କୁହନ୍ତୁ"),
            "preventive_tips": ("🌱 ପ୍ରତିରୋଧ ଟିପ୍ସ", "ସୁସ୍ଥ ରୁହନ୍ତୁ"),
            "outbreak_alerts": ("🚨 ରୋଗ ସତର୍କତା", None),
            "change_language": ("🌐 ଭାଷା ବଦଳାନ୍ତୁ", None),
            "more_options": ("⚙️ ଅଧିକ ବିକଳ୍ପ", None),
        },
    },
    "more_options": {
        "en": {
            "feedback": ("📝 Feedback", "Tell us how we did"),
            "appointments": ("📅 Appointments", "Book a doctor visit"),
            "main_menu": ("🏠 Main Menu", None),
        },
        "hi": {
            "feedback": ("📝 प्रतिक्रिया", "अपनी राय दें"),
            "appointments": ("📅 अपॉइंटमेंट", "डॉक्टर से मिलें"),
            "main_menu": ("🏠 मुख्य मेनू", None),
        },
        "hi_trans": {
            "feedback": ("📝 Pratikriya", "Apni raay dein"),
            "appointments": ("📅 Appointment", None),
            "main_menu": ("🏠 Mukhya Menu", None),
        },
        "te": {
            "feedback": ("📝 అభిప్రాయం", None),
            "appointments": ("📅 అపాయింట్‌మెంట్లు", None),
            "main_menu": ("🏠 ప్రధాన మెనూ", None),
        },
        "ta": {
            "feedback": ("📝 கருத்து", None),
            "appointments": ("📅 சந்திப்புகள்", None),
            "main_menu": ("🏠 முதன்மை மெனு", None),
        },
        "or": {
            "feedback": ("📝 ମତାମତ", None),
            "appointments": ("📅 ଆପଏଣ୍ଟମେଣ୍ଟ", None),
            "main_menu": ("🏠 ମୁଖ୍ୟ ମେନୁ", None),
        },
    },
    "tips_categories": {
        "en": {
            "learn_diseases": ("🦠 Learn about Diseases", None),
            "nutrition_hygiene": ("🥗 Nutrition & Hygiene", None),
            "exercise_lifestyle": ("🏃 Exercise & Lifestyle", None),
        },
        "hi": {
            "learn_diseases": ("🦠 बीमारियों के बारे में", None),
            "nutrition_hygiene": ("🥗 पोषण और स्वच्छता", None),
            "exercise_lifestyle": ("🏃 व्यायाम और जीवनशैली", None),
        },
        "hi_trans": {
            "learn_diseases": ("🦠 Bimariyon ki jaankari", None),
            "nutrition_hygiene": ("🥗 Poshan aur swachhta", None),
            "exercise_lifestyle": ("🏃 Vyayam, jeevanshaili", None),
        },
        "te": {
            "learn_diseases": ("🦠 వ్యాధుల గురించి", None),
            "nutrition_hygiene": ("🥗 పోషణ & పరిశుభ్రత", None),
            "exercise_lifestyle": ("🏃 వ్యాయామం & జీవనశైలి", None),
        },
        "ta": {
            "learn_diseases": ("🦠 நோய்கள் பற்றி", None),
            "nutrition_hygiene": ("🥗 ஊட்டச்சத்து, சுகாதாரம்", None),
            "exercise_lifestyle": ("🏃 உடற்பயிற்சி & வாழ்க்கை", None),
        },
        "or": {
            "learn_diseases": ("🦠 ରୋଗ ବିଷୟରେ", None),
            "nutrition_hygiene": ("🥗 ପୋଷଣ ଓ ସ୍ୱଚ୍ଛତା", None),
            "exercise_lifestyle": ("🏃 ବ୍ୟାୟାମ ଓ ଜୀବନଶୈଳୀ", None),
        },
    },
    "quick_actions": {
        "en": {
            "chat_ai": ("🤖 Ask another question", None),
            "symptom_check": ("🩺 Check Symptoms", None),
            "preventive_tips": ("🌱 Preventive Tips", None),
        },
        "hi": {
            "chat_ai": ("🤖 और प्रश्न पूछें", None),
            "symptom_check": ("🩺 लक्षण जांचें", None),
            "preventive_tips": ("🌱 बचाव के सुझाव", None),
        },
        "hi_trans": {
            "chat_ai": ("🤖 Aur prashn poochhein", None),
            "symptom_check": ("🩺 Lakshan jaanchein", None),
            "preventive_tips": ("🌱 Bachav ke sujhav", None),
        },
        "te": {
            "chat_ai": ("🤖 మరో ప్రశ్న అడగండి", None),
            "symptom_check": ("🩺 లక్షణాల తనిఖీ", None),
            "preventive_tips": ("🌱 నివారణ చిట్కాలు", None),
        },
        "ta": {
            "chat_ai": ("🤖 மற்றொரு கேள்வி", None),
            "symptom_check": ("🩺 அறிகுறி சோதனை", None),
            "preventive_tips": ("🌱 தடுப்பு குறிப்புகள்", None),
        },
        "or": {
            "chat_ai": ("🤖 ଆଉ ଏକ ପ୍ରଶ୍ନ", None),
            "symptom_check": ("🩺 ଲକ୍ଷଣ ଯାଞ୍ଚ", None),
            "preventive_tips": ("🌱 ପ୍ରତିରୋଧ ଟିପ୍ସ", None),
        },
    },
    "script_menu": {
        "en": {
            "script_native": ("Native script", None),
            "script_trans": ("English letters", "Roman letters"),
        },
        "hi": {
            "script_native": ("देवनागरी", "हिंदी लिपि"),
            "script_trans": ("English letters", "Hindi in Roman letters"),
        },
        "te": {
            "script_native": ("తెలుగు లిపి", None),
            "script_trans": ("English letters", "Telugu in Roman letters"),
        },
        "ta": {
            "script_native": ("தமிழ் எழுத்து", None),
            "script_trans": ("English letters", "Tamil in Roman letters"),
        },
        "or": {
            "script_native": ("ଓଡ଼ିଆ ଲିପି", None),
            "script_trans": ("English letters", "Odia in Roman letters"),
        },
    },
    "language_menu": {
        "en": {
            f"lang_{code}": (LANGUAGE_DISPLAY_NAMES[code], LANGUAGE_ROMAN_NAMES[code])
            for code in SUPPORTED_LANGUAGES
        },
    },
}

MENU_ORDER: Dict[str, Tuple[str, ...]] = {
    "main_menu": MAIN_MENU_OPTION_IDS,
    "more_options": MORE_OPTIONS_IDS,
    "tips_categories": PREVENTIVE_TIPS_CATEGORY_IDS,
    "quick_actions": ("chat_ai", "symptom_check", "preventive_tips"),
    "script_menu": ("script_native", "script_trans"),
    "language_menu": tuple(f"lang_{code}" for code in SUPPORTED_LANGUAGES),
}


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def _variants(language: str, script_preference: Optional[ScriptPreference]) -> List[str]:
    keys: List[str] = []
    if script_preference is ScriptPreference.TRANSLITERATION and language != "en":
        keys.append(f"{language}_trans")
    keys.extend([language, "en"])
    return keys


class TemplateStore:
    """
    Read-only access to canned texts and menus.

    Parameters
    ----------
    templates / menus / menu_order:
        Override the built-in catalog (tests, alternative deployments).
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, Mapping[str, str]]] = None,
        menus: Optional[Mapping[str, Mapping[str, Labels]]] = None,
        menu_order: Optional[Mapping[str, Tuple[str, ...]]] = None,
    ) -> None:
        self._templates = templates if templates is not None else TEMPLATES
        self._menus = menus if menus is not None else MENU_LABELS
        self._menu_order = menu_order if menu_order is not None else MENU_ORDER

    def has_template(self, key: str) -> bool:
        return key in self._templates

    def get_template(
        self,
        key: str,
        language: str,
        script_preference: Optional[ScriptPreference] = None,
        **values: object,
    ) -> str:
        """
        Return the text for `key` in the best available language variant,
        formatted with `values`.

        Raises
        ------
        KeyError
            If `key` is not a known template.
        """
        variants = self._templates.get(key)
        if variants is None:
            raise KeyError(f"Unknown template key: {key}")

        text = ""
        for variant in _variants(language, script_preference):
            if variant in variants:
                text = variants[variant]
                break

        return text.format(**values) if values else text

    def get_menu(
        self,
        key: str,
        language: str,
        script_preference: Optional[ScriptPreference] = None,
    ) -> List[MenuOption]:
        """
        Return the options of menu `key` in catalog order.

        Options missing from the chosen language variant fall back to the
        English label so a menu is never partially rendered.
        """
        catalog = self._menus.get(key)
        order = self._menu_order.get(key)
        if catalog is None or order is None:
            raise KeyError(f"Unknown menu key: {key}")

        chain = [catalog[v] for v in _variants(language, script_preference) if v in catalog]
        options: List[MenuOption] = []
        for option_id in order:
            for labels in chain:
                if option_id in labels:
                    label, description = labels[option_id]
                    options.append(
                        MenuOption(id=option_id, label=label, description=description)
                    )
                    break
        return options

    def language_name(self, language: str, script_preference: Optional[ScriptPreference] = None) -> str:
        if script_preference is ScriptPreference.TRANSLITERATION:
            return LANGUAGE_ROMAN_NAMES.get(language, language)
        return LANGUAGE_DISPLAY_NAMES.get(language, language)

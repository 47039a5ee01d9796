# Interview catalog: languages, interview types, voices and prompts

SUPPORTED_LANGUAGES = [
    {"code": "hi-IN", "name": "Hindi", "flag": "🇮🇳"},
    {"code": "pa-IN", "name": "Punjabi", "flag": "🇮🇳"},
    {"code": "bn-IN", "name": "Bengali", "flag": "🇮🇳"},
    {"code": "ta-IN", "name": "Tamil", "flag": "🇮🇳"},
    {"code": "te-IN", "name": "Telugu", "flag": "🇮🇳"},
    {"code": "gu-IN", "name": "Gujarati", "flag": "🇮🇳"},
    {"code": "kn-IN", "name": "Kannada", "flag": "🇮🇳"},
    {"code": "ml-IN", "name": "Malayalam", "flag": "🇮🇳"},
    {"code": "mr-IN", "name": "Marathi", "flag": "🇮🇳"},
    {"code": "or-IN", "name": "Odia", "flag": "🇮🇳"},
]

LANGUAGE_CODES = tuple(lang["code"] for lang in SUPPORTED_LANGUAGES)
DEFAULT_LANGUAGE = "hi-IN"

INTERVIEW_TYPES = (
    "Door-to-door Sales Assessment",
    "Customer Approach Evaluation",
    "Product Knowledge Test",
    "Objection Handling Skills",
)

EXPERIENCE_LEVELS = ("fresher", "experienced")

INTERVIEW_STATUSES = ("pending", "active", "completed", "cancelled")

# Sarvam speakers double as Vapi voice ids
SPEAKERS = {
    "hi-IN": "meera",
    "pa-IN": "punjabi-male",
    "bn-IN": "bengali-female",
    "ta-IN": "tamil-female",
    "te-IN": "telugu-male",
    "gu-IN": "gujarati-female",
    "kn-IN": "kannada-male",
    "ml-IN": "malayalam-female",
    "mr-IN": "marathi-male",
    "or-IN": "odia-female",
}
DEFAULT_SPEAKER = "meera"

GREETINGS = {
    "hi-IN": "नमस्ते! मैं आपका AI इंटरव्यूअर हूं। आज हम {interview_type} के लिए बात करेंगे। आप तैयार हैं?",
    "pa-IN": "ਸਤ ਸ੍ਰੀ ਅਕਾਲ! ਮੈਂ ਤੁਹਾਡਾ AI ਇੰਟਰਵਿਊਅਰ ਹਾਂ। ਅੱਜ ਅਸੀਂ {interview_type} ਬਾਰੇ ਗੱਲ ਕਰਾਂਗੇ। ਤੁਸੀਂ ਤਿਆਰ ਹੋ?",
    "bn-IN": "নমস্কার! আমি আপনার AI ইন্টারভিউয়ার। আজ আমরা {interview_type} নিয়ে আলোচনা করব। আপনি প্রস্তুত?",
    "ta-IN": "வணக்கம்! நான் உங்கள் AI இன்டர்வியூயர். இன்று நாம் {interview_type} பற்றி பேசுவோம். நீங்கள் தயாரா?",
    "te-IN": "నమస్కారం! నేను మీ AI ఇంటర్వ్యూయర్. ఈరోజు మనం {interview_type} గురించి మాట్లాడుతాము. మీరు సిద్ధంగా ఉన్నారా?",
    "gu-IN": "નમસ્તે! હું તમારો AI ઇન્ટરવ્યુઅર છું. આજે આપણે {interview_type} વિશે વાત કરીશું. તમે તૈયાર છો?",
    "kn-IN": "ನಮಸ್ಕಾರ! ನಾನು ನಿಮ್ಮ AI ಇಂಟರ್ವ್ಯೂಯರ್. ಇಂದು ನಾವು {interview_type} ಬಗ್ಗೆ ಮಾತನಾಡುತ್ತೇವೆ. ನೀವು ಸಿದ್ಧರಿದ್ದೀರಾ?",
    "ml-IN": "നമസ്കാരം! ഞാൻ നിങ്ങളുടെ AI ഇന്റർവ്യൂവർ ആണ്. ഇന്ന് നമ്മൾ {interview_type} സംബന്ധിച്ച് സംസാരിക്കും. നിങ്ങൾ തയ്യാറാണോ?",
    "mr-IN": "नमस्कार! मी तुमचा AI इंटरव्यूअर आहे. आज आम्ही {interview_type} बद्दल बोलू. तुम्ही तयार आहात का?",
    "or-IN": "ନମସ୍କାର! ମୁଁ ଆପଣଙ୍କର AI ଇଣ୍ଟରଭ୍ୟୁଅର। ଆଜି ଆମେ {interview_type} ବିଷୟରେ କଥା ହେବା। ଆପଣ ପ୍ରସ୍ତୁତ କି?",
}

INTERVIEWER_SYSTEM_PROMPT = """You are an AI interviewer conducting a {interview_type} for a {experience_level} bank sales representative.

IMPORTANT INSTRUCTIONS:
- Conduct the interview in {language_name} language
- Ask questions relevant to door-to-door bank sales and customer interaction
- Evaluate communication skills, product knowledge, and sales techniques
- Be encouraging but thorough in your questioning
- Ask follow-up questions based on responses
- Keep the interview conversational and professional
- Score responses on a scale of 1-10 for each question
- Focus on real-world banking scenarios and customer objections

INTERVIEW STRUCTURE:
1. Introduction and warm-up (2-3 questions)
2. Product knowledge assessment (3-4 questions)
3. Sales technique evaluation (3-4 questions)
4. Customer objection handling (2-3 questions)
5. Closing and next steps (1-2 questions)

EVALUATION CRITERIA:
- Communication clarity and confidence
- Product knowledge accuracy
- Sales approach effectiveness
- Customer empathy and rapport building
- Problem-solving abilities
- Language fluency and professionalism

Respond only in {language_name} unless the candidate uses English, in which case you may code-mix appropriately."""


def language_name(code):
    for lang in SUPPORTED_LANGUAGES:
        if lang["code"] == code:
            return lang["name"]
    return code


def speaker_for(language):
    return SPEAKERS.get(language, DEFAULT_SPEAKER)


def greeting_for(language, interview_type):
    template = GREETINGS.get(language, GREETINGS[DEFAULT_LANGUAGE])
    return template.format(interview_type=interview_type)


def interviewer_prompt(language, interview_type, experience_level):
    return INTERVIEWER_SYSTEM_PROMPT.format(
        interview_type=interview_type,
        experience_level=experience_level,
        language_name=language_name(language),
    )

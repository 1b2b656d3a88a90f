from enum import Enum


class LanguageCode(str, Enum):
    ENGLISH = "en"
    HINDI = "hi"
    MARATHI = "mr"
    URDU = "ur"
    KANNADA = "kn"
    TELUGU = "te"


LANGUAGE_NAMES = {
    LanguageCode.ENGLISH: "English",
    LanguageCode.HINDI: "Hindi",
    LanguageCode.MARATHI: "Marathi",
    LanguageCode.URDU: "Urdu",
    LanguageCode.KANNADA: "Kannada",
    LanguageCode.TELUGU: "Telugu",
}

DEFAULT_LANGUAGE = "English"


def language_name(language: str | None) -> str:
    """Resolve a language code to its English name; names pass through."""
    if not language or not language.strip():
        return DEFAULT_LANGUAGE
    value = language.strip()
    try:
        return LANGUAGE_NAMES[LanguageCode(value.lower())]
    except ValueError:
        return value

"""Human readable names for two letter locale codes."""

from abc import ABC, abstractmethod


class LocaleNamer(ABC):
    """Turns a locale code into a display label for the admin screens.

    Purely cosmetic: it never affects which tracks are found.
    """

    @abstractmethod
    def display_name(self, code: str, ui_locale: str) -> str | None:
        """Label for ``code`` in the ``ui_locale`` language, or None if unknown."""


# ISO 639-1 codes commonly seen on video tracks
_ENGLISH_NAMES: dict[str, str] = {
    "ar": "Arabic",
    "bg": "Bulgarian",
    "bn": "Bengali",
    "ca": "Catalan",
    "cs": "Czech",
    "cy": "Welsh",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "eo": "Esperanto",
    "es": "Spanish",
    "et": "Estonian",
    "eu": "Basque",
    "fa": "Persian",
    "fi": "Finnish",
    "fr": "French",
    "ga": "Irish",
    "gl": "Galician",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "hu": "Hungarian",
    "hy": "Armenian",
    "id": "Indonesian",
    "is": "Icelandic",
    "it": "Italian",
    "ja": "Japanese",
    "ka": "Georgian",
    "ko": "Korean",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "ms": "Malay",
    "nb": "Norwegian Bokmål",
    "nl": "Dutch",
    "no": "Norwegian",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "sk": "Slovak",
    "sl": "Slovenian",
    "sr": "Serbian",
    "sv": "Swedish",
    "sw": "Swahili",
    "ta": "Tamil",
    "th": "Thai",
    "tl": "Tagalog",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "zh": "Chinese",
}


class EnglishLocaleNamer(LocaleNamer):
    """Table-backed namer that only knows English labels.

    Returns None for unknown codes and for non-English UI locales so
    callers fall back to the raw code.
    """

    def display_name(self, code: str, ui_locale: str) -> str | None:
        if not ui_locale.lower().startswith("en"):
            return None
        return _ENGLISH_NAMES.get(code.lower())

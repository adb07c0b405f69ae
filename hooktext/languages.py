"""Language names and codes understood by each translation provider."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

AUTO_DETECT = "?"


@dataclass(frozen=True)
class LanguageTable:
    """Languages a provider translates to and from, and the code it uses for each."""

    provider: str
    languages_to: tuple[str, ...]
    languages_from: tuple[str, ...]
    codes: Mapping[str, str]

    def code(self, language: str) -> str:
        """Return the provider's code for a language name; ``?`` means detect."""
        try:
            return self.codes[language]
        except KeyError:
            raise KeyError(f"{self.provider} does not know the language {language!r}") from None


_DEEPL_TO = (
    "Bulgarian", "Chinese (Simplified)", "Czech", "Danish", "Dutch",
    "English (American)", "English (British)", "Estonian", "Finnish", "French",
    "German", "Greek", "Hungarian", "Italian", "Japanese", "Latvian",
    "Lithuanian", "Polish", "Portuguese", "Portuguese (Brazilian)", "Romanian",
    "Russian", "Slovak", "Slovenian", "Spanish", "Swedish",
)
_DEEPL_FROM = (
    "Bulgarian", "Chinese", "Czech", "Danish", "Dutch", "English", "Estonian",
    "Finnish", "French", "German", "Greek", "Hungarian", "Italian", "Japanese",
    "Latvian", "Lithuanian", "Polish", "Portuguese", "Romanian", "Russian",
    "Slovak", "Slovenian", "Spanish", "Swedish",
)
_DEEPL_CODES = {
    **{name: name for name in (*_DEEPL_TO, *_DEEPL_FROM)},
    "Chinese (Simplified)": "Chinese (simplified)",
    AUTO_DETECT: "Detect language",
}

_PAPAGO_CODES = {
    "Chinese (Simplified)": "zh-CN",
    "Chinese (Traditional)": "zt-TW",
    "English": "en",
    "French": "fr",
    "German": "de",
    "Hindi": "hi",
    "Indonesian": "id",
    "Italian": "it",
    "Japanese": "ja",
    "Korean": "ko",
    "Portuguese": "pt",
    "Russian": "ru",
    "Spanish": "es",
    "Thai": "th",
    "Vietnamese": "vi",
    AUTO_DETECT: "auto",
}
_PAPAGO_LANGUAGES = tuple(name for name in _PAPAGO_CODES if name != AUTO_DETECT)

_SYSTRAN_CODES = {
    "Albanian": "sq",
    "Arabic": "ar",
    "Bengali": "bn",
    "Bulgarian": "bg",
    "Burmese": "my",
    "Catalan": "ca",
    "Chinese (Simplified)": "zh",
    "Chinese (Traditional)": "zt",
    "Croatian": "hr",
    "Czech": "cs",
    "Danish": "da",
    "Dutch": "nl",
    "English": "en",
    "Estonian": "et",
    "Finnish": "fi",
    "French": "fr",
    "German": "de",
    "Greek": "el",
    "Hebrew": "he",
    "Hindi": "hi",
    "Hungarian": "hu",
    "Indonesian": "id",
    "Italian": "it",
    "Japanese": "ja",
    "Korean": "ko",
    "Latvian": "lv",
    "Lithuanian": "lt",
    "Malay": "ms",
    "Norwegian": "no",
    "Pashto": "ps",
    "Persian": "fa",
    "Polish": "pl",
    "Portuguese": "pt",
    "Romanian": "ro",
    "Russian": "ru",
    "Serbian": "sr",
    "Slovak": "sk",
    "Slovenian": "sl",
    "Somali": "so",
    "Spanish": "es",
    "Swedish": "sv",
    "Tagalog": "tl",
    "Tamil": "ta",
    "Thai": "th",
    "Turkish": "tr",
    "Ukrainian": "uk",
    "Urdu": "ur",
    "Vietnamese": "vi",
    AUTO_DETECT: "autodetect",
}
_SYSTRAN_LANGUAGES = tuple(name for name in _SYSTRAN_CODES if name != AUTO_DETECT)

_TABLES = {
    table.provider: table
    for table in (
        LanguageTable("DevTools DeepL Translate", _DEEPL_TO, _DEEPL_FROM, MappingProxyType(_DEEPL_CODES)),
        LanguageTable(
            "DevTools Papago Translate", _PAPAGO_LANGUAGES, _PAPAGO_LANGUAGES, MappingProxyType(_PAPAGO_CODES)
        ),
        LanguageTable(
            "DevTools Systran Translate", _SYSTRAN_LANGUAGES, _SYSTRAN_LANGUAGES, MappingProxyType(_SYSTRAN_CODES)
        ),
    )
}
_SHORT_NAMES = {
    "deepl": "DevTools DeepL Translate",
    "papago": "DevTools Papago Translate",
    "systran": "DevTools Systran Translate",
}


def get_table(provider: str) -> LanguageTable:
    """Return the table of a provider, by full name or by short name such as ``deepl``."""
    name = _SHORT_NAMES.get(provider.lower(), provider)
    try:
        return _TABLES[name]
    except KeyError:
        raise KeyError(f"unknown translation provider {provider!r}") from None
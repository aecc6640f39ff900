"""Language models and mappings for Web Speech recognition."""

import re
from dataclasses import dataclass


@dataclass
class LanguageInfo:
    """Information about a recognition locale."""

    code: str
    name: str
    native_name: str


# Locales Chrome's recognizer is commonly used with. Others may still work;
# the browser decides.
LANGUAGE_MAP: dict[str, LanguageInfo] = {
    "en-us": LanguageInfo(code="en-US", name="English (United States)", native_name="English (US)"),
    "en-gb": LanguageInfo(code="en-GB", name="English (United Kingdom)", native_name="English (UK)"),
    "fr-fr": LanguageInfo(code="fr-FR", name="French", native_name="Français"),
    "de-de": LanguageInfo(code="de-DE", name="German", native_name="Deutsch"),
    "es-es": LanguageInfo(code="es-ES", name="Spanish", native_name="Español"),
    "it-it": LanguageInfo(code="it-IT", name="Italian", native_name="Italiano"),
    "pt-br": LanguageInfo(code="pt-BR", name="Portuguese (Brazil)", native_name="Português (Brasil)"),
    "ja-jp": LanguageInfo(code="ja-JP", name="Japanese", native_name="日本語"),
    "ko-kr": LanguageInfo(code="ko-KR", name="Korean", native_name="한국어"),
    "zh-cn": LanguageInfo(code="zh-CN", name="Chinese (Simplified)", native_name="中文 (简体)"),
    "ar-sa": LanguageInfo(code="ar-SA", name="Arabic", native_name="العربية"),
}

# language[-script][-region](-variant)*
_BCP47_RE = re.compile(
    r"^[A-Za-z]{2,3}"
    r"(-[A-Za-z]{4})?"
    r"(-(?:[A-Za-z]{2}|[0-9]{3}))?"
    r"(-(?:[A-Za-z0-9]{5,8}|[0-9][A-Za-z0-9]{3}))*$"
)


def is_valid_bcp47(tag: str) -> bool:
    """Check that a tag is shaped like a BCP-47 language tag."""
    return bool(tag) and _BCP47_RE.match(tag) is not None


def is_language_supported(tag: str) -> bool:
    """Check if a locale is in the known language map."""
    return tag.lower() in LANGUAGE_MAP

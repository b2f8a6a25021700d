"""
Message catalog for hostconfig-agent.

Wraps gettext so every user-facing message can be translated. Catalogs live in
``locales/<lang>/LC_MESSAGES/hostconfig.mo``; a missing catalog falls back to
the untranslated English text.
"""

import gettext
import os
from typing import Dict, Optional

DEFAULT_LANGUAGE = "en"
DOMAIN = "hostconfig"

CURRENT_LANGUAGE = DEFAULT_LANGUAGE

TRANSLATIONS: Dict[str, gettext.NullTranslations] = {}


def set_language(language: str) -> None:
    """Set the current language for translations."""
    global CURRENT_LANGUAGE  # pylint: disable=global-statement
    CURRENT_LANGUAGE = language or DEFAULT_LANGUAGE


def get_language() -> str:
    """Get the current language."""
    return CURRENT_LANGUAGE


def get_translation(language: Optional[str] = None) -> gettext.NullTranslations:
    """Get (and cache) the translation object for a language."""
    if language is None:
        language = CURRENT_LANGUAGE

    if language not in TRANSLATIONS:
        localedir = os.path.join(os.path.dirname(__file__), "locales")
        try:
            TRANSLATIONS[language] = gettext.translation(DOMAIN, localedir, [language])
        except FileNotFoundError:
            TRANSLATIONS[language] = gettext.NullTranslations()

    return TRANSLATIONS[language]


def _(message: str, language: Optional[str] = None) -> str:
    """Translate a message."""
    return get_translation(language).gettext(message)

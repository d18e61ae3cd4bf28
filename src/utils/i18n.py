from __future__ import annotations

"""
Internationalization (i18n) utility module for user-facing error messages.

This module provides functionality for:
- Loading and managing translations for the supported languages
- Translating message keys based on user preferences
- Determining user language from request query parameters or headers
- Fallback mechanisms for missing translations

The module uses Python's built-in gettext for translation management. Compiled
*.mo* catalogs are optional: the *.po* sources are parsed at startup and used
as a secondary lookup, so a checkout without a compile step still serves the
right strings.
"""

import gettext
import os
from typing import Dict, Optional

from fastapi import Request

from src.core.config.settings import settings
from src.core.logging import logger

# Store translations for each language
_translations: Dict[str, gettext.NullTranslations] = {}

# Secondary lookup parsed from the *.po* sources
_fallback_catalogs: Dict[str, Dict[str, str]] = {}

_LOCALES_PATH = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "locales")
)


def setup_i18n(locales_path: str = _LOCALES_PATH) -> None:
    """
    Initialize the internationalization system by loading translations.

    Loads the gettext catalog for each supported language and parses the
    matching .po file as a fallback.

    Raises:
        FileNotFoundError: If the locales directory is not found.
    """
    if not os.path.exists(locales_path):
        raise FileNotFoundError(f"Locales directory not found: {locales_path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = gettext.translation(
            domain="messages",
            localedir=locales_path,
            languages=[lang],
            fallback=True,
        )

        po_path = os.path.join(locales_path, lang, "LC_MESSAGES", "messages.po")
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            with open(po_path, "r", encoding="utf-8") as po_file:
                current_msgid: Optional[str] = None
                for raw_line in po_file:
                    line = raw_line.strip()
                    if line.startswith("msgid "):
                        current_msgid = line[6:].strip().strip('"')
                    elif line.startswith("msgstr ") and current_msgid is not None:
                        msgstr = line[7:].strip().strip('"')
                        if current_msgid:
                            catalog[current_msgid] = msgstr or current_msgid
                        current_msgid = None

        _fallback_catalogs[lang] = catalog
        logger.debug("i18n_initialized", language=lang, entries=len(catalog))

    logger.info("i18n_setup_complete", default_locale=settings.DEFAULT_LANGUAGE)


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Falls back to the default language, then to the key itself.

    Args:
        key: The message key to translate.
        locale: The target language code (defaults to DEFAULT_LANGUAGE).

    Returns:
        The translated message or the original key if no translation exists.
    """
    if not _translations:
        setup_i18n()

    if locale not in _translations:
        logger.warning(
            "unsupported_locale_requested",
            requested_locale=locale,
            fallback_locale=settings.DEFAULT_LANGUAGE,
        )
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if not translation:
        logger.error("translation_missing_for_locale", locale=locale)
        return key

    translated = translation.gettext(key)
    if translated == key:
        translated = _fallback_catalogs.get(locale, {}).get(key, key)
        if translated == key and locale != settings.DEFAULT_LANGUAGE:
            return get_translated_message(key, settings.DEFAULT_LANGUAGE)

    return translated


def get_request_language(request: Request) -> str:
    """
    Determine the preferred language from a request.

    Checks language preference in order: query parameter 'lang',
    Accept-Language header, then default language from settings.
    """
    lang = request.query_params.get("lang")
    if lang and lang in settings.SUPPORTED_LANGUAGES:
        return lang

    accept_language = request.headers.get("Accept-Language", settings.DEFAULT_LANGUAGE)
    for lang in accept_language.split(","):
        lang = lang.split(";")[0].strip().split("-")[0]
        if lang in settings.SUPPORTED_LANGUAGES:
            return lang

    return settings.DEFAULT_LANGUAGE

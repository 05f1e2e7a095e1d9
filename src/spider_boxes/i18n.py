"""Translation of descriptor titles and validation messages using gettext."""

import gettext as gettext_module
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

DOMAIN = "spider_boxes"
LOCALE_DIR = Path(__file__).parent / "locales"

_thread_local = threading.local()

_ui_language = "en"


def initialize(ui_language: str = "en") -> None:
    """Select the UI language for descriptor titles and messages.

    Call once at startup. Threads that already loaded a translation keep it,
    so this should run before the first request is served.

    Args:
        ui_language: Language code, e.g. "en" or "de"
    """
    global _ui_language

    _ui_language = ui_language
    if hasattr(_thread_local, "translation"):
        del _thread_local.translation

    logger.info(f"Translation initialized: UI={ui_language}")


def _get_translation() -> gettext_module.NullTranslations:
    if not hasattr(_thread_local, "translation"):
        _thread_local.translation = _load_translation(_ui_language)
    return _thread_local.translation


def gettext(message: str) -> str:
    return _get_translation().gettext(message)


def ngettext(singular: str, plural: str, count: int) -> str:
    return _get_translation().ngettext(singular, plural, count)


def _load_translation(language: str | None = None) -> gettext_module.NullTranslations:
    """Load a gettext catalog, falling back to the English msgid."""
    if not language or language == "en":
        return gettext_module.NullTranslations()

    try:
        translation = gettext_module.translation(
            domain=DOMAIN,
            localedir=str(LOCALE_DIR),
            languages=[language],
            fallback=True,
        )
        logger.info(f"Loaded translation for language: {language}")
        return translation
    except Exception as e:
        logger.warning(f"Failed to load translation for {language}: {e}, using fallback")
        return gettext_module.NullTranslations()

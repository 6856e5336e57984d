"""Label catalogues shared by the calculation service and the widget."""

from .catalog import (
    BASE_LOCALE,
    Translator,
    available_locales,
    get_translator,
    load_translations,
    normalise_locale,
)

__all__ = [
    "BASE_LOCALE",
    "Translator",
    "available_locales",
    "get_translator",
    "load_translations",
    "normalise_locale",
]

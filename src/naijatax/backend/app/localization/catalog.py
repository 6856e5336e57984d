"""Translation catalogue helpers backed by JSON resources in ``naijatax.translations``."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Mapping

BASE_LOCALE = "en"
_TRANSLATIONS_PACKAGE = "naijatax.translations"


@dataclass(frozen=True)
class Translator:
    """Callable returning the label for a key, falling back to the base locale."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)


@dataclass(frozen=True)
class Catalogue:
    """Backend labels and frontend strings published for one locale."""

    locale: str
    backend: Mapping[str, str]
    frontend: Mapping[str, Any]


@cache
def available_locales() -> tuple[str, ...]:
    """Return the locales that ship a JSON catalogue."""

    root = resources.files(_TRANSLATIONS_PACKAGE)
    locales = sorted(
        entry.name[: -len(".json")]
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(locales) or (BASE_LOCALE,)


@cache
def _load_catalogue(locale: str) -> Catalogue:
    resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        return Catalogue(locale=locale, backend={}, frontend={})

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    backend = payload.get("backend") or {}
    frontend = payload.get("frontend") or {}
    if not isinstance(backend, dict) or not isinstance(frontend, dict):
        raise ValueError(f"Translation catalogue '{locale}' is malformed")

    return Catalogue(
        locale=locale,
        backend={str(key): str(value) for key, value in backend.items()},
        frontend=frontend,
    )


def normalise_locale(locale: str | None) -> str:
    """Map ``en-NG``-style hints onto a published catalogue, defaulting to English."""

    if not locale:
        return BASE_LOCALE

    language = locale.strip().lower().replace("_", "-").split("-")[0]
    return language if language in available_locales() else BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    catalogue = _load_catalogue(normalise_locale(locale))
    fallback = _load_catalogue(BASE_LOCALE)
    return Translator(
        locale=catalogue.locale,
        _messages=catalogue.backend,
        _fallback=fallback.backend,
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose combined backend/frontend strings for API consumers."""

    catalogue = _load_catalogue(normalise_locale(locale))
    fallback = _load_catalogue(BASE_LOCALE)

    return {
        "locale": catalogue.locale,
        "available_locales": list(available_locales()),
        "backend": dict(catalogue.backend),
        "frontend": catalogue.frontend,
        "fallback": {
            "locale": BASE_LOCALE,
            "backend": dict(fallback.backend),
            "frontend": fallback.frontend,
        },
    }


__all__ = [
    "BASE_LOCALE",
    "Catalogue",
    "Translator",
    "available_locales",
    "get_translator",
    "load_translations",
    "normalise_locale",
]

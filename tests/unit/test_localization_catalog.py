"""Tests for the translation catalogue helpers."""

from __future__ import annotations

from naijatax.backend.app.localization import (
    BASE_LOCALE,
    available_locales,
    get_translator,
    load_translations,
    normalise_locale,
)
from naijatax.backend.config.year_config import available_years, load_year_configuration
from naijatax.backend.services.calculators.reliefs import (
    BASIC,
    BUSINESS_EXPENSES,
    CONSOLIDATED,
    HEALTH_INSURANCE,
    HOUSING_FUND,
    PENSION,
    RENT,
)


def test_english_catalogue_is_published() -> None:
    assert BASE_LOCALE in available_locales()


def test_normalise_locale_variants() -> None:
    assert normalise_locale(None) == "en"
    assert normalise_locale("EN_ng") == "en"
    assert normalise_locale("ha") == "en"


def test_translator_returns_key_for_missing_label() -> None:
    translator = get_translator("en")

    assert translator("regime.current") == "Current rules (NTA 2025)"
    assert translator("does.not.exist") == "does.not.exist"


def test_every_relief_component_has_a_label() -> None:
    translator = get_translator()

    for component in (
        PENSION,
        HOUSING_FUND,
        HEALTH_INSURANCE,
        RENT,
        BUSINESS_EXPENSES,
        BASIC,
        CONSOLIDATED,
    ):
        key = f"reliefs.{component}"
        assert translator(key) != key


def test_configured_label_keys_are_translated() -> None:
    translator = get_translator()

    for year in available_years():
        config = load_year_configuration(year)
        keys = [schedule.label_key for schedule in config.schedules.values()]
        keys += [regime.label_key for regime in config.regimes.values()]
        keys += [warning.message_key for warning in config.warnings]
        for key in keys:
            assert translator(key) != key, (year, key)


def test_load_translations_includes_fallback() -> None:
    payload = load_translations("en-GB")

    assert payload["locale"] == "en"
    assert payload["fallback"]["locale"] == "en"
    assert payload["frontend"]["title"] == "PAYE Tax Calculator"
    assert "reliefs.rent" in payload["backend"]

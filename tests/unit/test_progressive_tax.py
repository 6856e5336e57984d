"""Unit coverage for the marginal-rate bracket walk."""

from __future__ import annotations

import pytest

from naijatax.backend.config.year_config import load_year_configuration
from naijatax.backend.services.calculators import (
    allocate_progressive_tax,
    calculate_progressive_tax,
)


@pytest.fixture()
def pita():
    return load_year_configuration(2025).schedules["pita"]


@pytest.fixture()
def nta():
    return load_year_configuration(2026).schedules["nta_2025"]


def test_zero_income_has_no_tax(pita, nta) -> None:
    assert calculate_progressive_tax(0, pita) == 0
    assert calculate_progressive_tax(0, nta) == 0
    assert allocate_progressive_tax(0, pita) == ()


def test_negative_income_is_rejected(pita) -> None:
    with pytest.raises(ValueError, match="cannot be negative"):
        calculate_progressive_tax(-1, pita)


def test_income_is_taxed_band_by_band(pita) -> None:
    expected = (
        300_000 * 0.07
        + 300_000 * 0.11
        + 500_000 * 0.15
        + 500_000 * 0.19
        + 1_600_000 * 0.21
        + 1_156_000 * 0.24
    )

    assert calculate_progressive_tax(4_356_000, pita) == pytest.approx(expected)
    assert calculate_progressive_tax(4_356_000, pita) == pytest.approx(837_440)


def test_top_rate_is_not_applied_to_whole_income(pita) -> None:
    tax = calculate_progressive_tax(4_356_000, pita)

    assert tax < 4_356_000 * pita.top_rate


def test_zero_rated_first_band(nta) -> None:
    assert calculate_progressive_tax(800_000, nta) == 0
    assert calculate_progressive_tax(1_000_000, nta) == pytest.approx(30_000)
    assert calculate_progressive_tax(60_000_000, nta) == pytest.approx(
        2_200_000 * 0.15
        + 9_000_000 * 0.18
        + 13_000_000 * 0.21
        + 25_000_000 * 0.23
        + 10_000_000 * 0.25
    )


def test_allocation_stops_at_the_reached_band(pita) -> None:
    bands = allocate_progressive_tax(1_000_000, pita)

    assert [band.rate for band in bands] == [0.07, 0.11, 0.15]
    assert [band.taxable_amount for band in bands] == [300_000, 300_000, 400_000]
    assert bands[-1].upper_bound == 1_100_000
    assert sum(band.tax for band in bands) == pytest.approx(
        calculate_progressive_tax(1_000_000, pita)
    )


def test_last_band_is_unbounded(pita) -> None:
    bands = allocate_progressive_tax(100_000_000, pita)

    assert bands[-1].upper_bound is None
    assert bands[-1].taxable_amount == pytest.approx(100_000_000 - 3_200_000)


@pytest.mark.parametrize("schedule_name", ["pita", "nta"])
def test_tax_is_monotonic(schedule_name, request) -> None:
    schedule = request.getfixturevalue(schedule_name)
    previous = 0.0
    for amount in range(0, 80_000_001, 250_000):
        tax = calculate_progressive_tax(amount, schedule)
        assert tax >= previous
        previous = tax


@pytest.mark.parametrize("schedule_name", ["pita", "nta"])
def test_tax_is_continuous_at_bracket_boundaries(schedule_name, request) -> None:
    schedule = request.getfixturevalue(schedule_name)
    epsilon = 0.5

    for bracket in schedule.brackets[:-1]:
        boundary = bracket.upper_bound
        below = calculate_progressive_tax(boundary - epsilon, schedule)
        at = calculate_progressive_tax(boundary, schedule)
        assert at - below == pytest.approx(bracket.rate * epsilon, abs=1e-6)


def test_legacy_bands_tax_mid_range_incomes_more(pita, nta) -> None:
    for amount in range(100_000, 150_000_001, 500_000):
        assert calculate_progressive_tax(amount, pita) >= calculate_progressive_tax(
            amount, nta
        )

"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from typing import Iterable, Mapping, Sequence

from .year_config import (
    BracketSchedule,
    RegimeConfig,
    YearConfiguration,
    YearWarning,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_schedule(schedule: BracketSchedule) -> list[str]:
    scope = f"schedules.{schedule.id}"
    errors: list[str] = []

    rates = [bracket.rate for bracket in schedule.brackets]
    if any(rate < 0 or rate > 1 for rate in rates):
        errors.append(_format_scope(scope, "bracket rates must be between 0 and 1"))

    if rates != sorted(rates):
        errors.append(
            _format_scope(scope, "marginal rates should not decrease in higher brackets")
        )

    if len(schedule.brackets) < 2:
        errors.append(_format_scope(scope, "a progressive schedule needs at least two brackets"))

    return errors


def _validate_regime(
    regime: RegimeConfig, schedules: Mapping[str, BracketSchedule]
) -> list[str]:
    scope = f"regimes.{regime.id}"
    errors: list[str] = []

    if regime.schedule not in schedules:
        errors.append(_format_scope(scope, f"unknown schedule '{regime.schedule}'"))

    reliefs = regime.reliefs
    if reliefs.pension_cap_rate <= 0:
        errors.append(_format_scope(scope, "pension cap rate should be positive"))

    rent = reliefs.rent_relief
    if rent is not None and rent.cap == 0:
        errors.append(_format_scope(scope, "rent relief cap of zero disables the relief"))

    basic = reliefs.basic_relief
    if basic is not None and basic.rate == 0 and basic.floor == 0:
        errors.append(_format_scope(scope, "basic relief defines neither a rate nor a floor"))

    if not regime.label_key:
        errors.append(_format_scope(scope, "missing label key"))

    return errors


def _validate_comparison(config: YearConfiguration) -> list[str]:
    errors: list[str] = []
    comparison_id = config.comparison_regime
    if comparison_id is None:
        return errors

    current = config.regimes[config.default_regime]
    baseline = config.regimes[comparison_id]
    if current.schedule == baseline.schedule and current.reliefs == baseline.reliefs:
        errors.append(
            _format_scope(
                "comparison_regime",
                "comparison regime is identical to the default regime",
            )
        )
    return errors


def _validate_unused_schedules(config: YearConfiguration) -> list[str]:
    referenced = {regime.schedule for regime in config.regimes.values()}
    return [
        _format_scope(f"schedules.{schedule_id}", "schedule is not used by any regime")
        for schedule_id in sorted(config.schedules)
        if schedule_id not in referenced
    ]


def _validate_warnings(warnings: Iterable[YearWarning]) -> list[str]:
    errors: list[str] = []
    identifiers = [warning.id for warning in warnings]

    duplicates = [value for value, count in Counter(identifiers).items() if count > 1]
    if duplicates:
        errors.append(
            _format_scope("warnings", f"duplicate warning identifiers: {sorted(duplicates)}")
        )

    for warning in warnings:
        if not warning.message_key:
            errors.append(_format_scope(f"warnings.{warning.id}", "missing message key"))
        unknown = set(warning.applies_to) - {"salaried", "self_employed", "comparison"}
        if unknown:
            errors.append(
                _format_scope(
                    f"warnings.{warning.id}",
                    f"unknown scopes in applies_to: {sorted(unknown)}",
                )
            )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues detected for ``config``."""

    errors: list[str] = []

    for schedule in config.schedules.values():
        errors.extend(_validate_schedule(schedule))

    for regime in config.regimes.values():
        errors.extend(_validate_regime(regime, config.schedules))

    if not 0 < config.max_pension_rate_percent <= 100:
        errors.append(
            _format_scope("max_pension_rate_percent", "must be between 0 and 100")
        )

    errors.extend(_validate_comparison(config))
    errors.extend(_validate_unused_schedules(config))
    errors.extend(_validate_warnings(config.warnings))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())

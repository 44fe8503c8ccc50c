"""OSHA injury and illness incidence rates.

All rates are normalised to 200,000 hours: 100 full-time employees working
40 hours a week for 50 weeks. Pure functions; no database access.
"""

from dataclasses import dataclass

from hmsnova.core.exceptions import ValidationError

OSHA_BASE_HOURS = 200_000
RATE_PRECISION = 2


@dataclass(frozen=True)
class RateInputs:
    total_recordable_cases: int
    total_hours_worked: float
    days_away_restricted_transfer_cases: int = 0
    lost_time_cases: int = 0
    total_lost_work_days: int = 0
    average_employees: float = 0


@dataclass(frozen=True)
class RecordkeepingRates:
    trir: float | None
    dart_rate: float | None
    ltir: float | None
    severity_rate: float | None


def incidence_rate(count: float, hours_worked: float) -> float | None:
    """``count × 200000 / hours``; None when no hours were worked."""
    if hours_worked <= 0:
        return None
    return round(count * OSHA_BASE_HOURS / hours_worked, RATE_PRECISION)


def _check_non_negative(inputs: RateInputs) -> None:
    for name, value in vars(inputs).items():
        if value < 0:
            raise ValidationError(f"{name} must be non-negative (got {value})")


def calculate_rates(inputs: RateInputs) -> RecordkeepingRates:
    """Compute TRIR, DART, LTIR and severity rate for one reporting year."""
    _check_non_negative(inputs)
    hours = inputs.total_hours_worked
    return RecordkeepingRates(
        trir=incidence_rate(inputs.total_recordable_cases, hours),
        dart_rate=incidence_rate(inputs.days_away_restricted_transfer_cases, hours),
        ltir=incidence_rate(inputs.lost_time_cases, hours),
        severity_rate=incidence_rate(inputs.total_lost_work_days, hours),
    )

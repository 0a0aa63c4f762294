from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

SUNDAY = 6  # date.weekday() numbering: Monday=0 ... Sunday=6

MIN_REST_HOURS = 10
FULLY_RESTED_HOURS = 24
MAX_GENERATION_MONTHS = 6
LEGAL_SHIFT_DURATIONS = (4, 10, 12)


@dataclass(frozen=True)
class SchedulingRules:
    """Tunable constants for the scheduling core.

    Passed explicitly into every core call so the core holds no global state.
    """

    min_rest_hours: float = MIN_REST_HOURS
    fully_rested_hours: float = FULLY_RESTED_HOURS
    max_generation_months: int = MAX_GENERATION_MONTHS
    week_starts_on: int = SUNDAY
    # Pending time off does not block availability unless this is set.
    pending_time_off_blocks: bool = False
    # Fraction of the weekly cap treated as the ideal utilization band.
    target_utilization: Tuple[float, float] = (0.75, 0.9)


DEFAULT_RULES = SchedulingRules()

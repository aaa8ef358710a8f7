"""Vacation block optimizer.

Turn a pool of leave days into the longest possible breaks by bridging
weekends and public holidays, solo or together with a partner.
"""

from vacationmax.holidays import holiday_map, list_countries
from vacationmax.optimizer import (
    HolidayInfo,
    OptimizationResult,
    VacationBlock,
    VacationOptimizer,
    generate_vacation_plan,
)
from vacationmax.preferences import Preferences, Strategy, Timeframe, sanitize_preferences
from vacationmax.worker import PlanWorker, WorkerResponse

__all__ = [
    "HolidayInfo",
    "OptimizationResult",
    "PlanWorker",
    "Preferences",
    "Strategy",
    "Timeframe",
    "VacationBlock",
    "VacationOptimizer",
    "WorkerResponse",
    "generate_vacation_plan",
    "holiday_map",
    "list_countries",
    "sanitize_preferences",
]

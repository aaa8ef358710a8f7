"""Vacation block optimizer

Maximize time off by picking non-overlapping windows of days whose
weekends and public holidays make every paid leave day go further.

Pipeline:
  1. Encode the planning window into per-day flags and prefix sums
     (:mod:`vacationmax.timeline`).
  2. Enumerate every admissible window for the chosen strategy and score
     it.  A permissive rescue pass runs when nothing qualifies.
  3. Run a greedy, budget-constrained interval selection under three
     candidate orderings (balanced score, duration, efficiency) and keep the
     run with the most days off.

The greedy selector is a heuristic: it is fast enough to feel instant on
windows of several hundred days but is not guaranteed to find the global
optimum.
"""

from __future__ import annotations

import calendar
import datetime
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, NamedTuple

from vacationmax.cache import SharedLRUCache
from vacationmax.holidays import holiday_map
from vacationmax.preferences import Preferences, Strategy, sanitize_preferences
from vacationmax.timeline import Timeline, encode_timeline

logger = logging.getLogger(__name__)

DAILY_VALUE_USD = 460
MAX_BLOCKS = 40
PLAN_CACHE_SIZE = 32

# Efficiency reported for windows that cost nobody a leave day.
FREE_EFFICIENCY = 100.0

# Scoring tunables.  Only their relative order matters:
# free for both > free for one > holiday adjacency > length bonus > weekday bonus.
SOLO_THRESHOLD_PENALTY = 0.2
FREE_FOR_BOTH_BONUS = 5000
FREE_HOLIDAY_BONUS = 1000
ONE_SIDED_FREE_BONUS = 500
LONG_WEEKEND_BONUS = 50
EXTENDED_BONUS = 40
FRIDAY_START_BONUS = 20
LONG_END_BONUS = 15

_FRIDAY = 5
_SUNDAY = 0
_MONDAY = 1

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class HolidayInfo(NamedTuple):
    """A public holiday consumed by a vacation block."""

    date: str
    name: str


class VacationBlock(NamedTuple):
    """A contiguous stretch of days off selected for the plan."""

    id: str
    start_date: datetime.date
    end_date: datetime.date
    total_days_off: int
    pto_days_used: int
    partner_pto_days_used: int | None
    holidays_used: tuple[HolidayInfo, ...]
    description: str
    efficiency_score: float
    monetary_value: int

    @property
    def start_iso(self) -> str:
        return self.start_date.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end_date.isoformat()


class OptimizationResult(NamedTuple):
    """A complete vacation plan."""

    plan_name: str
    target_year: int
    timeline_start_date: datetime.date
    total_pto_used: int
    total_partner_pto_used: int | None
    total_days_off: int
    total_free_days: int
    total_value_recovered: int
    vacation_blocks: tuple[VacationBlock, ...]
    summary: str


class StrategyConfig(NamedTuple):
    min_len: int
    max_len: int
    threshold: float


STRATEGY_CONFIGS: dict[Strategy, StrategyConfig] = {
    Strategy.LONG_WEEKENDS: StrategyConfig(3, 6, 2.0),
    Strategy.MINI_BREAKS: StrategyConfig(3, 9, 1.5),
    Strategy.WEEK_LONG: StrategyConfig(5, 12, 1.8),
    Strategy.EXTENDED: StrategyConfig(9, 25, 1.2),
    Strategy.BALANCED: StrategyConfig(3, 18, 1.4),
}

RESCUE_CONFIG = StrategyConfig(2, 6, 0.0)


class Candidate(NamedTuple):
    """A scored window of days ``[start, start + length)``."""

    start: int
    length: int
    pto_cost: int
    partner_cost: int
    efficiency: float
    score: float


class Selection(NamedTuple):
    """Outcome of one greedy pass."""

    blocks: list[VacationBlock]
    total_days: int
    total_value: int


HolidayLookup = Callable[[str, str, int, int], Mapping[str, str]]
"""Signature: lookup(country, region, start_year, end_year) -> {"YYYY-MM-DD": name}."""


# ---------------------------------------------------------------------------
# Candidate generation
# ---------------------------------------------------------------------------


def generate_candidates(
    timeline: Timeline,
    strategy: Strategy,
    *,
    rescue: bool = False,
) -> list[Candidate]:
    """Enumerate and score every admissible window.

    A window is admissible when it costs nothing or its efficiency
    (days gained per leave day spent) reaches the strategy threshold.  In
    partner mode each day off counts twice and both parties' costs are
    summed; solo runs get a slightly higher threshold to compensate.
    """
    config = RESCUE_CONFIG if rescue else STRATEGY_CONFIGS[strategy]
    has_partner = timeline.has_partner
    gain_factor = 2 if has_partner else 1
    threshold = config.threshold
    if not has_partner and not rescue:
        threshold += SOLO_THRESHOLD_PENALTY

    total_days = timeline.total_days
    pto_prefix = timeline.pto_prefix
    partner_prefix = timeline.partner_prefix
    score_prefix = timeline.holiday_score_prefix
    count_prefix = timeline.holiday_count_prefix
    joint_prefix = timeline.joint_score_prefix
    long_weekends = strategy is Strategy.LONG_WEEKENDS
    extended = strategy is Strategy.EXTENDED

    candidates: list[Candidate] = []

    for i in range(total_days - config.min_len + 1):
        max_len = min(config.max_len, total_days - i)
        start_dow = timeline.day_of_week(i)

        for length in range(config.min_len, max_len + 1):
            stop = i + length
            pto_cost = pto_prefix[stop] - pto_prefix[i]
            partner_cost = partner_prefix[stop] - partner_prefix[i] if has_partner else 0
            combined = pto_cost + partner_cost

            efficiency = FREE_EFFICIENCY if combined == 0 else length * gain_factor / combined
            if combined != 0 and efficiency < threshold:
                continue

            score = (
                efficiency * efficiency
                + efficiency * 5
                + (score_prefix[stop] - score_prefix[i])
                + (joint_prefix[stop] - joint_prefix[i])
            )

            if pto_cost == 0 and partner_cost == 0:
                score += FREE_FOR_BOTH_BONUS
                if count_prefix[stop] - count_prefix[i] > 0:
                    score += FREE_HOLIDAY_BONUS
            elif has_partner and (pto_cost == 0 or partner_cost == 0):
                score += ONE_SIDED_FREE_BONUS

            if long_weekends and length <= 5:
                score += LONG_WEEKEND_BONUS
            if extended and length >= 9:
                score += EXTENDED_BONUS

            end_dow = (start_dow + length - 1) % 7
            if start_dow == _FRIDAY:
                score += FRIDAY_START_BONUS
            if end_dow in (_SUNDAY, _MONDAY):
                score += LONG_END_BONUS

            candidates.append(Candidate(i, length, pto_cost, partner_cost, efficiency, score))

    return candidates


# ---------------------------------------------------------------------------
# Greedy selection
# ---------------------------------------------------------------------------


def describe_block(main_holiday: str | None, efficiency: float, length: int) -> str:
    """Human label for a block, anchored on its first holiday when it has one."""
    if main_holiday:
        if efficiency >= 3.5 and length >= 9:
            return f"{main_holiday} Mega Bridge"
        if efficiency >= 2.5:
            return f"{main_holiday} Super Bridge"
        return f"{main_holiday} Break"
    if length <= 4:
        return "Long Weekend"
    if length <= 6:
        return "Mini-Getaway"
    if length <= 9:
        return "Week-Long Recharge"
    return "Extended Vacation"


def _make_block(timeline: Timeline, cand: Candidate, daily_value: int) -> VacationBlock:
    stop = cand.start + cand.length
    holidays: list[HolidayInfo] = []
    for k in range(cand.start, stop):
        own = timeline.holiday_name(k)
        if own:
            holidays.append(HolidayInfo(timeline.iso_at(k), own))
            continue
        partner = timeline.partner_holiday_name(k)
        if partner:
            holidays.append(HolidayInfo(timeline.iso_at(k), f"{partner} (Partner)"))

    main_holiday = None
    if holidays:
        main_holiday = holidays[0].name.split(" (")[0].split(":")[0]

    start_date = timeline.date_at(cand.start)
    end_date = timeline.date_at(stop - 1)
    return VacationBlock(
        id=f"{start_date:%Y%m%d}-{end_date:%Y%m%d}",
        start_date=start_date,
        end_date=end_date,
        total_days_off=cand.length,
        pto_days_used=cand.pto_cost,
        partner_pto_days_used=cand.partner_cost if timeline.has_partner else None,
        holidays_used=tuple(holidays),
        description=describe_block(main_holiday, cand.efficiency, cand.length),
        efficiency_score=cand.efficiency,
        monetary_value=(cand.length - cand.pto_cost) * daily_value,
    )


def select_greedy(
    candidates: Iterable[Candidate],
    timeline: Timeline,
    leave_days: int,
    partner_leave_days: int = 0,
    *,
    daily_value: int = DAILY_VALUE_USD,
    max_blocks: int = MAX_BLOCKS,
) -> Selection:
    """Take candidates in the given order while they fit.

    A candidate is skipped when the block cap is reached, when either
    party's remaining budget cannot cover it, or when it overlaps a day that
    an earlier pick already occupies.
    """
    occupied = [False] * timeline.total_days
    remaining = leave_days
    remaining_partner = partner_leave_days
    has_partner = timeline.has_partner

    blocks: list[VacationBlock] = []
    total_days = 0
    total_value = 0

    for cand in candidates:
        if len(blocks) >= max_blocks:
            break
        if cand.pto_cost > remaining:
            continue
        if has_partner and cand.partner_cost > remaining_partner:
            continue
        stop = cand.start + cand.length
        if any(occupied[cand.start:stop]):
            continue

        remaining -= cand.pto_cost
        if has_partner:
            remaining_partner -= cand.partner_cost
        occupied[cand.start:stop] = [True] * cand.length

        block = _make_block(timeline, cand, daily_value)
        blocks.append(block)
        total_days += block.total_days_off
        total_value += block.monetary_value

    return Selection(blocks, total_days, total_value)


# Earlier orderings win ties on total days off.
ORDERINGS: tuple[tuple[str, Callable[[Candidate], Any]], ...] = (
    ("Balanced", lambda c: -c.score),
    ("Duration-Max", lambda c: (-c.length, -c.score)),
    ("Efficiency-Max", lambda c: -c.efficiency),
)


def run_tournament(
    candidates: list[Candidate],
    timeline: Timeline,
    leave_days: int,
    partner_leave_days: int = 0,
    *,
    daily_value: int = DAILY_VALUE_USD,
) -> tuple[str, Selection]:
    """Run the greedy selector once per ordering and keep the most days off."""
    results: list[tuple[str, Selection]] = []
    for name, key in ORDERINGS:
        selection = select_greedy(
            sorted(candidates, key=key),
            timeline,
            leave_days,
            partner_leave_days,
            daily_value=daily_value,
        )
        logger.debug("%s ordering: %d days off", name, selection.total_days)
        results.append((name, selection))

    winner_name, winner = results[0]
    for name, selection in results[1:]:
        if selection.total_days > winner.total_days:
            winner_name, winner = name, selection
    return winner_name, winner


# ---------------------------------------------------------------------------
# Optimizer
# ---------------------------------------------------------------------------


def empty_plan_suggestion(prefs: Preferences) -> str:
    if not prefs.country:
        return "Select your country to see public holidays that can extend your vacations."
    if prefs.leave_days == 0:
        return "Add at least 1-2 leave days to unlock smart bridge opportunities with holidays."
    if prefs.leave_days < 5:
        return 'Try the "Long Weekends" strategy for better results with fewer leave days.'
    return "Try increasing your leave days or selecting a different strategy."


def _plan_name(prefs: Preferences, ordering: str, block_count: int, free_days: int, used: int) -> str:
    strategy = prefs.strategy.value
    name = f"Optimal {strategy} Plan"
    if ordering == "Duration-Max":
        name = f'The "Grand Tour" {strategy} Plan'
    if block_count > 8 and ordering == "Balanced":
        name = f'The "Max Freedom" {strategy} Plan'
    elif free_days > used * 2.5:
        name = "High-Efficiency Hacker Strategy"
    elif prefs.has_partner:
        name = "The Ultimate Couples' Calendar"
    return name


class VacationOptimizer:
    """Turns preferences into an :class:`OptimizationResult`.

    Results are memoised per sanitised preferences and resolved date range,
    so repeated identical requests skip the candidate scan entirely.  The
    holiday lookup is injected; by default the bundled dataset is used.
    """

    def __init__(
        self,
        holiday_lookup: HolidayLookup = holiday_map,
        *,
        daily_value: int = DAILY_VALUE_USD,
        cache_size: int = PLAN_CACHE_SIZE,
    ):
        self.holiday_lookup = holiday_lookup
        self.daily_value = daily_value
        self.cache = SharedLRUCache(cache_size)

    def plan(
        self,
        preferences: Preferences | Mapping[str, Any],
        *,
        today: datetime.date | None = None,
    ) -> OptimizationResult:
        prefs = sanitize_preferences(preferences)
        start, end, target_year = prefs.timeframe.resolve(today)

        cache_key = (prefs, start, end)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Serving plan from cache")
            return cached

        result = self._compute(prefs, start, end, target_year)
        self.cache.put(cache_key, result)
        return result

    def build_timeline(self, prefs: Preferences, start: datetime.date, end: datetime.date) -> Timeline:
        holidays = self.holiday_lookup(prefs.country, prefs.region, start.year, end.year)
        partner_holidays = None
        if prefs.has_partner and prefs.partner_country:
            partner_holidays = self.holiday_lookup(
                prefs.partner_country, prefs.partner_region, start.year, end.year
            )
        return encode_timeline(
            start, end, holidays, partner_holidays, has_partner=prefs.has_partner
        )

    def _compute(
        self,
        prefs: Preferences,
        start: datetime.date,
        end: datetime.date,
        target_year: int,
    ) -> OptimizationResult:
        timeline = self.build_timeline(prefs, start, end)

        candidates = generate_candidates(timeline, prefs.strategy)
        if not candidates:
            logger.info("No %s windows qualify; running rescue pass", prefs.strategy.value)
            candidates = generate_candidates(timeline, prefs.strategy, rescue=True)

        if prefs.leave_days == 0:
            free = [c for c in candidates if c.pto_cost == 0]
            if free:
                logger.debug("No leave days: keeping %d free windows", len(free))
                candidates = free

        ordering, winner = run_tournament(
            candidates,
            timeline,
            prefs.leave_days,
            prefs.partner_leave_days,
            daily_value=self.daily_value,
        )
        blocks = tuple(sorted(winner.blocks, key=lambda b: b.start_date))

        if not blocks:
            return OptimizationResult(
                plan_name="No Opportunities Found",
                target_year=target_year,
                timeline_start_date=start,
                total_pto_used=0,
                total_partner_pto_used=0 if prefs.has_partner else None,
                total_days_off=0,
                total_free_days=0,
                total_value_recovered=0,
                vacation_blocks=(),
                summary=empty_plan_suggestion(prefs),
            )

        used = sum(b.pto_days_used for b in blocks)
        used_partner = (
            sum(b.partner_pto_days_used or 0 for b in blocks) if prefs.has_partner else None
        )
        free_days = winner.total_days - used
        logger.debug("%s ordering won with %d blocks", ordering, len(blocks))

        return OptimizationResult(
            plan_name=_plan_name(prefs, ordering, len(blocks), free_days, used),
            target_year=target_year,
            timeline_start_date=start,
            total_pto_used=used,
            total_partner_pto_used=used_partner,
            total_days_off=winner.total_days,
            total_free_days=free_days,
            total_value_recovered=free_days * self.daily_value,
            vacation_blocks=blocks,
            summary=f"Found {len(blocks)} optimized blocks using {ordering} logic.",
        )


_default_optimizer = VacationOptimizer()


def generate_vacation_plan(
    preferences: Preferences | Mapping[str, Any],
    *,
    today: datetime.date | None = None,
) -> OptimizationResult:
    """Plan with the shared default optimizer (and its result cache)."""
    return _default_optimizer.plan(preferences, today=today)


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------


def format_plan(result: OptimizationResult) -> str:
    """Return a human-readable summary of a vacation plan."""
    lines: list[str] = []
    w = 64

    lines.append("")
    lines.append("=" * w)
    lines.append(f"  PLAN: {result.plan_name}")
    lines.append(f"  {result.summary}")
    lines.append("=" * w)

    if not result.vacation_blocks:
        return "\n".join(lines)

    lines.append(f"  Leave days used: {result.total_pto_used}")
    if result.total_partner_pto_used is not None:
        lines.append(f"  Partner leave days used: {result.total_partner_pto_used}")
    lines.append(f"  Total days off: {result.total_days_off}")
    lines.append(f"  Free days gained: {result.total_free_days}")
    lines.append(f"  Value recovered: ${result.total_value_recovered:,}")
    lines.append("")

    lines.append("  Vacation Blocks:")
    lines.append("  " + "-" * (w - 4))

    for i, block in enumerate(result.vacation_blocks, 1):
        n = block.total_days_off
        dr = (
            f"{block.start_date.strftime('%a, %b %d')} -> "
            f"{block.end_date.strftime('%a, %b %d')}"
        )
        lines.append(f"  {i:>2}. {dr}  ({n} days)  {block.description}")

        cost = f"{block.pto_days_used} leave"
        if block.partner_pto_days_used is not None:
            cost += f" + {block.partner_pto_days_used} partner leave"
        lines.append(f"      {cost}  (efficiency {block.efficiency_score:.1f}x)")
        for h in block.holidays_used:
            lines.append(f"      * {h.date}  {h.name}")
        lines.append("")

    return "\n".join(lines)


def format_calendar_view(result: OptimizationResult) -> str:
    """Return a month-by-month calendar marking vacation and holiday days."""
    off_days: set[datetime.date] = set()
    holiday_days: set[datetime.date] = set()
    for block in result.vacation_blocks:
        d = block.start_date
        while d <= block.end_date:
            off_days.add(d)
            d += datetime.timedelta(days=1)
        for h in block.holidays_used:
            holiday_days.add(datetime.date.fromisoformat(h.date))

    months = sorted({(d.year, d.month) for d in off_days})
    if not months:
        return ""

    lines: list[str] = [
        "",
        f"  Calendar View {result.target_year}",
        "  Legend: V=Vacation day  H=Holiday",
        "",
    ]

    cal = calendar.Calendar(firstweekday=0)

    for year, month in months:
        lines.append(f"  {calendar.month_name[month]} {year}")
        lines.append("  Mo  Tu  We  Th  Fr  Sa  Su")

        row = ""
        for day_num, weekday in cal.itermonthdays2(year, month):
            if day_num == 0:
                row += "    "
            else:
                d = datetime.date(year, month, day_num)
                if d in holiday_days:
                    cell = f" {day_num:>2}H"
                elif d in off_days:
                    cell = f" {day_num:>2}V"
                else:
                    cell = f"  {day_num:>2}"
                row += cell

            if weekday == 6:
                lines.append(row)
                row = ""

        if row.strip():
            lines.append(row)
        lines.append("")

    return "\n".join(lines)

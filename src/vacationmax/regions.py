"""Fuzzy matching of free-text region names onto a country's region keys.

Users type "NY", "cali", "Victoria" or "britsh columbia"; the holiday
tables are keyed by canonical names.  Resolution tries, in order, the
alias table, an exact normalised match, a prefix match, a substring match
and finally the closest key by edit distance.  An unresolvable region is
not an error: the caller falls back to country-wide holidays.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from rapidfuzz.distance import Levenshtein

from vacationmax.cache import SharedLRUCache

if TYPE_CHECKING:
    from vacationmax.holidays import CountryData

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")

_resolved_cache = SharedLRUCache(128)
_UNRESOLVED = object()


def normalize_token(value: str) -> str:
    """Lowercase *value* and drop everything that is not ``a-z`` or ``0-9``."""
    return _NON_ALNUM.sub("", value.lower())


def levenshtein(a: str, b: str) -> int:
    """Edit distance between *a* and *b*."""
    return Levenshtein.distance(a, b)


def _max_distance(token: str) -> int:
    return 3 if len(token) > 4 else 2


def _match(country_data: CountryData, raw: str) -> str | None:
    clean = normalize_token(raw)
    if not clean:
        return None

    aliases = country_data.region_aliases
    if aliases:
        alias = aliases.get(raw.lower().strip()) or aliases.get(clean)
        if alias:
            return alias

    entries = [(key, normalize_token(key)) for key in country_data.regions]

    for key, normalized in entries:
        if normalized == clean:
            return key
    for key, normalized in entries:
        if normalized.startswith(clean):
            return key
    for key, normalized in entries:
        if clean in normalized:
            return key

    limit = _max_distance(clean)
    best: str | None = None
    best_distance = limit + 1
    for key, normalized in entries:
        # past-limit distances come back as limit + 1; strict < keeps the first-seen key
        dist = Levenshtein.distance(clean, normalized, score_cutoff=limit)
        if dist < best_distance:
            best, best_distance = key, dist
    return best


def resolve_region(country_data: CountryData, region: str, country_name: str) -> str | None:
    """Return the canonical region key for *region*, or ``None``.

    Results are memoised per ``(country_name, region)``, negative results
    included.
    """
    if not region or not country_data.regions:
        return None

    cache_key = (country_name, region)
    cached = _resolved_cache.get(cache_key, _UNRESOLVED)
    if cached is not _UNRESOLVED:
        return cached

    resolved = _match(country_data, region)
    if resolved is None:
        logger.debug("No region match for %r in %s", region, country_name)
    _resolved_cache.put(cache_key, resolved)
    return resolved


def clear_cache() -> None:
    _resolved_cache.clear()

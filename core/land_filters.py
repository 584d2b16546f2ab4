# core/land_filters.py
"""
Client-side style filtering over a fully fetched result set.

Screens fetch every visible row once and then search, filter
and sort in memory; these helpers do the same for the API.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from models.enums import LandSort


SEARCH_FIELDS = ("title", "location", "zoning")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def matches_query(row: dict, query: Optional[str], fields=SEARCH_FIELDS) -> bool:
    """Case-insensitive substring match on any of `fields`."""
    if not query:
        return True
    needle = query.strip().lower()
    return any(_contains(row.get(f), needle) for f in fields)


def filter_lands(
    lands: Iterable[dict],
    q: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    min_size: Optional[float] = None,
    max_size: Optional[float] = None,
    zoning: Optional[str] = None,
) -> List[dict]:
    """
    Apply the public search filters. A record without a price never
    satisfies a price bound.
    """
    result = []
    zoning_needle = zoning.strip().lower() if zoning else None

    for land in lands:
        if not matches_query(land, q):
            continue

        price = land.get("price")
        if min_price is not None and (price is None or price < min_price):
            continue
        if max_price is not None and (price is None or price > max_price):
            continue

        size = land.get("size") or 0
        if min_size is not None and size < min_size:
            continue
        if max_size is not None and size > max_size:
            continue

        if zoning_needle and not _contains(land.get("zoning"), zoning_needle):
            continue

        result.append(land)

    return result


def _created(row: dict) -> datetime:
    raw = row.get("created_at")
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if not raw:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def sort_lands(lands: Iterable[dict], sort: LandSort = LandSort.newest) -> List[dict]:
    """
    Sort a copy of `lands`. For the price orders, unpriced records
    always go last.
    """
    lands = list(lands)

    if sort == LandSort.newest:
        return sorted(lands, key=_created, reverse=True)

    if sort == LandSort.price_low:
        return sorted(lands, key=lambda l: (l.get("price") is None, l.get("price") or 0))

    if sort == LandSort.price_high:
        return sorted(lands, key=lambda l: (l.get("price") is None, -(l.get("price") or 0)))

    if sort == LandSort.size_small:
        return sorted(lands, key=lambda l: l.get("size") or 0)

    if sort == LandSort.size_large:
        return sorted(lands, key=lambda l: l.get("size") or 0, reverse=True)

    return lands


def status_counts(rows: Iterable[dict], field: str, statuses: Iterable[str]) -> dict:
    """{"total": n, "<status>": n, ...} for every status in `statuses`."""
    rows = list(rows)
    counts = {"total": len(rows)}
    for s in statuses:
        counts[s] = sum(1 for r in rows if r.get(field) == s)
    return counts


ZONING_CLASSES = ("residential", "commercial", "agricultural", "industrial")


def zoning_breakdown(lands: Iterable[dict]) -> dict:
    """
    Land records per zoning class for the admin dashboard. Zoning is
    free text, so a record is classed by the first known class name
    its zoning contains; everything else is "other".
    """
    breakdown = {z: 0 for z in ZONING_CLASSES}
    breakdown["other"] = 0

    for land in lands:
        zoning = (land.get("zoning") or "").lower()
        match = next((z for z in ZONING_CLASSES if z in zoning), "other")
        breakdown[match] += 1

    return breakdown

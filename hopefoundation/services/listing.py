"""
In-memory list filtering shared by the public content endpoints and the admin
console. Rows are plain dicts (``Model.as_dict()``); every active predicate is
ANDed and an empty/`all` value disables its predicate.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

Row = Mapping[str, Any]
Predicate = Callable[[Row], bool]

# Donation date windows; "today" is handled separately (calendar day).
DATE_RANGES: Dict[str, int] = {"week": 7, "month": 30, "year": 365}


@dataclass(frozen=True)
class EntityFilters:
    search_fields: Sequence[str]
    # request arg -> column compared by equality
    equality: Mapping[str, str] = field(default_factory=dict)
    # named status value -> (column, expected bool)
    named_status: Mapping[str, tuple] = field(default_factory=dict)
    date_field: Optional[str] = None


_PUBLISHING = {
    "published": ("published", True),
    "draft": ("published", False),
    "featured": ("featured", True),
}

ENTITY_FILTERS: Dict[str, EntityFilters] = {
    "programs": EntityFilters(
        search_fields=("title", "description"),
        equality={"category": "category"},
        named_status=_PUBLISHING,
    ),
    "projects": EntityFilters(
        search_fields=("title", "description", "location"),
        equality={"category": "program_category", "program": "program_category", "state": "status"},
        named_status=_PUBLISHING,
    ),
    "events": EntityFilters(
        search_fields=("title", "description", "location"),
        named_status=_PUBLISHING,
        date_field="date",
    ),
    "contact_messages": EntityFilters(
        search_fields=("name", "email", "subject", "message"),
        equality={"status": "status", "subject": "subject"},
    ),
    "newsletter_subscribers": EntityFilters(
        search_fields=("email", "name"),
        named_status={"active": ("is_active", True), "inactive": ("is_active", False)},
    ),
    "donations": EntityFilters(
        search_fields=("donor_name", "donor_email"),
        equality={"status": "payment_status", "category": "program_category"},
        date_field="created_at",
    ),
    "profiles": EntityFilters(search_fields=("email", "full_name"), equality={"role": "role"}),
    "site_settings": EntityFilters(search_fields=("key", "value", "description")),
    "site_stats": EntityFilters(search_fields=("key", "label"), equality={"page": "page"}),
    "response_times": EntityFilters(search_fields=("inquiry_type",)),
}


# ─────────────────────────────────────────────────────────────
# Predicates
# ─────────────────────────────────────────────────────────────
def _active(value: Optional[str]) -> bool:
    return bool(value) and value != "all"


def text_search(term: Optional[str], fields: Iterable[str]) -> Predicate:
    needle = (term or "").strip().lower()
    fields = tuple(fields)

    def pred(row: Row) -> bool:
        if not needle:
            return True
        return any(needle in str(row.get(f) or "").lower() for f in fields)

    return pred


def equals(column: str, value: Any) -> Predicate:
    return lambda row: row.get(column) == value


def flag(column: str, expected: bool) -> Predicate:
    return lambda row: bool(row.get(column)) is expected


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    s = str(value)
    if s.endswith("Z"):
        s = s[:-1]
    dt = datetime.fromisoformat(s)
    return dt.replace(tzinfo=None)


def upcoming(column: str, now: datetime, past: bool = False) -> Predicate:
    def pred(row: Row) -> bool:
        dt = _as_datetime(row.get(column))
        if dt is None:
            return False
        return dt < now if past else dt >= now

    return pred


def within_range(column: str, range_name: str, now: datetime) -> Predicate:
    if range_name == "today":
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif range_name in DATE_RANGES:
        start = now - timedelta(days=DATE_RANGES[range_name])
    else:
        return lambda row: True

    def pred(row: Row) -> bool:
        dt = _as_datetime(row.get(column))
        return dt is not None and dt >= start

    return pred


# ─────────────────────────────────────────────────────────────
# Composition
# ─────────────────────────────────────────────────────────────
def build_predicates(
    entity: str,
    args: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> List[Predicate]:
    """
    Turn request args into predicates for `entity`.

    Recognised args: q, the entity's equality args, status when it names one
    of the entity's flags (other status values only filter where the entity
    maps `status` as an equality arg), when (upcoming/past), range
    (today/week/month/year/all).
    """
    filters = ENTITY_FILTERS[entity]
    now = now or datetime.utcnow()
    preds: List[Predicate] = [text_search(args.get("q") or args.get("search"), filters.search_fields)]

    for arg, column in filters.equality.items():
        value = args.get(arg)
        if _active(value):
            preds.append(equals(column, value))

    status = args.get("status")
    if _active(status) and status in filters.named_status:
        column, expected = filters.named_status[status]
        preds.append(flag(column, expected))

    if filters.date_field:
        when = args.get("when")
        if when in ("upcoming", "past"):
            preds.append(upcoming(filters.date_field, now, past=(when == "past")))
        rng = args.get("range")
        if _active(rng):
            preds.append(within_range(filters.date_field, rng, now))

    return preds


def apply_filters(rows: Iterable[Row], predicates: Sequence[Predicate]) -> List[Row]:
    return [r for r in rows if all(p(r) for p in predicates)]


def filter_rows(
    entity: str,
    rows: Iterable[Row],
    args: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> List[Row]:
    return apply_filters(rows, build_predicates(entity, args, now))

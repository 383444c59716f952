"""
The filter -> search -> sort pipeline applied to the store before rendering.

Everything here is a pure function of its arguments.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple

from unidecode import unidecode

from clubs.models import Activity, AppState, Store

Entry = Tuple[str, Activity]

SORT_MODES = ("name", "time")

ALL_CATEGORIES = ("", "All Categories")


def collation_key(value: str) -> Tuple[str, str, str]:
    """
    Sort key that ignores accents, then case, the way a browser's
    localeCompare does: accents only break ties between otherwise equal
    strings, and lowercase sorts before uppercase.
    """
    folded = value.casefold()
    return (unidecode(folded), folded, value.swapcase())


def categories(store: Store) -> List[str]:
    """Distinct non-empty categories, in the order they are first seen."""
    seen: List[str] = []
    for activity in store.values():
        if activity.category and activity.category not in seen:
            seen.append(activity.category)
    return seen


def category_options(store: Store) -> List[Tuple[str, str]]:
    return [ALL_CATEGORIES] + [(c, c) for c in categories(store)]


def matches_search(name: str, activity: Activity, search: str) -> bool:
    if search in name.lower():
        return True
    return bool(activity.description) and search in activity.description.lower()


def sort_entries(entries: List[Entry], sort: str) -> List[Entry]:
    if sort == "name":
        return sorted(entries, key=lambda entry: collation_key(entry[0]))

    if sort == "time":
        # Entries without a schedule keep their slot; the scheduled ones are
        # sorted into the remaining slots.
        slots = [i for i, (_, a) in enumerate(entries) if a.schedule]
        scheduled = sorted((entries[i] for i in slots),
                           key=lambda entry: collation_key(entry[1].schedule))
        result = list(entries)
        for slot, entry in zip(slots, scheduled):
            result[slot] = entry
        return result

    return list(entries)


def filter_activities(store: Store,
                      category: str = "",
                      search: str = "",
                      sort: str = "") -> List[Entry]:
    entries: Iterable[Entry] = store.items()

    if category:
        entries = [(n, a) for n, a in entries if a.category == category]

    search = (search or "").strip().lower()
    if search:
        entries = [(n, a) for n, a in entries if matches_search(n, a, search)]

    return sort_entries(list(entries), sort)


def apply(state: AppState) -> List[Entry]:
    return filter_activities(state.store, state.category, state.search, state.sort)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class Activity:
    """A school activity you can sign up for."""
    name: str  # Unique key, as used in the REST paths
    description: Optional[str] = None
    schedule: Optional[str] = None
    category: Optional[str] = None
    max_participants: int = 0
    participants: List[str] = field(default_factory=list)  # Ordered emails

    @property
    def spots_left(self) -> int:
        # Not clamped: a negative value means the backend over-filled the activity.
        return self.max_participants - len(self.participants)

    @property
    def category_label(self) -> str:
        return self.category or DEFAULT_CATEGORY

    @classmethod
    def from_dict(cls, name: str, data: dict) -> Activity:
        return cls(
            name=name,
            description=data.get("description"),
            schedule=data.get("schedule"),
            category=data.get("category"),
            max_participants=data.get("max_participants") or 0,
            participants=list(data.get("participants") or []),
        )


Store = Dict[str, Activity]


def store_from_json(payload: dict) -> Store:
    """
    Build a store from the body of GET /activities.
    Raises ValueError when the payload does not have the expected shape.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object of activities, got {type(payload).__name__}")

    store: Store = {}
    for name, details in payload.items():
        if not isinstance(details, dict):
            raise ValueError(f"Activity {name!r} is not a JSON object")
        store[name] = Activity.from_dict(name, details)
    return store


@dataclass
class SignupForm:
    """The two fields of the signup form."""
    email: str = ""
    activity: str = ""

    def reset(self) -> None:
        self.email = ""
        self.activity = ""


@dataclass
class AppState:
    """
    Everything the pipeline and the renderer need, held in one place.

    The store is only ever replaced by assignment, never mutated in place.
    """
    store: Store = field(default_factory=dict)
    category: str = ""
    search: str = ""
    sort: str = ""
    load_error: Optional[str] = None
    form: SignupForm = field(default_factory=SignupForm)

    def replace_store(self, store: Store) -> None:
        self.store = store
        self.load_error = None

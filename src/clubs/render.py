from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from clubs.models import Activity
from clubs.pipeline import Entry

SELECT_PLACEHOLDER = ("", "-- Select an activity --")
NO_ACTIVITIES = "No activities found."
NO_PARTICIPANTS = "No participants yet"


@dataclass(frozen=True)
class ParticipantRow:
    """One roster line; doubles as the delete action for (activity, email)."""
    activity: str
    email: str


@dataclass(frozen=True)
class ActivityCard:
    name: str
    description: str
    schedule: str
    category: str
    spots_left: int
    participants: List[ParticipantRow] = field(default_factory=list)

    @property
    def participants_notice(self) -> Optional[str]:
        return None if self.participants else NO_PARTICIPANTS

    @property
    def availability(self) -> str:
        return f"{self.spots_left} spots left"


@dataclass(frozen=True)
class ListView:
    """A complete, freshly built rendering of the activity list."""
    cards: List[ActivityCard] = field(default_factory=list)
    selector_options: List[Tuple[str, str]] = field(default_factory=lambda: [SELECT_PLACEHOLDER])
    empty_notice: Optional[str] = None

    @property
    def delete_actions(self) -> List[ParticipantRow]:
        return [row for card in self.cards for row in card.participants]


def render_card(name: str, activity: Activity) -> ActivityCard:
    return ActivityCard(
        name=name,
        description=activity.description or "",
        schedule=activity.schedule or "",
        category=activity.category_label,
        spots_left=activity.spots_left,
        participants=[ParticipantRow(activity=name, email=email)
                      for email in activity.participants],
    )


def render_activities(entries: Sequence[Entry]) -> ListView:
    if not entries:
        return ListView(empty_notice=NO_ACTIVITIES)

    cards = [render_card(name, activity) for name, activity in entries]
    options = [SELECT_PLACEHOLDER] + [(card.name, card.name) for card in cards]
    return ListView(cards=cards, selector_options=options)


def render_failure(message: str) -> ListView:
    return ListView(empty_notice=message)

"""
Shared pytest fixtures for clubs tests.
"""
import logging

import pytest
import pendulum
import responses

from clubs.client import ActivitiesClient
from clubs.controller import ActivitiesController
from clubs.messages import MessageRegion
from clubs.models import store_from_json


BASE_URL = "http://clubs.test"


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self):
        self.now = pendulum.datetime(2025, 1, 15, 14, 30, 0, tz="UTC")

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + pendulum.Duration(seconds=seconds)


@pytest.fixture(autouse=True)
def reset_logging():
    """
    CLI runs attach handlers to captured streams; drop them afterwards.
    """
    yield
    logging.getLogger("clubs").handlers.clear()


@pytest.fixture
def chess_payload():
    """
    The single-activity store used by most scenarios.
    """
    return {
        "Chess Club": {
            "description": "Play chess",
            "schedule": "Mon 3pm",
            "category": "Games",
            "max_participants": 10,
            "participants": ["a@x.com"],
        }
    }


@pytest.fixture
def school_payload():
    """
    A few activities across two categories, one without a category.
    """
    return {
        "Chess Club": {
            "description": "Learn strategies and compete in chess tournaments",
            "schedule": "Fridays, 3:30 PM - 5:00 PM",
            "category": "Games",
            "max_participants": 12,
            "participants": ["michael@mergington.edu", "daniel@mergington.edu"],
        },
        "Art Studio": {
            "description": "Painting, drawing and sculpture",
            "schedule": "Wednesdays, 3:30 PM - 5:00 PM",
            "category": "Art",
            "max_participants": 15,
            "participants": [],
        },
        "Programming Class": {
            "description": "Learn programming fundamentals and build software projects",
            "schedule": "Tuesdays and Thursdays, 3:30 PM - 4:30 PM",
            "max_participants": 20,
            "participants": ["emma@mergington.edu"],
        },
        "Board Games": {
            "description": "Catan, Go and friends",
            "schedule": "Mondays, 4:00 PM - 5:00 PM",
            "category": "Games",
            "max_participants": 8,
            "participants": ["olivia@mergington.edu"],
        },
    }


@pytest.fixture
def school_store(school_payload):
    return store_from_json(school_payload)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api():
    """
    Mocked activities API; every request must be registered.
    """
    with responses.RequestsMock() as mock:
        yield mock


@pytest.fixture
def client():
    return ActivitiesClient(BASE_URL)


@pytest.fixture
def controller(client, clock):
    return ActivitiesController(client, messages=MessageRegion(5.0, clock=clock))


@pytest.fixture
def config_env(tmp_path):
    """
    Environment that keeps CLI runs away from the user's own config.
    """
    return {"CLUBS_CONFIG": str(tmp_path / "config.toml"), "CLUBS_URL": ""}

from __future__ import annotations

import logging
import requests

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from clubs.errors import TransportError
from clubs.models import Store, store_from_json

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a signup or unregister call that got a JSON answer."""
    ok: bool
    status_code: int
    message: str


class ActivitiesClient:
    """
    Thin wrapper around the activities REST API.

    Application-level failures (non-2xx with a JSON body) come back as an
    ActionResult with ok=False. Anything that prevents reading a JSON body
    raises TransportError.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def activity_url(self, activity: str, action: str) -> str:
        return f"{self.base_url}/activities/{quote(activity, safe='')}/{action}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.debug("%s %s %s", method, url, kwargs.get("params", ""))
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", e) from e

    @staticmethod
    def _json(response: requests.Response):
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Malformed response from {response.url} (status {response.status_code})", e) from e

    def get_activities(self) -> Store:
        response = self._request("GET", f"{self.base_url}/activities")
        payload = self._json(response)
        try:
            return store_from_json(payload)
        except ValueError as e:
            raise TransportError(str(e), e) from e

    def _action(self, method: str, activity: str, action: str, email: str) -> ActionResult:
        response = self._request(method, self.activity_url(activity, action),
                                 params={"email": email})
        result = self._json(response)
        if not isinstance(result, dict):
            result = {}

        if response.ok:
            return ActionResult(True, response.status_code, str(result.get("message") or ""))
        return ActionResult(False, response.status_code, str(result.get("detail") or GENERIC_ERROR))

    def signup(self, activity: str, email: str) -> ActionResult:
        return self._action("POST", activity, "signup", email)

    def unregister(self, activity: str, email: str) -> ActionResult:
        return self._action("DELETE", activity, "unregister", email)

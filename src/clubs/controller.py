from __future__ import annotations

import logging

from typing import Callable, List, Optional, Tuple

from clubs import pipeline
from clubs.client import ActionResult, ActivitiesClient
from clubs.errors import TransportError
from clubs.messages import MessageRegion
from clubs.models import AppState, Store
from clubs.render import ListView, render_activities, render_failure

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load activities. Please try again later."
SIGNUP_FAILED = "Failed to sign up. Please try again."
UNREGISTER_FAILED = "Failed to unregister. Please try again."


class ActivitiesController:
    """
    Wires the store, the pipeline, the renderer and the REST actions together.

    None of the public methods raise for network or server failures: they log,
    update the message region or the list view, and return.
    Concurrent calls are allowed and never cancel each other; whichever
    fetch finishes last decides what the store holds.
    """

    def __init__(self,
                 client: ActivitiesClient,
                 state: Optional[AppState] = None,
                 messages: Optional[MessageRegion] = None):
        self.client = client
        self.state = state or AppState()
        self.messages = messages or MessageRegion()
        self.view: ListView = render_activities([])
        self.category_options: List[Tuple[str, str]] = [pipeline.ALL_CATEGORIES]
        self.listeners: List[Callable[[ListView], None]] = []

    def on_render(self, listener: Callable[[ListView], None]) -> None:
        self.listeners.append(listener)

    def _publish(self, view: ListView) -> ListView:
        self.view = view
        for listener in self.listeners:
            listener(view)
        return view

    def render(self) -> ListView:
        if self.state.load_error and not self.state.store:
            return self._publish(render_failure(self.state.load_error))
        return self._publish(render_activities(pipeline.apply(self.state)))

    def populate_categories(self) -> List[Tuple[str, str]]:
        self.category_options = pipeline.category_options(self.state.store)
        # A category that vanished from the refreshed data falls back to "all".
        if self.state.category not in [value for value, _ in self.category_options]:
            self.state.category = ""
        return self.category_options

    # The apply_* / *_failed steps only touch local state. Callers that do
    # the network wait elsewhere (the browser's executor) run them on the
    # thread that owns the state.

    def apply_store(self, store: Store) -> bool:
        self.state.replace_store(store)
        self.populate_categories()
        self.render()
        return True

    def load_failed(self, error: Exception) -> bool:
        logger.error("Error fetching activities: %s", error)
        self.state.load_error = LOAD_FAILED
        self._publish(render_failure(LOAD_FAILED))
        return False

    def load_activities(self) -> bool:
        try:
            store = self.client.get_activities()
        except TransportError as e:
            return self.load_failed(e)
        return self.apply_store(store)

    def set_filters(self,
                    category: Optional[str] = None,
                    search: Optional[str] = None,
                    sort: Optional[str] = None) -> ListView:
        if category is not None:
            self.state.category = category
        if search is not None:
            self.state.search = search
        if sort is not None:
            self.state.sort = sort
        return self.render()

    def apply_action(self, result: ActionResult, reset_form: bool = False) -> bool:
        """Show the outcome of an action; True when a refetch should follow."""
        if result.ok:
            self.messages.success(result.message)
            if reset_form:
                self.state.form.reset()
        else:
            self.messages.error(result.message)
        return result.ok

    def action_failed(self, action: str, error: Exception, message: str) -> None:
        logger.error("Error %s: %s", action, error)
        self.messages.error(message)

    def signup(self, email: str, activity: str) -> Optional[ActionResult]:
        try:
            result = self.client.signup(activity, email)
        except TransportError as e:
            self.action_failed("signing up", e, SIGNUP_FAILED)
            return None

        if self.apply_action(result, reset_form=True):
            self.load_activities()
        return result

    def unregister(self, activity: str, email: str) -> Optional[ActionResult]:
        try:
            result = self.client.unregister(activity, email)
        except TransportError as e:
            self.action_failed("unregistering", e, UNREGISTER_FAILED)
            return None

        if self.apply_action(result):
            self.load_activities()
        return result

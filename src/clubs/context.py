from functools import cached_property
from pathlib import Path

from clubs.client import ActivitiesClient
from clubs.config import Config, default_config_path
from clubs.controller import ActivitiesController
from clubs.messages import MessageRegion


class Context:
    """
    Per-invocation state shared by the CLI commands.

    Config and controller are built on first use so that commands which only
    deal with the config file never need a readable one.
    """

    def __init__(self, config_path: Path | None = None, base_url: str | None = None):
        self.config_path = config_path or default_config_path()
        self.base_url = base_url

    @cached_property
    def config(self) -> Config:
        return Config.load(self.config_path, self.base_url)

    @cached_property
    def controller(self) -> ActivitiesController:
        client = ActivitiesClient(self.config.base_url, timeout=self.config.request_timeout)
        return ActivitiesController(client, messages=MessageRegion(self.config.message_timeout))

from __future__ import annotations

import os
import tomllib
import tomli_w

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from clubs.errors import ConfigError
from clubs.messages import DEFAULT_HIDE_AFTER

DEFAULT_BASE_URL = "http://localhost:8000"


def default_config_path() -> Path:
    """
    $CLUBS_CONFIG if set, otherwise config.toml under $XDG_CONFIG_HOME/clubs.
    """
    if os.getenv("CLUBS_CONFIG"):
        return Path(os.environ["CLUBS_CONFIG"])
    config_home = os.getenv("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "clubs" / "config.toml"


@dataclass
class Config:
    """Configuration for the clubs CLI. This object includes the default values for the CLI."""
    base_url: str = DEFAULT_BASE_URL
    message_timeout: float = DEFAULT_HIDE_AFTER
    request_timeout: Optional[float] = None  # None leaves it to the transport
    show_search: bool = True
    show_category: bool = True
    show_sort: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        return cls(
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            message_timeout=float(data.get("message_timeout", DEFAULT_HIDE_AFTER)),
            request_timeout=data.get("request_timeout"),
            show_search=data.get("show_search", True),
            show_category=data.get("show_category", True),
            show_sort=data.get("show_sort", True),
        )

    @classmethod
    def load(cls, path: Optional[Path] = None, base_url: Optional[str] = None) -> Config:
        """
        Read the config file if there is one, then apply $CLUBS_URL and an
        explicit base_url on top, in that order.
        """
        path = path or default_config_path()
        data = {}
        if path.exists():
            try:
                with path.open("rb") as f:
                    data = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                raise ConfigError(f"Could not read config file {path}: {e}") from e

        config = cls.from_dict(data)
        if os.getenv("CLUBS_URL"):
            config.base_url = os.environ["CLUBS_URL"]
        if base_url:
            config.base_url = base_url
        return config

    def to_toml(self) -> str:
        # TOML has no null; leave unset values out.
        return tomli_w.dumps({k: v for k, v in asdict(self).items() if v is not None})

    def write(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_toml())

"""Configuration for a task view session."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TOP_HEIGHT = 10
RE_PERCENT = re.compile(r"^\s*(\d+)\s*%\s*$")


def _is_count(value: Any) -> bool:
    # bool is an int subclass, but `"width": true` is not a size
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Config:
    """Options supplied when a session is activated.

    ``width`` and ``top_height`` only matter to the host's layout; the core
    reads ``update_interval`` (milliseconds) and ``git_integration``.
    """

    width: int = 40
    top_height: int | str = DEFAULT_TOP_HEIGHT
    update_interval: int = 1000
    git_integration: bool = False

    def __post_init__(self) -> None:
        if not _is_count(self.width) or self.width <= 0:
            raise ConfigError(f"width must be a positive integer, got {self.width!r}")
        if not _is_count(self.update_interval) or self.update_interval <= 0:
            raise ConfigError(
                f"update_interval must be a positive number of milliseconds, got {self.update_interval!r}"
            )
        if _is_count(self.top_height):
            if self.top_height <= 0:
                raise ConfigError(f"top_height must be positive, got {self.top_height!r}")
        elif not (isinstance(self.top_height, str) and RE_PERCENT.match(self.top_height)):
            raise ConfigError(
                f"top_height must be a line count or a percentage like '30%', got {self.top_height!r}"
            )
        if not isinstance(self.git_integration, bool):
            raise ConfigError(f"git_integration must be a boolean, got {self.git_integration!r}")

    @property
    def update_interval_seconds(self) -> float:
        return self.update_interval / 1000.0

    @classmethod
    def from_mapping(cls, opts: dict[str, Any] | None = None) -> Config:
        """Merge user options over the defaults."""
        if not opts:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(opts) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")
        return cls(**opts)

    def merged(self, **overrides: Any) -> Config:
        return replace(self, **overrides)

    def resolve_top_height(self, total_height: int) -> int:
        """Turn ``top_height`` into a line count for a panel ``total_height`` tall."""
        if isinstance(self.top_height, int):
            return self.top_height
        m = RE_PERCENT.match(self.top_height)
        if not m:
            return DEFAULT_TOP_HEIGHT
        return max(1, total_height * int(m.group(1)) // 100)


def load_config(path: str | Path) -> Config:
    """Read options from a JSON file."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {p} must contain a JSON object")
    logger.debug("Loaded config from %s: %s", p, data)
    return Config.from_mapping(data)

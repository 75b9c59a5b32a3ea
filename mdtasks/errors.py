"""Exceptions raised by mdtasks."""

from __future__ import annotations


class MdTasksError(Exception):
    """Base class for mdtasks errors."""


class ConfigError(MdTasksError, ValueError):
    """Invalid or unknown configuration option."""

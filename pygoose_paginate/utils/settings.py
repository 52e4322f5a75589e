"""Settings resolution for Document classes."""

from __future__ import annotations

from typing import Any


def _pluralize(name: str) -> str:
    """Naive pluralization for collection names."""
    lower = name.lower()
    if lower.endswith("s"):
        return lower + "es"
    if lower.endswith("y") and not lower.endswith(("ay", "ey", "iy", "oy", "uy")):
        return lower[:-1] + "ies"
    return lower + "s"


class SettingsResolver:
    """Reads configuration from a document's inner ``Settings`` class."""

    @staticmethod
    def _setting(cls: type, name: str, default: Any) -> Any:
        settings = getattr(cls, "Settings", None)
        return getattr(settings, name, default) if settings is not None else default

    @staticmethod
    def get_collection_name(cls: type) -> str:
        """Collection name from ``Settings.collection`` or the pluralized class name."""
        name = SettingsResolver._setting(cls, "collection", None)
        return name or _pluralize(cls.__name__)

    @staticmethod
    def get_connection_alias(cls: type) -> str:
        return SettingsResolver._setting(cls, "connection_alias", "default")

    @staticmethod
    def get_paginate_defaults(cls: type) -> Any:
        """Default paginate options from ``Settings.paginate_defaults``.

        Read at call time so a changed setting applies to the next call.
        """
        return SettingsResolver._setting(cls, "paginate_defaults", None)

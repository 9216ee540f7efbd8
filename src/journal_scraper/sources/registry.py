from __future__ import annotations

import logging
from typing import Callable

from journal_scraper.config import SourceSettings

from .base import Source

logger = logging.getLogger(__name__)

SourceFactory = Callable[[SourceSettings], Source]

_SOURCE_FACTORIES: dict[str, SourceFactory] = {}


class SourceRegistrationError(ValueError):
    """Raised for unknown or conflicting source types."""


def register_source(source_type: str) -> Callable[[SourceFactory], SourceFactory]:
    """Register a factory building listing sources of ``source_type``."""

    def decorator(factory: SourceFactory) -> SourceFactory:
        existing = _SOURCE_FACTORIES.get(source_type)
        if existing is not None and existing is not factory:
            raise SourceRegistrationError(f"Source type '{source_type}' is already registered")
        _SOURCE_FACTORIES[source_type] = factory
        return factory

    return decorator


def create_source(settings: SourceSettings) -> Source:
    try:
        factory = _SOURCE_FACTORIES[settings.type]
    except KeyError:
        available = ", ".join(registered_source_types()) or "none"
        raise SourceRegistrationError(
            f"Unknown source type '{settings.type}' for source '{settings.id}'. "
            f"Registered source types: {available}"
        ) from None

    logger.debug("Building %s source %s for %s", settings.type, settings.id, settings.url)
    return factory(settings)


def registered_source_types() -> list[str]:
    return sorted(_SOURCE_FACTORIES)

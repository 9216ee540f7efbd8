"""Source implementations and registry."""

from .base import Source
from .extractor import ExtractionError, element_to_article
from .html_source import HtmlListingSource
from .registry import create_source, register_source, registered_source_types

__all__ = [
    "ExtractionError",
    "HtmlListingSource",
    "Source",
    "create_source",
    "element_to_article",
    "register_source",
    "registered_source_types",
]
